# -*- coding: utf-8 -*-
"""文本栅格化：把多行水印文字绘制到固定尺寸的透明画布上。

画布固定为 1000x600，过长的文字会被裁掉（不会自动扩大画布）。
所有行共用同一个起始 x，而不是逐行居中，这样各行左边缘对齐。
"""
from __future__ import annotations
import logging
from typing import List, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from .errors import ResourceError, UserInputError

logger = logging.getLogger(__name__)

CANVAS_SIZE = (1000, 600)
TEXT_SCALE = 24.4  # 像素字号
LINE_GAP = 10
TRANSPARENT = (0, 0, 0, 0)


def load_font(path: str, size: float = TEXT_SCALE) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(path, size)
    except (OSError, ValueError) as e:
        raise ResourceError(f"无法加载字体 '{path}': {e}") from e


def _measure(draw: ImageDraw.ImageDraw, lines: Sequence[str],
             font: ImageFont.FreeTypeFont) -> List[Tuple[int, int]]:
    sizes = []
    for text in lines:
        w, h = draw.textbbox((0, 0), text, font=font)[2:]
        sizes.append((int(w), int(h)))
    return sizes


def shared_start_x(canvas_width: int, widths: Sequence[int]) -> int:
    """最左与最右居中起点的平均值，所有行共用。"""
    offsets = [(canvas_width - w) // 2 for w in widths]
    return (min(offsets) + max(offsets)) // 2


def line_start_y(canvas_height: int, count: int, index: int,
                 line_height: int, gap: int = LINE_GAP) -> int:
    block = (line_height + gap) * count - gap
    start = (canvas_height - block) // 2
    return start + (line_height + gap) * index


def render_text(
    lines: Sequence[str],
    font: ImageFont.FreeTypeFont,
    color: Tuple[int, int, int, int],
    *,
    size: Tuple[int, int] = CANVAS_SIZE,
    gap: int = LINE_GAP,
) -> Image.Image:
    """在透明画布上绘制多行文本，返回新图。

    参数：
    - lines: 文本行，至少一行
    - font: 已加载的字体
    - color: (r,g,b,a) 文字颜色，通常为半透明
    - size: 画布尺寸
    - gap: 行间距（像素）
    """
    if not lines:
        raise UserInputError("没有提供水印文本，请使用 --text 参数")

    width, height = size
    img = Image.new("RGBA", size, TRANSPARENT)
    draw = ImageDraw.Draw(img)

    sizes = _measure(draw, lines, font)
    x = shared_start_x(width, [w for w, _ in sizes])
    line_height = max(h for _, h in sizes)

    for index, text in enumerate(lines):
        y = line_start_y(height, len(lines), index, line_height, gap)
        draw.text((x, y), text, font=font, fill=tuple(color))

    logger.debug("rendered %d line(s) at x=%d, line height %d", len(lines), x, line_height)
    return img
