# -*- coding: utf-8 -*-
"""按透明度裁掉水印画布四周的空白。

某一行（列）所有像素的 alpha 都等于 empty_alpha 时视为空行（列）。
上、左、下三边各保留 margin 像素的空白；右侧保留固定的 50 像素，
这是沿用的裁剪策略，两者并不对称。
"""
from __future__ import annotations
import logging
from typing import Iterable, Tuple

from PIL import Image

from .errors import GeometryError

logger = logging.getLogger(__name__)

TRAILING_COLUMN_KEEP = 50


def _scan_runs(lines: Iterable[bytes], empty_alpha: int) -> Tuple[int, int, bool]:
    """单次正向扫描，返回 (开头空行数, 结尾空行数, 是否有内容)。

    开头的空行数只在第一次遇到非空行时记录。
    """
    leading, run, found = 0, 0, False
    for line in lines:
        if is_empty_run(line, empty_alpha):
            run += 1
            continue
        if not found:
            leading, found = run, True
        run = 0
    return leading, run, found


def is_empty_run(line: bytes, empty_alpha: int) -> bool:
    return line.count(empty_alpha) == len(line)


def _rows(alpha: Image.Image) -> Iterable[bytes]:
    data = alpha.tobytes()
    w = alpha.width
    for y in range(alpha.height):
        yield data[y * w:(y + 1) * w]


def _crop_span(length: int, leading: int, trailing: int,
               lead_keep: int, trail_keep: int) -> Tuple[int, int]:
    start = leading - lead_keep if leading > lead_keep else 0
    end = length
    if trailing > trail_keep:
        end -= trailing - trail_keep
    return start, end


def trim_canvas(canvas: Image.Image, empty_alpha: int = 0, margin: int = 10) -> Image.Image:
    """裁剪空白边，返回新图（坐标从 (0, 0) 开始）。"""
    if canvas.mode != "RGBA":
        canvas = canvas.convert("RGBA")
    width, height = canvas.size
    if margin >= width or margin >= height:
        raise GeometryError(f"margin {margin} 超出画布尺寸 {width}x{height}")

    alpha = canvas.getchannel("A")
    top_run, bottom_run, has_rows = _scan_runs(_rows(alpha), empty_alpha)
    left_run, right_run, has_cols = _scan_runs(
        _rows(alpha.transpose(Image.Transpose.TRANSPOSE)), empty_alpha)
    if not (has_rows and has_cols):
        raise GeometryError("水印画布完全透明，无法裁剪")

    top, bottom = _crop_span(height, top_run, bottom_run, margin, margin)
    left, right = _crop_span(width, left_run, right_run, margin, TRAILING_COLUMN_KEEP)
    if right <= left or bottom <= top:
        raise GeometryError(
            f"裁剪区域无效: left={left}, top={top}, right={right}, bottom={bottom}")

    logger.debug("trim %dx%d -> box (%d, %d, %d, %d)", width, height, left, top, right, bottom)
    return canvas.crop((left, top, right, bottom))
