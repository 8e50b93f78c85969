# -*- coding: utf-8 -*-
"""水印流程：文本栅格化 → 旋转 → 裁剪 → 平铺 → 导出。"""
from __future__ import annotations
import logging
from typing import Sequence

from PIL import Image

from .exporter import dump_debug, output_format, save_image
from .image_loader import get_capture_date, load_image, read_exif
from .rotator import rotate_canvas
from .settings import WatermarkSettings
from .text_renderer import load_font, render_text
from .tiler import cover_with_tiles
from .trimmer import trim_canvas

logger = logging.getLogger(__name__)


def build_watermark(settings: WatermarkSettings, lines: Sequence[str]) -> Image.Image:
    """生成裁剪好的水印块。"""
    font = load_font(settings.font)

    debug_dir = settings.debug_dir

    raw = render_text(lines, font, settings.color)
    if debug_dir:
        dump_debug(raw, debug_dir, "watermark_raw.png")
    rotated = rotate_canvas(raw, settings.angle)
    if debug_dir:
        dump_debug(rotated, debug_dir, "watermark_rotated.png")
    trimmed = trim_canvas(rotated, empty_alpha=settings.alpha, margin=settings.margin)
    if debug_dir:
        dump_debug(trimmed, debug_dir, "watermark_trimmed.png")
    logger.debug("watermark tile %dx%d", trimmed.width, trimmed.height)
    return trimmed


def apply_watermark(settings: WatermarkSettings) -> str:
    """完整运行一次，返回输出路径。输出文件只在全部成功后写入。"""
    output_format(settings.output)
    lines = list(settings.text)
    if settings.with_date:
        date_str = get_capture_date(settings.input)
        if date_str:
            lines.append(date_str)
        else:
            logger.warning("no capture date found in %s", settings.input)

    watermark = build_watermark(settings, lines)
    base = load_image(settings.input)
    covered = cover_with_tiles(base, watermark)
    return save_image(covered, settings.output, quality=settings.quality,
                      exif=read_exif(settings.input))
