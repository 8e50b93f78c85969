# -*- coding: utf-8 -*-
"""把水印块平铺到整张图片上。

网格从 (-60, -40) 开始，左上角的水印块会部分超出图片，
之后按水印块尺寸步进，直到覆盖整张图片为止。
"""
from __future__ import annotations
import logging
from typing import List, Tuple

from PIL import Image

from .errors import GeometryError

logger = logging.getLogger(__name__)

X_BIAS = 60
Y_BIAS = 40


def tile_positions(base_size: Tuple[int, int], tile_size: Tuple[int, int]) -> List[Tuple[int, int]]:
    """返回所有水印块左上角坐标，每个位置都与图片有重叠。"""
    W, H = base_size
    tw, th = tile_size
    if tw <= 0 or th <= 0:
        raise GeometryError(f"水印块尺寸无效: {tw}x{th}")
    xs = [x for x in range(-X_BIAS, W, tw) if x + tw > 0]
    ys = [y for y in range(-Y_BIAS, H, th) if y + th > 0]
    return [(x, y) for x in xs for y in ys]


def _overlay(base: Image.Image, tile: Image.Image, x: int, y: int) -> None:
    # alpha_composite 不接受负坐标，超出左/上边的部分从水印块中裁掉
    src_x, src_y = max(0, -x), max(0, -y)
    dst_x, dst_y = max(0, x), max(0, y)
    w = min(tile.width - src_x, base.width - dst_x)
    h = min(tile.height - src_y, base.height - dst_y)
    if w <= 0 or h <= 0:
        return
    base.alpha_composite(tile, dest=(dst_x, dst_y), source=(src_x, src_y, src_x + w, src_y + h))


def cover_with_tiles(base: Image.Image, tile: Image.Image) -> Image.Image:
    """在 base 的 RGBA 副本上反复叠加水印块（src-over），返回新图。"""
    if base.mode != "RGBA":
        img = base.convert("RGBA")
    else:
        img = base.copy()
    if tile.mode != "RGBA":
        tile = tile.convert("RGBA")

    positions = tile_positions(img.size, tile.size)
    for x, y in positions:
        _overlay(img, tile, x, y)
    logger.info("stamped %d tile(s) of %dx%d onto %dx%d image",
                len(positions), tile.width, tile.height, img.width, img.height)
    return img
