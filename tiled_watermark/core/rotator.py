# -*- coding: utf-8 -*-
"""绕中心旋转水印画布。"""
from __future__ import annotations
import math

from PIL import Image

TRANSPARENT = (0, 0, 0, 0)


def rotate_canvas(canvas: Image.Image, angle: float) -> Image.Image:
    """按弧度旋转，正角度为顺时针（图像坐标 y 轴向下）。

    画布会扩大以容纳全部内容，新露出的区域完全透明。
    """
    if canvas.mode != "RGBA":
        canvas = canvas.convert("RGBA")
    # Pillow 的角度为逆时针的度数
    degrees = -math.degrees(angle)
    return canvas.rotate(
        degrees,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT,
    )
