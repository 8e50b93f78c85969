# -*- coding: utf-8 -*-
"""图片加载与 EXIF 读取。

职责：
- 解码底图并转为 RGBA
- 读取 EXIF（用于拍摄日期水印及导出时保留元数据）
"""
from __future__ import annotations
import logging
import struct
from typing import Optional

import piexif
from PIL import Image, UnidentifiedImageError

from .errors import ResourceError

logger = logging.getLogger(__name__)


def load_image(path: str) -> Image.Image:
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except FileNotFoundError as e:
        raise ResourceError(f"找不到输入图片 '{path}'") from e
    except (UnidentifiedImageError, OSError) as e:
        raise ResourceError(f"无法解码输入图片 '{path}': {e}") from e


def read_exif(path: str) -> Optional[dict]:
    """返回 piexif 格式的 EXIF；没有可用 EXIF 时返回 None。"""
    try:
        exif_dict = piexif.load(path)
    except (OSError, ValueError, struct.error, piexif.InvalidImageDataError) as e:
        logger.debug("no usable EXIF in %s: %s", path, e)
        return None
    if not any(exif_dict.get(ifd) for ifd in ("0th", "Exif", "GPS", "1st")):
        return None
    return exif_dict


def get_capture_date(path: str) -> Optional[str]:
    """从 EXIF 中取拍摄日期，格式 YYYY-MM-DD。"""
    exif_dict = read_exif(path)
    if exif_dict is None:
        return None
    try:
        date_time = exif_dict['Exif'][piexif.ExifIFD.DateTimeOriginal].decode('utf-8')
        return date_time.split(' ')[0].replace(':', '-')
    except (KeyError, ValueError, AttributeError):
        return None
