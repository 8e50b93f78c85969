# -*- coding: utf-8 -*-
"""导出水印图片。

- 输出格式：按扩展名由 Pillow 决定；JPEG 等不支持透明的格式转为 RGB
- 先写到同目录的临时文件，成功后再替换目标，失败时不留下半成品
- 可选保留原图 EXIF（piexif）
- 调试模式下写出中间画布
"""
from __future__ import annotations
import logging
import os
import struct
import tempfile
from typing import Optional

import piexif
from PIL import Image

from .errors import OutputError, UserInputError

logger = logging.getLogger(__name__)

ALPHA_FORMATS = {'PNG', 'WEBP', 'TIFF', 'GIF'}
EXIF_FORMATS = {'JPEG', 'PNG', 'WEBP'}


def output_format(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    Image.init()
    fmt = Image.registered_extensions().get(ext)
    if fmt is None:
        raise UserInputError(f"无法根据扩展名确定输出格式: '{path}'")
    if fmt not in Image.SAVE:
        raise UserInputError(f"Pillow 不支持写出 {fmt} 格式: '{path}'")
    return fmt


def _dump_exif(exif: dict) -> Optional[bytes]:
    # 缩略图可能与新图不符，去掉
    exif = dict(exif)
    exif.pop('thumbnail', None)
    exif['1st'] = {}
    try:
        return piexif.dump(exif)
    except (ValueError, TypeError, KeyError, struct.error) as e:
        logger.warning("dropping EXIF that cannot be re-encoded: %s", e)
        return None


def save_image(image: Image.Image, path: str, *, quality: int = 90,
               exif: Optional[dict] = None) -> str:
    """保存图片，返回目标路径。"""
    fmt = output_format(path)
    out = image if fmt in ALPHA_FORMATS else image.convert('RGB')
    params = {}
    if fmt == 'JPEG':
        params.update(quality=int(quality), optimize=True)
    if exif and fmt in EXIF_FORMATS:
        exif_bytes = _dump_exif(exif)
        if exif_bytes:
            params['exif'] = exif_bytes

    target_dir = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(target_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix='.tmp-', suffix=os.path.splitext(path)[1], dir=target_dir)
        with os.fdopen(fd, 'wb') as f:
            out.save(f, format=fmt, **params)
        os.replace(tmp_path, path)
        tmp_path = None
    except (OSError, ValueError, KeyError) as e:
        raise OutputError(path, e) from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
    logger.info("saved %s (%s, %dx%d)", path, fmt, out.width, out.height)
    return path


def dump_debug(image: Image.Image, debug_dir: str, name: str) -> str:
    """写出中间画布（PNG）。"""
    target = os.path.join(debug_dir, name)
    try:
        os.makedirs(debug_dir, exist_ok=True)
        image.save(target, format='PNG')
    except (OSError, ValueError) as e:
        raise OutputError(target, e) from e
    logger.debug("debug image written to %s", target)
    return target
