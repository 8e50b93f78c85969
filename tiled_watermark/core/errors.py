# -*- coding: utf-8 -*-
"""水印流程中的异常类型。

所有异常都继承自 WatermarkError，CLI 只在入口处统一捕获并报告。
"""
from __future__ import annotations


class WatermarkError(Exception):
    """Base exception for all watermarking operations."""


class UserInputError(WatermarkError):
    """缺少文本、颜色格式错误等用户输入问题。"""


class ResourceError(WatermarkError):
    """字体或输入图片无法读取/解析。"""


class GeometryError(WatermarkError):
    """裁剪或平铺时尺寸计算越界。"""


class OutputError(WatermarkError):
    """写出结果图片失败。"""

    def __init__(self, path: str, reason: object):
        self.path = path
        super().__init__(f"无法写入 '{path}': {reason}")
