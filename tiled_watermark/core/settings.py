# -*- coding: utf-8 -*-
"""水印参数。

- WatermarkSettings：一次运行的全部参数，创建时即校验，之后不可变
- parse_color：解析 'R,G,B,A' 颜色字符串
- load_settings：读取 JSON 配置文件，不存在时写出默认配置
"""
from __future__ import annotations
import json
import math
import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import UserInputError

Color = Tuple[int, int, int, int]

DEFAULT_FONT = "./msyh.ttc"
DEFAULT_INPUT = "./input.png"
DEFAULT_OUTPUT = "./output.png"
DEFAULT_ROTATE = -6.0
DEFAULT_COLOR: Color = (0, 0, 0, 100)
DEFAULT_MARGIN = 10
DEFAULT_ALPHA = 0
DEFAULT_QUALITY = 90


def parse_color(s: str) -> Color:
    parts = s.split(',')
    if len(parts) != 4:
        raise UserInputError(f"颜色格式应为 'R,G,B,A'，但得到 '{s}'")
    color = []
    for part in parts:
        try:
            value = int(part.strip())
        except ValueError:
            raise UserInputError(f"无法将 '{part}' 解析为 0-255 之间的数字") from None
        if not 0 <= value <= 255:
            raise UserInputError(f"无法将 '{part}' 解析为 0-255 之间的数字")
        color.append(value)
    return tuple(color)  # type: ignore[return-value]


def _coerce_color(value: Union[str, list, tuple]) -> Color:
    if isinstance(value, str):
        return parse_color(value)
    return parse_color(",".join(str(v) for v in value))


def _coerce_text(value: Union[str, list, tuple, None]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    # 空行和只有空白的行不算水印文本
    return tuple(str(v) for v in value if str(v).strip())


@dataclass(frozen=True)
class WatermarkSettings:
    text: Tuple[str, ...]
    font: str = DEFAULT_FONT
    input: str = DEFAULT_INPUT
    output: str = DEFAULT_OUTPUT
    rotate: float = DEFAULT_ROTATE  # 角度 = pi / rotate
    color: Color = DEFAULT_COLOR
    margin: int = DEFAULT_MARGIN
    alpha: int = DEFAULT_ALPHA  # 裁剪时视为“空白”的 alpha 值
    with_date: bool = False
    quality: int = DEFAULT_QUALITY
    debug_dir: Optional[str] = field(default=None)

    def __post_init__(self):
        if not any(line.strip() for line in self.text):
            raise UserInputError("没有提供水印文本，请使用 --text 参数")
        if self.rotate == 0:
            raise UserInputError("旋转除数不能为 0")
        if self.margin < 0:
            raise UserInputError(f"margin 不能为负数，得到 {self.margin}")
        if not 0 <= self.alpha <= 255:
            raise UserInputError(f"alpha 应在 0-255 之间，得到 {self.alpha}")
        if not 1 <= self.quality <= 100:
            raise UserInputError(f"quality 应在 1-100 之间，得到 {self.quality}")
        if len(self.color) != 4 or any(not 0 <= c <= 255 for c in self.color):
            raise UserInputError(f"颜色应为四个 0-255 之间的数字，得到 {self.color}")

    @property
    def angle(self) -> float:
        """旋转角度（弧度）。"""
        return math.pi / self.rotate

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WatermarkSettings":
        """从 dict 构造，忽略未知键。"""
        kwargs: Dict[str, Any] = {}
        kwargs["text"] = _coerce_text(data.get("text"))
        for key in ("font", "input", "output"):
            if data.get(key) is not None:
                kwargs[key] = str(data[key])
        try:
            if data.get("rotate") is not None:
                kwargs["rotate"] = float(data["rotate"])
            for key in ("margin", "alpha", "quality"):
                if data.get(key) is not None:
                    kwargs[key] = int(data[key])
        except (TypeError, ValueError) as e:
            raise UserInputError(f"配置项格式错误: {e}") from e
        if data.get("color") is not None:
            kwargs["color"] = _coerce_color(data["color"])
        if data.get("with_date") is not None:
            if not isinstance(data["with_date"], bool):
                raise UserInputError(f"with_date 应为 true 或 false，得到 {data['with_date']!r}")
            kwargs["with_date"] = data["with_date"]
        if data.get("debug_dir"):
            kwargs["debug_dir"] = str(data["debug_dir"])
        return cls(**kwargs)

    def to_mapping(self) -> Dict[str, Any]:
        data = asdict(self)
        data["text"] = list(self.text)
        data["color"] = list(self.color)
        return data


def default_settings() -> Dict[str, Any]:
    """默认配置（text 没有默认值，保存为空列表）。"""
    return {
        "text": [],
        "font": DEFAULT_FONT,
        "input": DEFAULT_INPUT,
        "output": DEFAULT_OUTPUT,
        "rotate": DEFAULT_ROTATE,
        "color": list(DEFAULT_COLOR),
        "margin": DEFAULT_MARGIN,
        "alpha": DEFAULT_ALPHA,
        "with_date": False,
        "quality": DEFAULT_QUALITY,
        "debug_dir": None,
    }


def _write_json(path: str, data) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_settings(path: str) -> Dict[str, Any]:
    """读取配置文件；不存在时写出默认配置并返回默认值。

    返回的是与默认值合并后的 dict，尚未校验（text 可能为空，交给 CLI 合并）。
    """
    settings = default_settings()
    if not os.path.exists(path):
        try:
            _write_json(path, settings)
        except OSError as e:
            raise UserInputError(f"无法创建默认配置文件 '{path}': {e}") from e
        return settings
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise UserInputError(f"无法读取配置文件 '{path}': {e}") from e
    if not isinstance(data, dict):
        raise UserInputError(f"配置文件 '{path}' 顶层应为对象")
    settings.update({k: v for k, v in data.items() if k in settings})
    return settings
