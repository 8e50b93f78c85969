# -*- coding: utf-8 -*-
"""程序入口：解析命令行参数并运行水印流程。"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Any, Dict, Optional, Sequence

from tiled_watermark.core.errors import WatermarkError
from tiled_watermark.core.pipeline import apply_watermark
from tiled_watermark.core.settings import (
    WatermarkSettings,
    default_settings,
    load_settings,
    parse_color,
)

__version__ = "0.1.0"


def _color_arg(s: str):
    # argparse 只把 ValueError/TypeError/ArgumentTypeError 当作参数错误
    try:
        return parse_color(s)
    except WatermarkError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiled-watermark",
        description="Cover an image with a repeated, rotated, semi-transparent text watermark.",
    )
    parser.add_argument("-t", "--text", action="append", help="Watermark line; repeat for multiple lines.")
    parser.add_argument("-f", "--font", help="Path to a TrueType/OpenType font (default: ./msyh.ttc).")
    parser.add_argument("-i", "--input", help="Image to watermark (default: ./input.png).")
    parser.add_argument("-o", "--output", help="Where to write the result (default: ./output.png).")
    parser.add_argument("-r", "--rotate", type=float,
                        help="Rotation divisor, angle = pi / ROTATE radians (default: -6).")
    parser.add_argument("-c", "--color", type=_color_arg, help="Text color as R,G,B,A (default: 0,0,0,100).")
    parser.add_argument("-m", "--margin", type=int, help="Transparent border kept around the tile (default: 10).")
    parser.add_argument("-a", "--alpha", type=int, help="Alpha value treated as empty when trimming (default: 0).")
    parser.add_argument("--with-date", action="store_true", default=None,
                        help="Append the photo's EXIF capture date as an extra line.")
    parser.add_argument("--quality", type=int, help="JPEG quality 1-100 (default: 90).")
    parser.add_argument("--debug", nargs="?", const=".", default=None, metavar="DIR",
                        help="Write intermediate watermark images to DIR (default: current directory).")
    parser.add_argument("--config", metavar="PATH",
                        help="JSON settings file; created with defaults if missing.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress details.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_settings(args: argparse.Namespace) -> WatermarkSettings:
    """默认值 ← 配置文件 ← 命令行显式参数。"""
    values: Dict[str, Any] = load_settings(args.config) if args.config else default_settings()
    overrides = {
        "text": args.text,
        "font": args.font,
        "input": args.input,
        "output": args.output,
        "rotate": args.rotate,
        "color": args.color,
        "margin": args.margin,
        "alpha": args.alpha,
        "with_date": args.with_date,
        "quality": args.quality,
        "debug_dir": args.debug,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return WatermarkSettings.from_mapping(values)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = resolve_settings(args)
        output = apply_watermark(settings)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"水印已添加，输出文件: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
