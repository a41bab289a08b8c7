#!/usr/bin/env python3
"""Generate a before/after comparison GIF from two images."""

from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from compare_gif_web import configure_logging, run_web_app
from frame_generation import generate_comparison
from image_io import DEFAULT_DELAY_MS, DEFAULT_LOOP_COUNT, decode_pair_async
from label_overlay.errors import CompositeError
from label_overlay.fonts import DEFAULT_FONT_FACE
from label_overlay.label_types import LabelConfig


def _labels_from_args(args: argparse.Namespace) -> tuple[LabelConfig, LabelConfig]:
    shared = dict(
        x=args.x,
        y=args.y,
        font_size=args.font_size,
        font_face=args.font_face,
        color=args.color,
        background_color=args.background_color,
        background_opacity=args.background_opacity,
        padding=args.padding,
    )
    return (
        LabelConfig(text=args.label1, **shared),
        LabelConfig(text=args.label2, **shared),
    )


def write_comparison(
    image1_path: Path,
    image2_path: Path,
    output_path: Path,
    label1: LabelConfig,
    label2: LabelConfig,
    delay_ms: int,
    loop_count: int,
) -> str:
    """Decode both images, build the GIF and write it to ``output_path``."""

    image1, image2 = asyncio.run(
        decode_pair_async(image1_path.read_bytes(), image2_path.read_bytes())
    )
    gif_bytes = generate_comparison(image1, image2, label1, label2, delay_ms, loop_count)
    output_path.write_bytes(gif_bytes)
    return f"Wrote {output_path} ({image1.width}x{image1.height}, {len(gif_bytes)} bytes)"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for generating a comparison GIF."""

    load_dotenv()
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Two labelled images -> looping before/after GIF"
    )
    parser.add_argument("image1", nargs="?", help="First frame image.")
    parser.add_argument("image2", nargs="?", help="Second frame image.")
    parser.add_argument(
        "-o", "--output",
        default="comparison.gif",
        help="Output GIF path (default: comparison.gif).",
    )
    parser.add_argument("--label1", default="before", help="Text for the first frame.")
    parser.add_argument("--label2", default="after", help="Text for the second frame.")
    parser.add_argument(
        "--x",
        type=float,
        default=10.0,
        help="Label left position in image pixels (default: 10).",
    )
    parser.add_argument(
        "--y",
        type=float,
        default=10.0,
        help="Label top position in image pixels (default: 10).",
    )
    parser.add_argument("--font-size", type=float, default=90.0)
    parser.add_argument("--font-face", default=DEFAULT_FONT_FACE)
    parser.add_argument("--color", default="#ffffff")
    parser.add_argument("--background-color", default="#000000")
    parser.add_argument(
        "--background-opacity",
        type=float,
        default=0.0,
        help="Label background alpha between 0 and 1 (default: 0, text only).",
    )
    parser.add_argument("--padding", type=float, default=8.0)
    parser.add_argument(
        "--delay",
        type=int,
        default=int(os.getenv("COMPARE_GIF_DELAY_MS", DEFAULT_DELAY_MS)),
        help="Delay between frames in milliseconds.",
    )
    parser.add_argument(
        "--loop",
        type=int,
        default=int(os.getenv("COMPARE_GIF_LOOP", DEFAULT_LOOP_COUNT)),
        help="Loop count, 0 loops forever (default: 0).",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Start the web API instead of generating a file.",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host/IP for the web API (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=3000,
        help="Port for the web API (default: 3000).",
    )

    args = parser.parse_args(argv)

    if args.web:
        run_web_app(host=args.web_host, port=args.web_port)
        return 0

    if not args.image1 or not args.image2:
        parser.error("image1 and image2 are required unless --web is given")

    label1, label2 = _labels_from_args(args)
    try:
        message = write_comparison(
            Path(args.image1),
            Path(args.image2),
            Path(args.output),
            label1,
            label2,
            args.delay,
            args.loop,
        )
    except CompositeError as exc:
        raise SystemExit(str(exc)) from exc

    print(message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
