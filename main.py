from __future__ import annotations

import argparse
import logging
from pathlib import Path

from PIL import Image

from wireframe_core.config import load_config
from wireframe_core.core import WireframeRecorder, store_canvas
from wireframe_core.render import DominantColorExtractor
from wireframe_core.scene import PillowTextMeasurer, load_scene


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="wireframe")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [wireframe] table.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a JSON scene description to a wireframe PNG.")
    render.add_argument("scene", type=Path)
    render.add_argument("--out-dir", type=Path, default=Path("."))
    render.add_argument("--font", type=str, default=None, help="TrueType font used to measure text runs.")
    render.add_argument("--font-size", type=float, default=14.0)

    dominant = sub.add_parser("dominant-color", help="Print the dominant opaque color of an image.")
    dominant.add_argument("image", type=Path)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config)

    if args.command == "render":
        root = load_scene(args.scene, measurer=PillowTextMeasurer(args.font, args.font_size))
        canvas = WireframeRecorder(config=config).render_wireframe(root)
        args.out_dir.mkdir(parents=True, exist_ok=True)
        path = store_canvas(canvas, args.out_dir, config=config)
        if path is None:
            return 1
        print(path)
        return 0

    if args.command == "dominant-color":
        with Image.open(args.image) as image:
            r, g, b, a = DominantColorExtractor(config).extract(image)
        print(f"#{r:02x}{g:02x}{b:02x}{a:02x}")
        return 0

    raise ValueError(f"unsupported command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
