from __future__ import annotations

from functools import lru_cache
import json
from pathlib import Path
from typing import Any, Callable

import numpy as np
from PIL import Image, ImageFont

from wireframe_core.scene.model import (
    Color,
    CompoundDecorations,
    Decoration,
    ImageContent,
    Insets,
    NodeContent,
    Rect,
    SceneNode,
    ShapeDecoration,
    TRANSPARENT,
    TextContent,
)


class SceneFormatError(ValueError):
    pass


class PillowTextMeasurer:
    """Measures text run advance widths with a Pillow font."""

    def __init__(self, font_path: str | None = None, size_px: float = 14.0) -> None:
        if size_px <= 0:
            raise ValueError("font size must be > 0")
        self._font = _load_font(font_path, size_px)

    def __call__(self, text: str) -> float:
        if text == "":
            return 0.0
        return float(self._font.getlength(text))


def load_scene(path: str | Path, *, measurer: Callable[[str], float] | None = None) -> SceneNode:
    scene_path = Path(path)
    try:
        raw = json.loads(scene_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SceneFormatError(f"invalid scene JSON in {scene_path}: {exc}") from exc
    return scene_from_dict(raw, measurer=measurer, base_dir=scene_path.parent)


def scene_from_dict(
    raw: dict[str, Any],
    *,
    measurer: Callable[[str], float] | None = None,
    base_dir: Path | None = None,
) -> SceneNode:
    """Build a scene tree from its JSON description.

    Node keys: `bounds` [left, top, width, height], `visible`, `padding`
    [left, top, right, bottom], `background`, `text` | `image`, `children`.
    """
    return _SceneParser(measurer or PillowTextMeasurer(), base_dir or Path.cwd()).node(raw, "root")


def parse_color(value: str) -> Color:
    if not isinstance(value, str):
        raise SceneFormatError(f"color must be a string, got {type(value).__name__}")
    text = value.strip()
    if not text.startswith("#"):
        raise SceneFormatError(f"color must be #RRGGBB or #RRGGBBAA, got `{value}`")
    raw = text[1:]
    if len(raw) not in (6, 8):
        raise SceneFormatError(f"color must be #RRGGBB or #RRGGBBAA, got `{value}`")
    try:
        r = int(raw[0:2], 16)
        g = int(raw[2:4], 16)
        b = int(raw[4:6], 16)
        a = int(raw[6:8], 16) if len(raw) == 8 else 255
    except ValueError as exc:
        raise SceneFormatError(f"invalid hex color `{value}`") from exc
    return (r, g, b, a)


class _SceneParser:
    def __init__(self, measurer: Callable[[str], float], base_dir: Path) -> None:
        self._measurer = measurer
        self._base_dir = base_dir

    def node(self, raw: object, where: str) -> SceneNode:
        if not isinstance(raw, dict):
            raise SceneFormatError(f"{where}: node must be an object")
        left, top, width, height = _int_list(raw.get("bounds"), 4, f"{where}.bounds")
        padding = Insets(*_int_list(raw.get("padding", [0, 0, 0, 0]), 4, f"{where}.padding"))
        if "text" in raw and "image" in raw:
            raise SceneFormatError(f"{where}: node cannot have both text and image content")
        content: NodeContent = None
        if "text" in raw:
            content = self.text(raw["text"], f"{where}.text")
        elif "image" in raw:
            image = raw["image"]
            content = ImageContent(image=None if image is None else self.decoration(image, f"{where}.image"))
        children_raw = raw.get("children", [])
        if not isinstance(children_raw, list):
            raise SceneFormatError(f"{where}.children must be a list")
        background = raw.get("background")
        return SceneNode(
            left=left,
            top=top,
            width=width,
            height=height,
            visible=_bool(raw.get("visible", True), f"{where}.visible"),
            padding=padding,
            background=None if background is None else self.decoration(background, f"{where}.background"),
            content=content,
            children=tuple(self.node(child, f"{where}.children[{i}]") for i, child in enumerate(children_raw)),
        )

    def text(self, raw: object, where: str) -> TextContent:
        if not isinstance(raw, dict):
            raise SceneFormatError(f"{where} must be an object")
        lines = raw.get("lines", [])
        if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
            raise SceneFormatError(f"{where}.lines must be a list of strings")
        line_height = raw.get("line_height")
        if not isinstance(line_height, (int, float)) or line_height <= 0:
            raise SceneFormatError(f"{where}.line_height must be > 0")
        line_widths = None
        if raw.get("line_widths") is not None:
            widths = raw["line_widths"]
            if not isinstance(widths, list) or len(widths) != len(lines):
                raise SceneFormatError(f"{where}.line_widths must match lines")
            line_widths = tuple(_number(w, f"{where}.line_widths[{i}]") for i, w in enumerate(widths))
        compound_raw = raw.get("compound", {})
        if not isinstance(compound_raw, dict):
            raise SceneFormatError(f"{where}.compound must be an object")
        slots = {}
        for slot in ("start", "top", "end", "bottom"):
            if compound_raw.get(slot) is not None:
                slots[slot] = self.decoration(compound_raw[slot], f"{where}.compound.{slot}")
        check_mark = raw.get("check_mark")
        return TextContent(
            lines=tuple(lines),
            line_height=float(line_height),
            measure=self._measurer,
            color=parse_color(raw.get("color", "#000000")),
            compound=CompoundDecorations(**slots),
            decoration_gap=int(_number(raw.get("gap", 0), f"{where}.gap")),
            check_mark=None if check_mark is None else self.decoration(check_mark, f"{where}.check_mark"),
            line_widths=line_widths,
        )

    def decoration(self, raw: object, where: str) -> Decoration:
        if not isinstance(raw, dict):
            raise SceneFormatError(f"{where} must be an object")
        pixels = None
        if "path" in raw:
            pixels = self._load_pixels(raw["path"], where)
        if "intrinsic" in raw:
            intrinsic_w, intrinsic_h = _int_list(raw["intrinsic"], 2, f"{where}.intrinsic")
        elif pixels is not None:
            intrinsic_h, intrinsic_w = pixels.shape[:2]
        else:
            # Flat colors have no intrinsic size unless one is given.
            intrinsic_w, intrinsic_h = -1, -1
        if "bounds" in raw:
            bounds = Rect(*(float(v) for v in _int_list(raw["bounds"], 4, f"{where}.bounds")))
        else:
            bounds = Rect(0, 0, max(0, intrinsic_w), max(0, intrinsic_h))
        color = parse_color(raw["color"]) if raw.get("color") is not None else None
        shape = raw.get("shape")
        if shape is not None:
            if not isinstance(shape, dict):
                raise SceneFormatError(f"{where}.shape must be an object")
            try:
                return ShapeDecoration(
                    intrinsic_width=intrinsic_w,
                    intrinsic_height=intrinsic_h,
                    bounds=bounds,
                    color=color,
                    pixels=pixels,
                    fill=parse_color(shape["fill"]) if shape.get("fill") is not None else (color or TRANSPARENT),
                    corner_radius=float(shape.get("corner_radius", 0.0)),
                    corner_style=shape.get("corner_style", "rounded"),
                )
            except (TypeError, ValueError) as exc:
                if isinstance(exc, SceneFormatError):
                    raise
                raise SceneFormatError(f"{where}.shape: {exc}") from exc
        return Decoration(
            intrinsic_width=intrinsic_w,
            intrinsic_height=intrinsic_h,
            bounds=bounds,
            color=color,
            pixels=pixels,
        )

    def _load_pixels(self, value: object, where: str) -> np.ndarray:
        if not isinstance(value, str) or not value:
            raise SceneFormatError(f"{where}.path must be a non-empty string")
        path = Path(value)
        if not path.is_absolute():
            path = self._base_dir / path
        try:
            with Image.open(path) as image:
                return np.asarray(image.convert("RGBA"), dtype=np.uint8)
        except OSError as exc:
            raise SceneFormatError(f"{where}: cannot load image {path}: {exc}") from exc


def _int_list(value: object, size: int, where: str) -> list[int]:
    if not isinstance(value, list) or len(value) != size:
        raise SceneFormatError(f"{where} must be a list of {size} numbers")
    out: list[int] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise SceneFormatError(f"{where} must be a list of {size} numbers")
        out.append(int(item))
    return out


def _number(value: object, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneFormatError(f"{where} must be a number")
    return float(value)


def _bool(value: object, where: str) -> bool:
    if not isinstance(value, bool):
        raise SceneFormatError(f"{where} must be true or false")
    return value


@lru_cache(maxsize=64)
def _load_font(font_path: str | None, size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(size_px)))
    if font_path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(font_path, size=size)
    except OSError:
        return ImageFont.load_default(size=size)
