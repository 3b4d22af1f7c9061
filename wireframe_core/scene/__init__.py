from .loader import PillowTextMeasurer, SceneFormatError, load_scene, parse_color, scene_from_dict
from .model import (
    TRANSPARENT,
    Color,
    CompoundDecorations,
    Decoration,
    ImageContent,
    Insets,
    NodeContent,
    Rect,
    SceneNode,
    ShapeDecoration,
    SupportsShapeDraw,
    TextContent,
)

__all__ = [
    "Color",
    "CompoundDecorations",
    "Decoration",
    "ImageContent",
    "Insets",
    "NodeContent",
    "PillowTextMeasurer",
    "Rect",
    "SceneFormatError",
    "SceneNode",
    "ShapeDecoration",
    "SupportsShapeDraw",
    "TRANSPARENT",
    "TextContent",
    "load_scene",
    "parse_color",
    "scene_from_dict",
]
