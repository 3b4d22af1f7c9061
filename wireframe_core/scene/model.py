from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal, Protocol, TypeAlias, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from wireframe_core.render.canvas import RasterCanvas


Color = tuple[int, int, int, int]
TRANSPARENT: Color = (0, 0, 0, 0)

CornerStyle = Literal["rounded", "cut"]
NodeKind = Literal["text", "image", "container"]


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)


@dataclass(frozen=True)
class Insets:
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0


@dataclass(frozen=True, eq=False)
class Decoration:
    """Paintable element: a flat color or a pre-rasterized RGBA pixel buffer.

    `bounds` is relative to the origin the decoration is painted at. The
    pixel buffer is shared with the provider and must never be mutated.
    """

    intrinsic_width: int
    intrinsic_height: int
    bounds: Rect = Rect(0, 0, 0, 0)
    color: Color | None = None
    pixels: np.ndarray | None = None

    @property
    def is_flat_color(self) -> bool:
        return self.color is not None

    @property
    def has_intrinsic_size(self) -> bool:
        return self.intrinsic_width > 0 and self.intrinsic_height > 0

    def rasterize(self) -> np.ndarray:
        if self.pixels is not None:
            return self.pixels
        return np.zeros((max(0, self.intrinsic_height), max(0, self.intrinsic_width), 4), dtype=np.uint8)


@runtime_checkable
class SupportsShapeDraw(Protocol):
    """Decoration able to render its own silhouette into a canvas rectangle."""

    def draw_shape(self, canvas: "RasterCanvas", rect: Rect) -> None:
        ...


@dataclass(frozen=True, eq=False)
class ShapeDecoration(Decoration):
    """Themed shape background with rounded or cut corners."""

    fill: Color = TRANSPARENT
    corner_radius: float = 0.0
    corner_style: CornerStyle = "rounded"

    def __post_init__(self) -> None:
        if self.corner_radius < 0:
            raise ValueError("ShapeDecoration corner_radius must be >= 0")
        if self.corner_style not in ("rounded", "cut"):
            raise ValueError(f"unknown corner style: {self.corner_style}")

    def draw_shape(self, canvas: "RasterCanvas", rect: Rect) -> None:
        if self.corner_style == "cut":
            canvas.fill_cut_rect(rect, self.corner_radius, self.fill)
        else:
            canvas.fill_round_rect(rect, self.corner_radius, self.fill)

    def rasterize(self) -> np.ndarray:
        from wireframe_core.render.canvas import RasterCanvas

        scratch = RasterCanvas(self.intrinsic_width, self.intrinsic_height)
        try:
            self.draw_shape(scratch, Rect(0, 0, self.intrinsic_width, self.intrinsic_height))
            return scratch.to_numpy()
        finally:
            scratch.release()


@dataclass(frozen=True)
class CompoundDecorations:
    start: Decoration | None = None
    top: Decoration | None = None
    end: Decoration | None = None
    bottom: Decoration | None = None

    def positioned(self) -> tuple[tuple[str, Decoration], ...]:
        slots = (("start", self.start), ("top", self.top), ("end", self.end), ("bottom", self.bottom))
        return tuple((slot, deco) for slot, deco in slots if deco is not None)


@dataclass(frozen=True)
class TextContent:
    lines: tuple[str, ...]
    line_height: float
    measure: Callable[[str], float]
    color: Color = (0, 0, 0, 255)
    compound: CompoundDecorations = CompoundDecorations()
    decoration_gap: int = 0
    check_mark: Decoration | None = None
    # Fixed per-line widths, in line order; overrides `measure` when set.
    line_widths: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        if self.line_widths is not None and len(self.line_widths) != len(self.lines):
            raise ValueError("TextContent line_widths must match lines")

    def line_width(self, index: int) -> float:
        if self.line_widths is not None:
            return self.line_widths[index]
        return self.measure(self.lines[index])


@dataclass(frozen=True)
class ImageContent:
    image: Decoration | None


NodeContent: TypeAlias = TextContent | ImageContent | None


@dataclass(frozen=True)
class SceneNode:
    """Read-only snapshot of one on-screen element in window coordinates."""

    left: int
    top: int
    width: int
    height: int
    visible: bool = True
    padding: Insets = Insets()
    background: Decoration | None = None
    content: NodeContent = None
    children: tuple["SceneNode", ...] = field(default_factory=tuple)

    @property
    def kind(self) -> NodeKind:
        if isinstance(self.content, TextContent):
            return "text"
        if isinstance(self.content, ImageContent):
            return "image"
        return "container"

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def bounds(self) -> Rect:
        return Rect(self.left, self.top, self.left + self.width, self.top + self.height)
