from __future__ import annotations

from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.render.color import DominantColorExtractor
from wireframe_core.scene.model import TRANSPARENT, Color, Decoration, Rect, SceneNode, SupportsShapeDraw


class DrawablePainter:
    """Paints node backgrounds and standalone decorations as flat shapes."""

    def __init__(self, extractor: DominantColorExtractor | None = None) -> None:
        self._extractor = extractor or DominantColorExtractor()

    def resolve_color(self, decoration: Decoration) -> Color:
        if decoration.color is not None:
            return decoration.color
        if not decoration.has_intrinsic_size:
            return TRANSPARENT
        return self._extractor.extract(decoration.rasterize())

    def paint_background(self, node: SceneNode, canvas: RasterCanvas) -> None:
        decoration = node.background
        if decoration is None or not node.has_area:
            return
        if isinstance(decoration, SupportsShapeDraw):
            decoration.draw_shape(canvas, node.bounds)
            return
        canvas.fill_rect(node.bounds, self.resolve_color(decoration))

    def paint_decoration(self, decoration: Decoration, origin_x: float, origin_y: float, canvas: RasterCanvas) -> None:
        # Sized by intrinsic dimensions, not by the (possibly scaled) bounds.
        if not decoration.has_intrinsic_size:
            return
        color = self.resolve_color(decoration)
        left = origin_x + decoration.bounds.left
        top = origin_y + decoration.bounds.top
        canvas.fill_rect(
            Rect(left, top, left + decoration.intrinsic_width, top + decoration.intrinsic_height),
            color,
        )
