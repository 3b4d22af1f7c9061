from __future__ import annotations

import logging

from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.render.drawable import DrawablePainter
from wireframe_core.render.text_lines import TextLineRenderer
from wireframe_core.scene.model import ImageContent, Rect, SceneNode


LOGGER = logging.getLogger(__name__)


class SceneWalker:
    """Pre-order depth-first wireframe painter for one scene tree.

    Backgrounds are painted before content, and children in list order, so
    descendants overwrite their ancestors where they overlap.
    """

    def __init__(
        self,
        painter: DrawablePainter | None = None,
        text_renderer: TextLineRenderer | None = None,
    ) -> None:
        self._painter = painter or DrawablePainter()
        self._text_renderer = text_renderer or TextLineRenderer(self._painter)

    def traverse(self, root: SceneNode) -> RasterCanvas:
        canvas = RasterCanvas(root.width, root.height)
        self.visit(root, canvas)
        return canvas

    def visit(self, node: SceneNode, canvas: RasterCanvas) -> None:
        # A hidden or culled node prunes its whole subtree.
        if not node.visible or not is_in_canvas_bounds(node, canvas):
            return
        self._painter.paint_background(node, canvas)
        kind = node.kind
        if kind == "text":
            self._text_renderer.paint_text_node(node, canvas)
        elif kind == "image":
            self._paint_image_node(node, canvas)
        for child in node.children:
            self.visit(child, canvas)

    def _paint_image_node(self, node: SceneNode, canvas: RasterCanvas) -> None:
        content = node.content
        if not isinstance(content, ImageContent):
            return
        image = content.image
        if image is None or not node.has_area or not image.has_intrinsic_size:
            return
        color = self._painter.resolve_color(image)
        left = node.left + node.padding.left
        top = node.top + node.padding.top
        # Anchored at the image offset but sized to the padded content box.
        canvas.fill_rect(
            Rect(left + image.bounds.left, top + image.bounds.top, left + node.width, top + node.height),
            color,
        )


def is_in_canvas_bounds(node: SceneNode, canvas: RasterCanvas) -> bool:
    """Top-left corner test only; inclusive of the far canvas edges."""
    return 0 <= node.left <= canvas.width and 0 <= node.top <= canvas.height
