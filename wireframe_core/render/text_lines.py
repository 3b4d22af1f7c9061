from __future__ import annotations

from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.render.drawable import DrawablePainter
from wireframe_core.scene.model import Decoration, Rect, SceneNode, TextContent


class TextLineRenderer:
    """Replaces each laid-out text line with a pill-shaped box of the text color."""

    def __init__(self, painter: DrawablePainter | None = None) -> None:
        self._painter = painter or DrawablePainter()

    def paint_text_node(self, node: SceneNode, canvas: RasterCanvas) -> None:
        text = node.content
        if not isinstance(text, TextContent) or not node.has_area:
            return
        for decoration, x, y in self.decoration_origins(node, text):
            self._painter.paint_decoration(decoration, x, y, canvas)
        for box in self.line_boxes(node, text):
            # Repainted for every line; the overdraw is idempotent.
            if text.check_mark is not None:
                self._painter.paint_decoration(text.check_mark, node.left, node.top, canvas)
            canvas.fill_round_rect(box, text.line_height, text.color)

    def decoration_origins(self, node: SceneNode, text: TextContent) -> list[tuple[Decoration, float, float]]:
        pad = node.padding
        gap = text.decoration_gap
        out: list[tuple[Decoration, float, float]] = []
        for slot, deco in text.compound.positioned():
            x = node.left + pad.left
            y = node.top + pad.top + gap
            if slot == "end":
                x = node.left + (node.width - pad.right - deco.bounds.width - gap)
            elif slot == "bottom":
                y = node.top + (node.height - pad.bottom - deco.bounds.height - gap)
            out.append((deco, x, y))
        return out

    def line_boxes(self, node: SceneNode, text: TextContent) -> list[Rect]:
        pad = node.padding
        gap = text.decoration_gap
        start = text.compound.start
        left = node.left + pad.left + (start.bounds.width + gap if start is not None else 0)
        boxes: list[Rect] = []
        for i in range(len(text.lines)):
            top = node.top + text.line_height * i + pad.top + gap
            boxes.append(Rect(left, top, left + text.line_width(i), top + text.line_height))
        return boxes
