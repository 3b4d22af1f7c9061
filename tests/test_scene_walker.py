from __future__ import annotations

import unittest

import numpy as np
import torch

from wireframe_core.core.scene_walker import SceneWalker, is_in_canvas_bounds
from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.render.drawable import DrawablePainter
from wireframe_core.scene.model import (
    TRANSPARENT,
    Decoration,
    ImageContent,
    Insets,
    Rect,
    SceneNode,
    TextContent,
)


BLACK = (0, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)
RED = (255, 0, 0, 255)


def _flat(color: tuple[int, int, int, int]) -> Decoration:
    return Decoration(-1, -1, color=color)


def _green_image() -> Decoration:
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[:, :] = GREEN
    return Decoration(2, 2, bounds=Rect(0, 0, 2, 2), pixels=pixels)


class _VisitTracingPainter(DrawablePainter):
    def __init__(self) -> None:
        super().__init__()
        self.visited: list[SceneNode] = []

    def paint_background(self, node, canvas) -> None:  # type: ignore[override]
        self.visited.append(node)
        super().paint_background(node, canvas)


class SceneWalkerTests(unittest.TestCase):
    def test_canvas_matches_root_dimensions(self) -> None:
        canvas = SceneWalker().traverse(SceneNode(left=0, top=0, width=33, height=21))
        self.assertEqual((canvas.width, canvas.height), (33, 21))
        self.assertEqual(int(canvas.snapshot().sum().item()), 0)

    def test_text_scenario_paints_single_line_box(self) -> None:
        text = SceneNode(
            left=0,
            top=0,
            width=100,
            height=20,
            content=TextContent(lines=("OK",), line_height=20, measure=lambda s: 7.0 * len(s), color=BLACK),
        )
        root = SceneNode(left=0, top=0, width=100, height=50, background=_flat(TRANSPARENT), children=(text,))
        canvas = SceneWalker().traverse(root)
        self.assertEqual(canvas.pixel(7, 10), BLACK)
        self.assertEqual(canvas.pixel(0, 0), TRANSPARENT)
        self.assertEqual(canvas.pixel(50, 10), TRANSPARENT)
        self.assertEqual(canvas.pixel(7, 30), TRANSPARENT)

    def test_image_over_flat_background_scenario(self) -> None:
        image = SceneNode(left=5, top=5, width=10, height=10, content=ImageContent(_green_image()))
        root = SceneNode(left=0, top=0, width=40, height=30, background=_flat(BLUE), children=(image,))
        canvas = SceneWalker().traverse(root)
        self.assertEqual(canvas.pixel(0, 0), BLUE)
        self.assertEqual(canvas.pixel(39, 29), BLUE)
        self.assertEqual(canvas.pixel(5, 5), GREEN)
        self.assertEqual(canvas.pixel(14, 14), GREEN)
        self.assertEqual(canvas.pixel(15, 15), BLUE)

    def test_image_fills_padded_content_box_from_image_offset(self) -> None:
        deco = Decoration(2, 2, bounds=Rect(1, 1, 3, 3), color=RED)
        image = SceneNode(left=5, top=5, width=10, height=10, padding=Insets(2, 3, 0, 0), content=ImageContent(deco))
        root = SceneNode(left=0, top=0, width=40, height=40, children=(image,))
        canvas = SceneWalker().traverse(root)
        self.assertEqual(canvas.pixel(8, 9), RED)
        self.assertEqual(canvas.pixel(16, 17), RED)
        self.assertEqual(canvas.pixel(7, 9), TRANSPARENT)
        self.assertEqual(canvas.pixel(17, 17), TRANSPARENT)
        self.assertEqual(canvas.pixel(16, 18), TRANSPARENT)

    def test_image_without_intrinsic_size_is_skipped(self) -> None:
        image = SceneNode(left=0, top=0, width=10, height=10, content=ImageContent(_flat(RED)))
        empty = SceneNode(left=0, top=0, width=10, height=10, content=ImageContent(None))
        canvas = SceneWalker().traverse(SceneNode(left=0, top=0, width=20, height=20, children=(image, empty)))
        self.assertEqual(int(canvas.snapshot().sum().item()), 0)

    def test_hidden_subtree_matches_removed_subtree(self) -> None:
        visible_child = SceneNode(left=0, top=0, width=10, height=10, background=_flat(RED))
        hidden = SceneNode(
            left=5,
            top=5,
            width=20,
            height=20,
            visible=False,
            background=_flat(GREEN),
            children=(SceneNode(left=6, top=6, width=4, height=4, background=_flat(BLUE)),),
        )
        with_hidden = SceneNode(left=0, top=0, width=30, height=30, children=(visible_child, hidden))
        without = SceneNode(left=0, top=0, width=30, height=30, children=(visible_child,))
        painter = _VisitTracingPainter()
        a = SceneWalker(painter).traverse(with_hidden).snapshot()
        b = SceneWalker().traverse(without).snapshot()
        self.assertTrue(torch.equal(a, b))
        self.assertEqual(painter.visited, [with_hidden, visible_child])

    def test_top_left_corner_bounds_are_inclusive(self) -> None:
        canvas = RasterCanvas(30, 20)
        self.assertTrue(is_in_canvas_bounds(SceneNode(left=30, top=20, width=5, height=5), canvas))
        self.assertTrue(is_in_canvas_bounds(SceneNode(left=0, top=0, width=5, height=5), canvas))
        self.assertFalse(is_in_canvas_bounds(SceneNode(left=31, top=20, width=5, height=5), canvas))
        self.assertFalse(is_in_canvas_bounds(SceneNode(left=30, top=21, width=5, height=5), canvas))
        self.assertFalse(is_in_canvas_bounds(SceneNode(left=-1, top=0, width=50, height=50), canvas))

    def test_culled_node_prunes_in_bounds_descendants(self) -> None:
        inner = SceneNode(left=2, top=2, width=4, height=4, background=_flat(RED))
        outer = SceneNode(left=-5, top=0, width=20, height=20, children=(inner,))
        edge = SceneNode(left=30, top=20, width=5, height=5, background=_flat(RED))
        root = SceneNode(left=0, top=0, width=30, height=20, children=(outer, edge))
        painter = _VisitTracingPainter()
        canvas = SceneWalker(painter).traverse(root)
        self.assertEqual(painter.visited, [root, edge])
        self.assertEqual(int(canvas.snapshot().sum().item()), 0)

    def test_descendants_overwrite_ancestors_in_child_order(self) -> None:
        first = SceneNode(left=0, top=0, width=10, height=10, background=_flat(RED))
        second = SceneNode(left=5, top=5, width=10, height=10, background=_flat(GREEN))
        root = SceneNode(left=0, top=0, width=20, height=20, background=_flat(BLUE), children=(first, second))
        canvas = SceneWalker().traverse(root)
        self.assertEqual(canvas.pixel(2, 2), RED)
        self.assertEqual(canvas.pixel(7, 7), GREEN)
        self.assertEqual(canvas.pixel(18, 2), BLUE)

    def test_traversal_is_idempotent(self) -> None:
        text = SceneNode(
            left=2,
            top=2,
            width=40,
            height=20,
            background=_flat(BLUE),
            content=TextContent(lines=("ab", "c"), line_height=8, measure=lambda s: 5.0 * len(s)),
        )
        image = SceneNode(left=10, top=25, width=8, height=8, content=ImageContent(_green_image()))
        root = SceneNode(left=0, top=0, width=50, height=40, background=_flat(RED), children=(text, image))
        walker = SceneWalker()
        self.assertTrue(torch.equal(walker.traverse(root).snapshot(), walker.traverse(root).snapshot()))

    def test_root_without_area_cannot_allocate_canvas(self) -> None:
        with self.assertRaises(ValueError):
            SceneWalker().traverse(SceneNode(left=0, top=0, width=0, height=10))


if __name__ == "__main__":
    unittest.main()
