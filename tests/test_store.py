from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from PIL import Image

from wireframe_core.config import WireframeConfig
from wireframe_core.core.store import load_stored_image, store_canvas, stored_image_path
from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.scene.model import Rect


GREEN = (0, 255, 0, 255)


class StoreCanvasTests(unittest.TestCase):
    def test_store_writes_png_and_releases_canvas(self) -> None:
        canvas = RasterCanvas(6, 4)
        canvas.fill_rect(Rect(0, 0, 3, 4), GREEN)
        with tempfile.TemporaryDirectory() as td:
            path = store_canvas(canvas, td)
            self.assertEqual(path, Path(td) / "my_image0.png")
            assert path is not None
            with Image.open(path) as image:
                self.assertEqual(image.format, "PNG")
                self.assertEqual(image.size, (6, 4))
            pixels = load_stored_image(td)
        self.assertTrue(canvas.is_released)
        self.assertEqual(tuple(int(v) for v in pixels[0, 0]), GREEN)
        self.assertEqual(tuple(int(v) for v in pixels[0, 5]), (0, 0, 0, 0))

    def test_store_uses_configured_file_name(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = store_canvas(RasterCanvas(2, 2), td, config=WireframeConfig(output_file_name="shot.png"))
            self.assertEqual(path, Path(td) / "shot.png")
            assert path is not None
            self.assertTrue(path.exists())

    def test_write_failure_is_logged_and_still_releases(self) -> None:
        canvas = RasterCanvas(2, 2)
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("wireframe_core.core.store", level="ERROR") as logs:
                path = store_canvas(canvas, Path(td) / "missing" / "dir")
        self.assertIsNone(path)
        self.assertTrue(canvas.is_released)
        self.assertIn("Error storing wireframe", logs.output[0])

    def test_stored_image_path_naming(self) -> None:
        self.assertEqual(stored_image_path("/tmp/cache", 3), Path("/tmp/cache/my_image3.png"))
        with self.assertRaises(ValueError):
            stored_image_path("/tmp/cache", -1)


if __name__ == "__main__":
    unittest.main()
