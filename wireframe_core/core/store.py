from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from wireframe_core.config import WireframeConfig
from wireframe_core.render.canvas import RasterCanvas


LOGGER = logging.getLogger(__name__)


def stored_image_path(cache_dir: str | Path, index: int) -> Path:
    if index < 0:
        raise ValueError("index must be >= 0")
    return Path(cache_dir) / f"my_image{index}.png"


def store_canvas(
    canvas: RasterCanvas,
    cache_dir: str | Path,
    *,
    config: WireframeConfig | None = None,
) -> Path | None:
    """Encode the canvas as PNG into `cache_dir` and release its buffer.

    Write failures are logged and reported as `None`; the canvas is released
    on every path.
    """
    cfg = config or WireframeConfig()
    path = Path(cache_dir) / cfg.output_file_name
    try:
        image = Image.fromarray(canvas.to_numpy())
        with path.open("wb") as f:
            image.save(f, format="PNG", compress_level=cfg.png_compress_level)
        return path
    except OSError:
        LOGGER.exception("Error storing wireframe to %s", path)
        return None
    finally:
        canvas.release()


def load_stored_image(cache_dir: str | Path, index: int = 0) -> np.ndarray:
    with Image.open(stored_image_path(cache_dir, index)) as image:
        return np.asarray(image.convert("RGBA"), dtype=np.uint8)
