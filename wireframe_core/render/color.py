from __future__ import annotations

import logging
import math
from typing import TypeAlias

import numpy as np
from PIL import Image

from wireframe_core.config import WireframeConfig
from wireframe_core.scene.model import TRANSPARENT, Color


LOGGER = logging.getLogger(__name__)

ColorHistogram: TypeAlias = dict[Color, int]


class DominantColorExtractor:
    """Most frequent opaque color of an RGBA raster after alpha weighting.

    Large rasters are downsampled (nearest neighbour) so that roughly
    `sample_side ** 2` pixels are inspected regardless of input size.
    Pixels with alpha below `min_alpha` never reach the histogram.
    """

    def __init__(self, config: WireframeConfig | None = None) -> None:
        self._config = config or WireframeConfig()

    def extract(self, image: np.ndarray | Image.Image) -> Color:
        pixels = _as_rgba_array(image)
        height, width = pixels.shape[:2]
        if width <= 0 or height <= 0:
            return TRANSPARENT

        sample_w, sample_h = self.sample_size(width, height)
        if (sample_w, sample_h) != (width, height):
            scaled = Image.fromarray(pixels).resize((sample_w, sample_h), Image.Resampling.NEAREST)
            pixels = np.asarray(scaled, dtype=np.uint8)

        histogram = build_color_histogram(pixels, min_alpha=self._config.min_alpha)
        if not histogram:
            color = TRANSPARENT
        else:
            # max() keeps the first maximal item, i.e. the earliest inserted color.
            color = max(histogram.items(), key=lambda item: item[1])[0]
        LOGGER.debug("Dominant color: %s", _argb_hex(color))
        return color

    def sample_size(self, width: int, height: int) -> tuple[int, int]:
        if width * height <= self._config.sample_area_threshold:
            return width, height
        side = float(self._config.sample_side)
        root = math.sqrt(width / height)
        if width > height:
            sample_w, sample_h = int(side * root), int(side / root)
        else:
            sample_w, sample_h = int(side / root), int(side * root)
        return max(1, sample_w), max(1, sample_h)


def extract_dominant_color(image: np.ndarray | Image.Image, config: WireframeConfig | None = None) -> Color:
    return DominantColorExtractor(config).extract(image)


def build_color_histogram(pixels: np.ndarray, *, min_alpha: int = 128) -> ColorHistogram:
    """Count alpha-premultiplied opaque colors in row-major first-seen order."""
    flat = pixels.reshape(-1, 4)
    alpha = flat[:, 3]
    kept = flat[alpha >= min_alpha]
    if kept.shape[0] == 0:
        return {}
    weight = kept[:, 3].astype(np.float64) / 255.0
    rgb = (kept[:, :3].astype(np.float64) * weight[:, None]).astype(np.int64)
    keys = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]
    unique, first_index, counts = np.unique(keys, return_index=True, return_counts=True)
    order = np.argsort(first_index, kind="stable")
    histogram: ColorHistogram = {}
    for idx in order:
        key = int(unique[idx])
        histogram[((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF, 255)] = int(counts[idx])
    return histogram


def _as_rgba_array(image: np.ndarray | Image.Image) -> np.ndarray:
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGBA"), dtype=np.uint8)
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"expected HxWx4 RGBA pixels, got shape {arr.shape}")
    return np.ascontiguousarray(arr, dtype=np.uint8)


def _argb_hex(color: Color) -> str:
    r, g, b, a = color
    return f"{a:02x}{r:02x}{g:02x}{b:02x}"
