from __future__ import annotations

import math

import numpy as np
import torch

from wireframe_core.scene.model import Color, Rect


class RasterCanvas:
    """RGBA255 output surface owned by a single traversal.

    Fills overwrite covered pixels; fully transparent colors paint nothing.
    Geometry outside the surface is clipped.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("canvas dimensions must be > 0")
        self.width = width
        self.height = height
        self._pixels: torch.Tensor | None = torch.zeros((height, width, 4), dtype=torch.uint8)
        self._grid_x = torch.arange(width, dtype=torch.float32).add(0.5).unsqueeze(0).expand(height, width)
        self._grid_y = torch.arange(height, dtype=torch.float32).add(0.5).unsqueeze(1).expand(height, width)

    @property
    def is_released(self) -> bool:
        return self._pixels is None

    def release(self) -> None:
        self._pixels = None

    def fill_rect(self, rect: Rect, color: Color) -> None:
        pixels = self._require_pixels()
        if color[3] <= 0:
            return
        clip = self._clip(rect)
        if clip is None:
            return
        x0, y0, x1, y1 = clip
        pixels[y0:y1, x0:x1] = torch.tensor(color, dtype=torch.uint8)

    def fill_round_rect(self, rect: Rect, radius: float, color: Color) -> None:
        r = max(0.0, min(float(radius), rect.width / 2.0, rect.height / 2.0))
        if r <= 0:
            self.fill_rect(rect, color)
            return
        region = self._region(rect)
        if region is None:
            return
        x0, y0, gx, gy = region
        # Distance from the inner rectangle shrunk by the radius.
        dx = torch.clamp(torch.maximum(rect.left + r - gx, gx - (rect.right - r)), min=0.0)
        dy = torch.clamp(torch.maximum(rect.top + r - gy, gy - (rect.bottom - r)), min=0.0)
        self.fill_mask((dx * dx + dy * dy) <= r * r, x=x0, y=y0, color=color)

    def fill_cut_rect(self, rect: Rect, cut: float, color: Color) -> None:
        c = max(0.0, min(float(cut), rect.width / 2.0, rect.height / 2.0))
        if c <= 0:
            self.fill_rect(rect, color)
            return
        region = self._region(rect)
        if region is None:
            return
        x0, y0, gx, gy = region
        dx = torch.clamp(torch.maximum(rect.left + c - gx, gx - (rect.right - c)), min=0.0)
        dy = torch.clamp(torch.maximum(rect.top + c - gy, gy - (rect.bottom - c)), min=0.0)
        self.fill_mask((dx + dy) <= c, x=x0, y=y0, color=color)

    def fill_mask(self, mask: torch.Tensor, *, x: int, y: int, color: Color) -> None:
        pixels = self._require_pixels()
        if color[3] <= 0:
            return
        h, w = mask.shape
        x0 = max(0, x)
        y0 = max(0, y)
        x1 = min(self.width, x + w)
        y1 = min(self.height, y + h)
        if x1 <= x0 or y1 <= y0:
            return
        patch_mask = mask[y0 - y : y1 - y, x0 - x : x1 - x]
        if not bool(patch_mask.any()):
            return
        src = torch.tensor(color, dtype=torch.uint8).view(1, 1, 4)
        pixels[y0:y1, x0:x1] = torch.where(patch_mask.unsqueeze(-1), src, pixels[y0:y1, x0:x1])

    def pixel(self, x: int, y: int) -> Color:
        pixels = self._require_pixels()
        r, g, b, a = (int(v) for v in pixels[y, x].tolist())
        return (r, g, b, a)

    def snapshot(self) -> torch.Tensor:
        return self._require_pixels().clone()

    def to_numpy(self) -> np.ndarray:
        return self._require_pixels().numpy().copy()

    def _require_pixels(self) -> torch.Tensor:
        if self._pixels is None:
            raise RuntimeError("canvas has been released")
        return self._pixels

    def _clip(self, rect: Rect) -> tuple[int, int, int, int] | None:
        # Pixel i is covered when its center i + 0.5 lies in [edge0, edge1).
        x0 = max(0, math.ceil(rect.left - 0.5))
        y0 = max(0, math.ceil(rect.top - 0.5))
        x1 = min(self.width, math.ceil(rect.right - 0.5))
        y1 = min(self.height, math.ceil(rect.bottom - 0.5))
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    def _region(self, rect: Rect) -> tuple[int, int, torch.Tensor, torch.Tensor] | None:
        self._require_pixels()
        clip = self._clip(rect)
        if clip is None:
            return None
        x0, y0, x1, y1 = clip
        return x0, y0, self._grid_x[y0:y1, x0:x1], self._grid_y[y0:y1, x0:x1]
