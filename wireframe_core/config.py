from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import tomllib


DEFAULT_OUTPUT_FILE_NAME = "my_image0.png"


@dataclass(frozen=True)
class WireframeConfig:
    """Tunables for dominant-color sampling and raster persistence."""

    sample_area_threshold: int = 10000
    sample_side: int = 100
    min_alpha: int = 128
    output_file_name: str = DEFAULT_OUTPUT_FILE_NAME
    png_compress_level: int = 6

    def __post_init__(self) -> None:
        if self.sample_area_threshold <= 0:
            raise ValueError("sample_area_threshold must be > 0")
        if self.sample_side <= 0:
            raise ValueError("sample_side must be > 0")
        if self.min_alpha < 0 or self.min_alpha > 255:
            raise ValueError("min_alpha must be in [0, 255]")
        if not self.output_file_name.strip():
            raise ValueError("output_file_name must be non-empty")
        if self.png_compress_level < 0 or self.png_compress_level > 9:
            raise ValueError("png_compress_level must be in [0, 9]")


def load_config(path: str | Path | None) -> WireframeConfig:
    """Read the `[wireframe]` table of a TOML file; `None` yields defaults."""
    if path is None:
        return WireframeConfig()
    with Path(path).open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("wireframe", {})
    if not isinstance(table, dict):
        raise ValueError("`wireframe` must be a table")
    known = {f.name for f in fields(WireframeConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValueError(f"unknown wireframe config keys: {', '.join(unknown)}")
    values: dict[str, int | str] = {}
    for key, value in table.items():
        values[key] = _coerce_value(key, value, expect_str=key == "output_file_name")
    return WireframeConfig(**values)  # type: ignore[arg-type]


def _coerce_value(key: str, value: object, *, expect_str: bool) -> int | str:
    if expect_str:
        if not isinstance(value, str):
            raise ValueError(f"`{key}` must be a string")
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"`{key}` must be an integer")
    return value
