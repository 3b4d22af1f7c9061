from .canvas import RasterCanvas
from .color import ColorHistogram, DominantColorExtractor, build_color_histogram, extract_dominant_color
from .drawable import DrawablePainter
from .text_lines import TextLineRenderer

__all__ = [
    "ColorHistogram",
    "DominantColorExtractor",
    "DrawablePainter",
    "RasterCanvas",
    "TextLineRenderer",
    "build_color_histogram",
    "extract_dominant_color",
]
