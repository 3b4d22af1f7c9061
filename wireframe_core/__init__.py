from wireframe_core.config import WireframeConfig, load_config
from wireframe_core.core import SceneWalker, WireframeRecorder, store_canvas
from wireframe_core.render import DominantColorExtractor, RasterCanvas, extract_dominant_color
from wireframe_core.scene import SceneNode, load_scene

__all__ = [
    "DominantColorExtractor",
    "RasterCanvas",
    "SceneNode",
    "SceneWalker",
    "WireframeConfig",
    "WireframeRecorder",
    "extract_dominant_color",
    "load_config",
    "load_scene",
    "store_canvas",
]
