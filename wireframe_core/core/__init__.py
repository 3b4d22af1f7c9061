from .recorder import (
    CompletionDispatcher,
    ImmediateDispatcher,
    QueueDispatcher,
    WireframeCapture,
    WireframeRecorder,
)
from .scene_walker import SceneWalker, is_in_canvas_bounds
from .store import load_stored_image, store_canvas, stored_image_path

__all__ = [
    "CompletionDispatcher",
    "ImmediateDispatcher",
    "QueueDispatcher",
    "SceneWalker",
    "WireframeCapture",
    "WireframeRecorder",
    "is_in_canvas_bounds",
    "load_stored_image",
    "store_canvas",
    "stored_image_path",
]
