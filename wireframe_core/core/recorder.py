from __future__ import annotations

from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
import logging
from pathlib import Path
import threading
import time
from typing import Callable, Protocol

from wireframe_core.config import WireframeConfig
from wireframe_core.core.scene_walker import SceneWalker
from wireframe_core.core.store import store_canvas
from wireframe_core.render.canvas import RasterCanvas
from wireframe_core.render.color import DominantColorExtractor
from wireframe_core.render.drawable import DrawablePainter
from wireframe_core.scene.model import SceneNode


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WireframeCapture:
    """Handed to the follow-up display step once a capture was persisted."""

    image_count: int
    path: Path | None


class CompletionDispatcher(Protocol):
    def post(self, callback: Callable[[], None]) -> None:
        ...


class ImmediateDispatcher:
    """Runs completions directly on the worker thread."""

    def post(self, callback: Callable[[], None]) -> None:
        callback()


class QueueDispatcher:
    """Queues completions for the owning thread to drain with `run_pending`."""

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()
        self._lock = threading.Lock()
        self._cv = threading.Condition(self._lock)

    def post(self, callback: Callable[[], None]) -> None:
        with self._cv:
            self._pending.append(callback)
            self._cv.notify_all()

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def run_pending(self, timeout: float | None = None) -> int:
        """Run queued completions; waits up to `timeout` seconds for the first one."""
        with self._cv:
            if not self._pending and timeout is not None and timeout > 0:
                self._cv.wait_for(lambda: bool(self._pending), timeout=timeout)
            batch = list(self._pending)
            self._pending.clear()
        for callback in batch:
            callback()
        return len(batch)


class WireframeRecorder:
    """Entry point for capturing wireframes of a scene tree."""

    def __init__(
        self,
        config: WireframeConfig | None = None,
        dispatcher: CompletionDispatcher | None = None,
    ) -> None:
        self._config = config or WireframeConfig()
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._walker = SceneWalker(DrawablePainter(DominantColorExtractor(self._config)))

    def render_wireframe(self, root: SceneNode) -> RasterCanvas:
        start = time.perf_counter()
        canvas = self._walker.traverse(root)
        LOGGER.info("Processed scene tree in %.3f ms", (time.perf_counter() - start) * 1000.0)
        return canvas

    def render_in_background(
        self,
        root: SceneNode,
        on_complete: Callable[[RasterCanvas], None] | None = None,
    ) -> Future[RasterCanvas]:
        future: Future[RasterCanvas] = Future()

        def work() -> None:
            future.set_result(self.render_wireframe(root))

        if on_complete is not None:
            future.add_done_callback(lambda done: self._complete(done, on_complete))
        self._start_worker(future, work)
        return future

    def render_and_show(
        self,
        root: SceneNode,
        cache_dir: str | Path,
        on_shown: Callable[[WireframeCapture], None],
    ) -> Future[WireframeCapture]:
        """Render, persist to `cache_dir`, then hand the capture to `on_shown`.

        The display step still runs when persistence failed; `path` is then None.
        """
        future: Future[WireframeCapture] = Future()

        def work() -> None:
            canvas = self.render_wireframe(root)
            path = store_canvas(canvas, cache_dir, config=self._config)
            future.set_result(WireframeCapture(image_count=1, path=path))

        future.add_done_callback(lambda done: self._complete(done, on_shown))
        self._start_worker(future, work)
        return future

    def _start_worker(self, future: Future, work: Callable[[], None]) -> None:
        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                work()
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("Wireframe worker failed: %s", exc)
                future.set_exception(exc)

        threading.Thread(target=run, name="wireframe-render", daemon=True).start()

    def _complete(self, done: Future, callback: Callable) -> None:
        if done.cancelled() or done.exception() is not None:
            return
        result = done.result()
        self._dispatcher.post(lambda: callback(result))
