"""
Threaded Mandelbrot renderer.

The FractalRasterizer turns a view snapshot into a packed RGB buffer. The
RenderLoop runs it on a background thread at a fixed cadence:

- Snapshot the view (one locked read), then rasterize with no lock held
- Reallocate buffers when the viewport size changes
- Double-buffered publication: the render thread owns the back buffer,
  presentation reads the front buffer, and the two are swapped under a
  lock only after a frame is complete
- Prompt shutdown: the tick wait is a threading.Event, so stop() wakes it
"""

import logging
import threading
import time
from contextlib import contextmanager

from .compute import (
    DEFAULT_MAX_ITER,
    allocate_pixel_buffer,
    rasterize,
    warmup_jit,
)
from .view import resolve_viewport_size


logger = logging.getLogger(__name__)


class FractalRasterizer:
    """
    Computes full Mandelbrot frames.

    render() is a pure function of (snapshot, width, height): it touches no
    shared state other than the output buffer it is given.
    """

    def __init__(self, max_iter=DEFAULT_MAX_ITER):
        """
        Args:
            max_iter: Iteration cap before a point counts as inside the set
        """
        self.max_iter = max_iter

    def render(self, snapshot, width, height, out=None):
        """
        Render a frame.

        Args:
            snapshot: ViewSnapshot to render
            width, height: Frame size in pixels
            out: Optional (height, width) uint32 buffer to overwrite. A
                buffer of the wrong size is replaced, never indexed.

        Returns:
            The (height, width) uint32 buffer of packed 0xRRGGBB pixels
        """
        if out is None or out.size != width * height or out.shape != (height, width):
            out = allocate_pixel_buffer(width, height)
        rasterize(
            snapshot.center_x, snapshot.center_y, snapshot.zoom,
            width, height, self.max_iter, out
        )
        return out


class RenderLoop:
    """
    Re-renders the view on a background thread at a fixed cadence.

    Usage:
        loop = RenderLoop(view, surface)
        loop.start()

        # On the presentation thread, after notify_frame_ready():
        with loop.frame() as pixels:
            blit(pixels)

        loop.stop()

    The surface must provide get_viewport_size() -> (width, height) and
    notify_frame_ready(). notify_frame_ready() is called from the render
    thread.

    Attributes:
        state: IDLE while waiting for the next tick, RENDERING during a pass
        frames_rendered: Number of frames published so far
    """

    IDLE = "idle"
    RENDERING = "rendering"

    TICK_SECONDS = 0.016  # ~60 Hz

    def __init__(self, view, surface, rasterizer=None, tick_seconds=None):
        """
        Args:
            view: The shared ViewState
            surface: Presentation surface (see class docstring)
            rasterizer: FractalRasterizer to use (default: a new one)
            tick_seconds: Tick period (default TICK_SECONDS)
        """
        self.view = view
        self.surface = surface
        self.rasterizer = rasterizer or FractalRasterizer()
        self.tick_seconds = self.TICK_SECONDS if tick_seconds is None else tick_seconds

        self.state = self.IDLE
        self.frames_rendered = 0

        self._size = None
        self._back = None
        self._front = None
        self._frame_lock = threading.Lock()

        self._stop_event = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    @property
    def size(self):
        """Dimensions of the buffers currently in use, or None."""
        return self._size

    def start(self):
        """Start the render thread (no-op if already running)."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="mandelbrot-render"
        )
        self._thread.daemon = True
        self._thread.start()

    def stop(self, timeout=1.0):
        """
        Ask the render thread to exit and wait for it.

        Args:
            timeout: Seconds to wait for the thread to finish

        Returns:
            True if the thread has exited
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Render thread did not stop within %.1fs", timeout)
                return False
        self._thread = None
        return True

    def get_pixel_buffer(self):
        """
        Latest published frame, or None before the first frame.

        The reference stays valid until the next swap; use frame() to hold
        off swaps while blitting.
        """
        with self._frame_lock:
            return self._front

    @contextmanager
    def frame(self):
        """Hold the latest published frame; no swap happens meanwhile."""
        with self._frame_lock:
            yield self._front

    def tick(self):
        """
        Run one Rendering pass.

        Returns:
            True if a frame was published, False if it was skipped because
            a stop was requested.
        """
        self.state = self.RENDERING
        try:
            snapshot = self.view.snapshot()
            width, height = resolve_viewport_size(*self.surface.get_viewport_size())
            self._ensure_buffers(width, height)

            self._back = self.rasterizer.render(snapshot, width, height, out=self._back)

            # Never publish a frame that was interrupted by shutdown
            if self._stop_event.is_set():
                return False

            with self._frame_lock:
                self._front, self._back = self._back, self._front
            self.frames_rendered += 1
        finally:
            self.state = self.IDLE

        self.surface.notify_frame_ready()
        return True

    def _ensure_buffers(self, width, height):
        """
        Reallocate the back buffer if it does not match the viewport.

        The front buffer keeps its old size and stays on screen until the
        next swap; after that swap it comes back as a stale back buffer
        and is replaced here.
        """
        if self._back is not None and self._back.shape == (height, width):
            self._size = (width, height)
            return
        if self._size is not None and self._size != (width, height):
            logger.info("Reallocating frame buffers for %dx%d", width, height)
        self._size = (width, height)
        self._back = allocate_pixel_buffer(width, height)

    def _run(self):
        """Render thread body."""
        logger.info("Render thread started")
        try:
            warmup_jit()
        except Exception:
            # The first tick compiles (or fails and is skipped) on its own
            logger.exception("JIT warm-up failed")
        while not self._stop_event.is_set():
            started = time.perf_counter()
            try:
                self.tick()
            except Exception:
                logger.exception("Render tick failed, skipping frame")
            elapsed = time.perf_counter() - started
            logger.debug("Frame rendered in %.1f ms", elapsed * 1000.0)
            self._stop_event.wait(max(0.0, self.tick_seconds - elapsed))
        logger.info("Render thread stopped after %d frames", self.frames_rendered)
