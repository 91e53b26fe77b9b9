"""
View state for the Mandelbrot explorer.

The view maps pixel coordinates to the complex plane through a center point
and a zoom factor (pixels per unit length). Input handlers mutate it from the
pygame thread while the render thread reads it, so every access goes through
a single lock:

- ViewSnapshot: immutable copy of the view, carries the pure mapping
- ViewState: the shared, lock-protected view (pan, zoom_at, reset, snapshot)
- InputController: turns drag/scroll/resize events into ViewState mutations
"""

import logging
import math
import threading
from dataclasses import dataclass


logger = logging.getLogger(__name__)


# Fallback viewport when the surface has not been laid out yet
FALLBACK_WIDTH = 800
FALLBACK_HEIGHT = 600


def resolve_viewport_size(width, height):
    """Replace a zero (or negative) dimension with the fallback size."""
    width = int(width) if width and width > 0 else FALLBACK_WIDTH
    height = int(height) if height and height > 0 else FALLBACK_HEIGHT
    return width, height


@dataclass(frozen=True)
class ViewSnapshot:
    """A consistent copy of the view, safe to read without the lock."""

    center_x: float
    center_y: float
    zoom: float

    def pixel_to_complex(self, px, py, width, height):
        """Map a pixel position to its (re, im) point in the complex plane."""
        re = self.center_x + (px - width / 2.0) / self.zoom
        im = self.center_y + (py - height / 2.0) / self.zoom
        return re, im

    def complex_to_pixel(self, re, im, width, height):
        """Inverse of pixel_to_complex (fractional pixel coordinates)."""
        px = (re - self.center_x) * self.zoom + width / 2.0
        py = (im - self.center_y) * self.zoom + height / 2.0
        return px, py


class ViewState:
    """
    The shared view: center of the viewport in the complex plane and zoom.

    All mutations and the render thread's snapshot read are serialized
    through one lock, so a render never sees a half-applied pan or zoom.
    The lock only guards these three floats; rasterization works on a
    snapshot with the lock released.

    Attributes:
        lock: The threading.Lock guarding center_x, center_y and zoom
    """

    DEFAULT_CENTER = (-0.75, 0.0)
    DEFAULT_ZOOM = 200.0

    # Wheel sensitivity: zoom *= 1 + rotation * ZOOM_SENSITIVITY
    ZOOM_SENSITIVITY = 0.2

    # Clamp bounds that keep the mapping finite and non-degenerate
    MIN_ZOOM_STEP = 0.1
    MAX_ZOOM_STEP = 10.0
    MIN_ZOOM = 1e-3
    MAX_ZOOM = 1e15  # past this float64 spacing shows as blocky pixels

    def __init__(self, center=None, zoom=None):
        """
        Initialize the view.

        Args:
            center: (x, y) complex-plane point at the viewport center
                (default (-0.75, 0.0))
            zoom: Pixels per unit length (default 200.0)
        """
        self._default_center = tuple(center) if center is not None else self.DEFAULT_CENTER
        self._default_zoom = float(zoom) if zoom is not None else self.DEFAULT_ZOOM
        if not (math.isfinite(self._default_zoom) and self._default_zoom > 0):
            raise ValueError("zoom must be a positive finite number, got %r" % (zoom,))

        self.lock = threading.Lock()
        self._center_x = float(self._default_center[0])
        self._center_y = float(self._default_center[1])
        self._zoom = self._default_zoom

    def __repr__(self):
        snap = self.snapshot()
        return "ViewState(center=(%r, %r), zoom=%r)" % (snap.center_x, snap.center_y, snap.zoom)

    @property
    def center_x(self):
        with self.lock:
            return self._center_x

    @property
    def center_y(self):
        with self.lock:
            return self._center_y

    @property
    def zoom(self):
        with self.lock:
            return self._zoom

    def snapshot(self):
        """Take a consistent copy of the view in a single locked read."""
        with self.lock:
            return ViewSnapshot(self._center_x, self._center_y, self._zoom)

    def pixel_to_complex(self, px, py, width, height):
        """Map a pixel to the complex plane using the current view."""
        return self.snapshot().pixel_to_complex(px, py, width, height)

    def complex_to_pixel(self, re, im, width, height):
        """Map a complex-plane point to (fractional) pixel coordinates."""
        return self.snapshot().complex_to_pixel(re, im, width, height)

    def pan(self, dx, dy):
        """
        Shift the view by a pixel-space displacement.

        The view follows the cursor: dragging right moves the visible
        window left, so the displacement is subtracted from the center.

        Args:
            dx, dy: Cursor displacement in pixels
        """
        with self.lock:
            self._center_x -= dx / self._zoom
            self._center_y -= dy / self._zoom

    def zoom_at(self, px, py, width, height, rotation):
        """
        Zoom around a pixel, keeping the plane point under it fixed.

        Args:
            px, py: Cursor position in pixels
            width, height: Viewport dimensions
            rotation: Wheel rotation; the zoom is multiplied by
                1 + rotation * ZOOM_SENSITIVITY

        Returns:
            The new zoom value
        """
        if not math.isfinite(rotation):
            logger.debug("Ignoring non-finite wheel rotation %r", rotation)
            return self.zoom

        step = 1.0 + rotation * self.ZOOM_SENSITIVITY
        step = min(max(step, self.MIN_ZOOM_STEP), self.MAX_ZOOM_STEP)
        offset_x = px - width / 2.0
        offset_y = py - height / 2.0

        with self.lock:
            # Point under the cursor before zooming
            anchor_x = self._center_x + offset_x / self._zoom
            anchor_y = self._center_y + offset_y / self._zoom

            self._zoom = min(max(self._zoom * step, self.MIN_ZOOM), self.MAX_ZOOM)

            # Move the center so the anchor stays under the cursor
            self._center_x = anchor_x - offset_x / self._zoom
            self._center_y = anchor_y - offset_y / self._zoom
            zoom = self._zoom

        assert math.isfinite(zoom) and zoom > 0
        return zoom

    def reset(self):
        """Restore the initial center and zoom."""
        with self.lock:
            self._center_x = float(self._default_center[0])
            self._center_y = float(self._default_center[1])
            self._zoom = self._default_zoom


class InputController:
    """
    Routes platform input events to a ViewState.

    The surface only needs a get_viewport_size() method; it is queried at
    scroll time so zooming always uses the current window size.

    Usage:
        controller = InputController(view, surface)
        controller.on_drag_start(x, y)
        controller.on_drag_move(x, y)
        controller.on_drag_end()
        controller.on_scroll(x, y, rotation)
    """

    def __init__(self, view, surface):
        self.view = view
        self.surface = surface
        self.dragging = False
        self.last_x = 0
        self.last_y = 0
        self.viewport_size = resolve_viewport_size(*surface.get_viewport_size())

    def on_drag_start(self, x, y):
        self.dragging = True
        self.last_x = x
        self.last_y = y

    def on_drag_move(self, x, y):
        """Pan by the cursor movement since the last event."""
        if not self.dragging:
            return
        self.view.pan(x - self.last_x, y - self.last_y)
        self.last_x = x
        self.last_y = y

    def on_drag_end(self):
        self.dragging = False

    def on_scroll(self, x, y, rotation):
        """Zoom toward the cursor."""
        self.viewport_size = resolve_viewport_size(*self.surface.get_viewport_size())
        width, height = self.viewport_size
        self.view.zoom_at(x, y, width, height, rotation)

    def on_resize(self):
        """
        Record the new viewport size.

        The render loop notices the change on its next tick and
        reallocates its buffers.
        """
        self.viewport_size = resolve_viewport_size(*self.surface.get_viewport_size())
        logger.info("Viewport resized to %dx%d", *self.viewport_size)
        return self.viewport_size

    def on_reset(self):
        self.view.reset()
