"""
Main application module for the Mandelbrot explorer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- User input (drag to pan, scroll to zoom, keyboard)
- Presenting the frames published by the render thread
"""

import logging
import threading

import pygame

from .colormaps import to_rgb_image
from .compute import DEFAULT_MAX_ITER
from .renderer import FractalRasterizer, RenderLoop
from .view import InputController, ViewState, resolve_viewport_size


logger = logging.getLogger(__name__)


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Owns the pygame window and event loop, and acts as the presentation
    surface for the RenderLoop (get_viewport_size / notify_frame_ready).
    """

    # Default configuration
    DEFAULT_WIDTH = 800
    DEFAULT_HEIGHT = 600
    DEFAULT_MAX_ITER = DEFAULT_MAX_ITER
    FPS = 60
    CAPTION = "Mandelbrot Set - Scroll to zoom, drag to pan, R to reset"

    def __init__(self, width=None, height=None, max_iter=None):
        """
        Initialize the application.

        Args:
            width: Window width in pixels (default 800)
            height: Window height in pixels (default 600)
            max_iter: Maximum iteration count (default 1000)
        """
        self.width = width or self.DEFAULT_WIDTH
        self.height = height or self.DEFAULT_HEIGHT
        self.max_iter = max_iter or self.DEFAULT_MAX_ITER

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Core components
        self.view = ViewState()
        self.controller = None
        self.render_loop = None

        # Display state
        self.current_surface = None
        self._rgb = None
        self._viewport_size = (self.width, self.height)
        self._frame_ready = threading.Event()

        self.running = False

    # Presentation surface interface (called from the render thread)

    def get_viewport_size(self):
        return self._viewport_size

    def notify_frame_ready(self):
        self._frame_ready.set()

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()

        self.running = True
        try:
            while self.running:
                self._handle_events()
                self._check_frame()
                self._draw()
                self.clock.tick(self.FPS)
        finally:
            if self.render_loop is not None:
                self.render_loop.stop()
            pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create a resizable window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height),
            pygame.RESIZABLE
        )
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()
        self._viewport_size = resolve_viewport_size(*self.screen.get_size())

    def _init_components(self):
        """Create the input controller and start the render thread."""
        self.controller = InputController(self.view, self)
        self.render_loop = RenderLoop(
            self.view, self, FractalRasterizer(self.max_iter)
        )
        self.render_loop.start()

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEWHEEL:
                self._handle_zoom(event)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:  # Left click
                    self.controller.on_drag_start(*event.pos)
            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1:
                    self.controller.on_drag_end()
            elif event.type == pygame.MOUSEMOTION:
                self.controller.on_drag_move(*event.pos)
            elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
                self._handle_resize()
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_zoom(self, event):
        """Handle mouse wheel zoom at the cursor."""
        mx, my = pygame.mouse.get_pos()
        # Wheel up is a negative rotation
        rotation = -getattr(event, "precise_y", event.y)
        self.controller.on_scroll(mx, my, rotation)

    def _handle_resize(self):
        """Pick up the new window size; the render loop reallocates."""
        self.screen = pygame.display.get_surface()
        self._viewport_size = resolve_viewport_size(*self.screen.get_size())
        self.controller.on_resize()

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_r:
            self.controller.on_reset()
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _check_frame(self):
        """Convert the latest published frame into a surface."""
        if not self._frame_ready.is_set():
            return
        self._frame_ready.clear()
        with self.render_loop.frame() as pixels:
            if pixels is None:
                return
            self._rgb = to_rgb_image(pixels, self._rgb)
        self.current_surface = pygame.surfarray.make_surface(
            self._rgb.swapaxes(0, 1)
        )

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        pygame.display.flip()


def run(width=None, height=None, max_iter=None):
    """
    Run the Mandelbrot explorer.

    Args:
        width: Window width (default 800)
        height: Window height (default 600)
        max_iter: Maximum iterations (default 1000)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(threadName)s %(levelname)s %(name)s: %(message)s"
    )
    app = MandelbrotApp(width, height, max_iter)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
