"""
Mandelbrot Set Explorer Package

A real-time, interactive Mandelbrot set explorer using Pygame for display
and Numba for JIT-compiled computation. A background thread re-renders the
whole frame about 60 times a second while drag and scroll input updates
the view.

Quick Start:
    from mandelbrot_explorer import run
    run()

Or from command line:
    python -m mandelbrot_explorer

Package Structure:
    - view.py: View state (center, zoom), pixel mapping, input controller
    - compute.py: JIT-compiled escape-time functions
    - colormaps.py: Escape iteration to packed RGB color
    - renderer.py: Rasterizer and background render loop
    - app.py: Main application and event loop

Controls:
    - Scroll: Zoom at mouse position
    - Drag: Pan around
    - R: Reset to default view
    - ESC: Quit
"""

from .app import run, MandelbrotApp
from .renderer import FractalRasterizer, RenderLoop
from .view import InputController, ViewSnapshot, ViewState

__version__ = "1.0.0"
__all__ = [
    "run",
    "MandelbrotApp",
    "FractalRasterizer",
    "RenderLoop",
    "InputController",
    "ViewSnapshot",
    "ViewState",
]
