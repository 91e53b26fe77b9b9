"""
Mandelbrot computation functions using Numba JIT compilation.

This module contains the performance-critical escape-time code:
- Per-point escape iteration
- Full-frame rasterization into a packed RGB buffer, rows spread over
  Numba's thread pool with prange

Each row worker writes only its own row and reads only scalar view
parameters, so the kernels are safe to call from the render thread while
the view keeps changing.
"""

import numpy as np
from numba import jit, prange

from .colormaps import INTERIOR_COLOR, escape_color


DEFAULT_MAX_ITER = 1000
ESCAPE_RADIUS_SQ = 4.0  # |z| > 2


@jit(nopython=True, cache=True)
def escape_iterations(zx, zy, max_iter):
    """
    Iterate z -> z^2 + c from z = 0 with c = zx + i*zy.

    Args:
        zx, zy: Real and imaginary parts of c
        max_iter: Iteration cap

    Returns:
        The 0-based iteration at which |z|^2 first exceeds 4, or max_iter
        if the point never escapes.
    """
    zr = 0.0
    zc = 0.0
    for i in range(max_iter):
        # zc must be updated from the old zr
        temp = zr * zr - zc * zc + zx
        zc = 2.0 * zr * zc + zy
        zr = temp
        if zr * zr + zc * zc > ESCAPE_RADIUS_SQ:
            return i
    return max_iter


@jit(nopython=True, parallel=True, cache=True)
def rasterize(center_x, center_y, zoom, width, height, max_iter, out):
    """
    Render the Mandelbrot set into a packed RGB buffer.

    Args:
        center_x, center_y: Complex-plane point at the viewport center
        zoom: Pixels per unit length
        width, height: Viewport dimensions in pixels
        max_iter: Iteration cap before a point counts as inside the set
        out: (height, width) uint32 array, modified in place
    """
    half_w = width / 2.0
    half_h = height / 2.0
    for py in prange(height):
        zy = center_y + (py - half_h) / zoom
        for px in range(width):
            zx = center_x + (px - half_w) / zoom
            iteration = escape_iterations(zx, zy, max_iter)
            if iteration < max_iter:
                out[py, px] = escape_color(iteration)
            else:
                out[py, px] = INTERIOR_COLOR


def allocate_pixel_buffer(width, height):
    """Create a zeroed (height, width) packed RGB buffer."""
    return np.zeros((height, width), dtype=np.uint32)


def warmup_jit():
    """
    Warm up JIT compilation with a tiny frame.

    Call this once before the first real frame to avoid a long stall on
    first use.
    """
    dummy = allocate_pixel_buffer(4, 4)
    rasterize(-0.75, 0.0, 2.0, 4, 4, 10, dummy)
    escape_iterations(0.0, 0.0, 10)
