"""
Color mapping for Mandelbrot visualization.

Pixel buffers hold packed 24-bit RGB integers (0xRRGGBB). Escaped points are
colored from their escape iteration with a fixed banded palette; points that
never escape (the interior of the set) are white.

The banding constants (255/100 scaling, channel multipliers mod 255) are kept
exactly as the explorer has always drawn them.
"""

import numpy as np
from numba import jit


INTERIOR_COLOR = 0xFFFFFF  # Points inside the set

# Iterations per full sweep of the palette
COLOR_PERIOD = 100.0


@jit(nopython=True, cache=True)
def pack_rgb(r, g, b):
    """Pack 8-bit channels into a 0xRRGGBB integer."""
    return (r << 16) | (g << 8) | b


@jit(nopython=True, cache=True)
def unpack_rgb(color):
    """Split a 0xRRGGBB integer into (r, g, b)."""
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


@jit(nopython=True, cache=True)
def escape_color(iteration):
    """
    Color for a point that escaped at the given iteration.

    The iteration is scaled so that COLOR_PERIOD iterations sweep the red
    channel once; green and blue cycle two and four times faster.
    """
    index = int(iteration * 255.0 / COLOR_PERIOD) % 255
    return pack_rgb(index, (index * 2) % 255, (index * 4) % 255)


@jit(nopython=True, cache=True)
def packed_to_rgb(packed, out):
    """
    Expand a packed (height, width) buffer into an RGB image.

    Runs on the presentation thread while the render thread is inside the
    parallel rasterize kernel, so it must stay a serial kernel.

    Args:
        packed: 2D uint32 array of 0xRRGGBB values
        out: (height, width, 3) uint8 array, modified in place
    """
    height, width = packed.shape
    for py in range(height):
        for px in range(width):
            color = packed[py, px]
            out[py, px, 0] = (color >> 16) & 0xFF
            out[py, px, 1] = (color >> 8) & 0xFF
            out[py, px, 2] = color & 0xFF


def to_rgb_image(packed, out=None):
    """
    Convert a packed buffer into an RGB image for presentation.

    Args:
        packed: 2D uint32 array of 0xRRGGBB values
        out: Optional (height, width, 3) uint8 array to reuse

    Returns:
        The (height, width, 3) uint8 image
    """
    height, width = packed.shape
    if out is None or out.shape != (height, width, 3):
        out = np.empty((height, width, 3), dtype=np.uint8)
    packed_to_rgb(packed, out)
    return out
