"""
  Tests for the escape-time kernels and color mapping
"""

import unittest

import numpy as np

from mandelbrot_explorer.colormaps import (
    INTERIOR_COLOR,
    escape_color,
    pack_rgb,
    to_rgb_image,
    unpack_rgb,
)
from mandelbrot_explorer.compute import (
    allocate_pixel_buffer,
    escape_iterations,
    rasterize,
)


class TestEscapeIterations(unittest.TestCase):

    def test_origin_never_escapes(self):
        """c == 0 is the center of the main cardioid"""
        for max_iter in [0, 1, 2, 10, 100, 1000]:
            assert escape_iterations(0.0, 0.0, max_iter) == max_iter

    def test_points_clearly_outside_set(self):
        for zx, zy in [(5.0, 4.0), (2.0, 1.0), (-2.0, 1.0), (2.0, -1.0), (-2.75, -1.5)]:
            assert escape_iterations(zx, zy, 1000) == 0

    def test_arbitrary_points(self):
        # z1 = 1, z2 = 2, z3 = 5
        assert escape_iterations(1.0, 0.0, 1000) == 2
        # z1 = 1 + 1.5i, z2 = -0.25 + 4.5i
        assert escape_iterations(1.0, 1.5, 1000) == 1
        assert escape_iterations(-1.0, -1.5, 1000) == 1

    def test_escape_is_strictly_greater_than_two(self):
        # -2 lands on the fixed point 2 and stays at |z| == 2
        assert escape_iterations(-2.0, 0.0, 1000) == 1000

    def test_imaginary_part_uses_previous_real_part(self):
        # c = i: 0 -> i -> -1 + i -> -i -> -1 + i ... (bounded cycle)
        assert escape_iterations(0.0, 1.0, 1000) == 1000
        # c = 0.5 + 0.5i escapes at iteration 4 with the correct update order
        assert escape_iterations(0.5, 0.5, 1000) == 4

    def test_cap(self):
        # Escapes at iteration 2, which a cap of 2 does not reach
        assert escape_iterations(1.0, 0.0, 2) == 2
        assert escape_iterations(1.0, 0.0, 3) == 2


class TestColors(unittest.TestCase):

    def test_packing(self):
        assert pack_rgb(0x12, 0x34, 0x56) == 0x123456
        assert unpack_rgb(0xABCDEF) == (0xAB, 0xCD, 0xEF)

    def test_escape_colors(self):
        assert escape_color(0) == 0x000000
        assert escape_color(1) == 0x020408
        assert escape_color(40) == 0x66CC99
        assert escape_color(50) == 0x7FFEFD
        # A full period wraps back to black
        assert escape_color(100) == 0x000000

    def test_escape_color_never_white(self):
        colors = {escape_color(i) for i in range(1000)}
        assert INTERIOR_COLOR not in colors

    def test_to_rgb_image(self):
        packed = np.array([[0xFF0000, 0x00FF00], [0x0000FF, 0x123456]], dtype=np.uint32)
        rgb = to_rgb_image(packed)
        assert rgb.shape == (2, 2, 3)
        assert rgb.dtype == np.uint8
        assert list(rgb[0, 0]) == [255, 0, 0]
        assert list(rgb[0, 1]) == [0, 255, 0]
        assert list(rgb[1, 0]) == [0, 0, 255]
        assert list(rgb[1, 1]) == [0x12, 0x34, 0x56]

    def test_to_rgb_image_reuses_buffer(self):
        packed = np.full((3, 4), 0x010203, dtype=np.uint32)
        out = np.zeros((3, 4, 3), dtype=np.uint8)
        assert to_rgb_image(packed, out) is out
        assert to_rgb_image(packed, np.zeros((4, 3, 3), dtype=np.uint8)) is not out


class TestRasterize(unittest.TestCase):

    def test_matches_point_evaluation(self):
        width, height, max_iter = 32, 24, 200
        center_x, center_y, zoom = -0.75, 0.1, 10.0
        out = allocate_pixel_buffer(width, height)
        rasterize(center_x, center_y, zoom, width, height, max_iter, out)

        for py in range(height):
            for px in range(width):
                zx = center_x + (px - width / 2.0) / zoom
                zy = center_y + (py - height / 2.0) / zoom
                i = escape_iterations(zx, zy, max_iter)
                expected = INTERIOR_COLOR if i == max_iter else escape_color(i)
                assert out[py, px] == expected, (px, py)

    def test_rows_are_y_and_columns_are_x(self):
        out = allocate_pixel_buffer(4, 2)
        rasterize(0.0, 1.0, 1.0, 4, 2, 100, out)
        # Row 0 maps to im = 0, row 1 to im = 1
        assert out[0, 2] == INTERIOR_COLOR   # c = 0
        assert out[1, 0] == escape_color(0)  # c = -2 + i


if __name__ == "__main__":
    unittest.main()
