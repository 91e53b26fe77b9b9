"""
  Tests for the pygame application, run headless on SDL's dummy driver
"""

import os
import unittest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from mandelbrot_explorer.app import MandelbrotApp


class TestMandelbrotApp(unittest.TestCase):

    def setUp(self):
        self.app = MandelbrotApp(160, 120, max_iter=50)
        self.app._init_pygame()
        self.app._init_components()

    def tearDown(self):
        self.app.render_loop.stop(timeout=5.0)
        pygame.quit()

    def wait_for_surface(self):
        assert self.app._frame_ready.wait(30.0), "no frame published"
        self.app._check_frame()
        assert self.app.current_surface is not None

    def test_viewport_size(self):
        assert self.app.get_viewport_size() == (160, 120)

    def test_published_frame_is_presented(self):
        self.wait_for_surface()
        assert self.app.current_surface.get_size() == (160, 120)
        self.app._draw()
        # The center of the default view is inside the set
        assert self.app.screen.get_at((80, 60))[:3] == (255, 255, 255)

    def test_frames_keep_coming_while_presenting(self):
        for _ in range(20):
            self.wait_for_surface()
            self.app._draw()
        assert self.app.render_loop.frames_rendered >= 20

    def test_drag_events_pan_the_view(self):
        pygame.event.post(pygame.event.Event(
            pygame.MOUSEBUTTONDOWN, button=1, pos=(100, 60)))
        pygame.event.post(pygame.event.Event(
            pygame.MOUSEMOTION, pos=(140, 60), rel=(40, 0), buttons=(1, 0, 0)))
        pygame.event.post(pygame.event.Event(
            pygame.MOUSEBUTTONUP, button=1, pos=(140, 60)))
        self.app._handle_events()

        self.assertAlmostEqual(self.app.view.center_x, -0.75 - 40 / 200.0)
        self.assertAlmostEqual(self.app.view.center_y, 0.0)
        assert not self.app.controller.dragging

    def test_wheel_up_is_negative_rotation(self):
        pygame.event.post(pygame.event.Event(
            pygame.MOUSEWHEEL, x=0, y=1, precise_x=0.0, precise_y=1.0, flipped=False))
        self.app._handle_events()
        self.assertAlmostEqual(self.app.view.zoom, 160.0)

    def test_keys(self):
        self.app.view.pan(50, 50)
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r, mod=0))
        self.app._handle_events()
        assert self.app.view.center_x == -0.75
        assert self.app.view.center_y == 0.0

        self.app.running = True
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE, mod=0))
        self.app._handle_events()
        assert not self.app.running

    def test_quit_event(self):
        self.app.running = True
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        self.app._handle_events()
        assert not self.app.running


if __name__ == "__main__":
    unittest.main()
