"""
Interactive Pygame Viewer for Field Sketches

Controls:
  SPACE       Pause / Resume
  R           Reset current preset
  S           Save screenshot
  H           Toggle HUD overlay
  1-9         Select preset
  Q / ESC     Quit
  Mouse       Poke the field under the pointer
"""

import logging
import os
import time

import numpy as np
import pygame

from .errors import FieldError
from .presets import PRESET_ORDER, get_preset
from .simulator import SketchSimulator

logger = logging.getLogger(__name__)


class Viewer:
    def __init__(self, width=900, height=900, sim_width=None, sim_height=None,
                 start_preset="isolines", seed=None):
        self.canvas_w = width
        self.canvas_h = height
        self.sim = SketchSimulator(
            start_preset, sim_width or width, sim_height or height, seed=seed
        )
        self.running = True
        self.show_hud = True
        self.fps_history = []
        self.hud_font = None

    def _handle_mouse(self):
        mx, my = pygame.mouse.get_pos()
        if not (0 <= mx < self.canvas_w and 0 <= my < self.canvas_h):
            return
        if pygame.mouse.get_rel() == (0, 0) and not pygame.mouse.get_pressed()[0]:
            return
        sx = mx * self.sim.width / self.canvas_w
        sy = my * self.sim.height / self.canvas_h
        try:
            self.sim.poke(sx, sy)
        except FieldError as exc:
            logger.warning("pointer input dropped: %s", exc)

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return
        preset = get_preset(self.sim.preset_key)
        stats = self.sim.stats
        text = (f"{preset['name']}  |  frame {stats['frame']}  |  "
                f"mean {stats['mean']:.3f}  |  {fps:.0f} fps"
                + ("  |  PAUSED" if self.sim.paused else ""))
        surface = self.hud_font.render(text, True, (200, 200, 200))
        screen.blit(surface, (10, 8))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"fs_{self.sim.preset_key}_{timestamp}.png")
        surface = pygame.surfarray.make_surface(self.sim.sketch.render().swapaxes(0, 1))
        pygame.image.save(surface, path)
        print(f"Screenshot saved: {path}")

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.sim.paused = not self.sim.paused

        elif key == pygame.K_r:
            self.sim.reset()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot()

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self.sim.switch(PRESET_ORDER[idx])

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h))
        pygame.display.set_caption("Field Sketches")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        last_time = time.time()

        while self.running:
            now = time.time()
            dt = min(now - last_time, 0.1)  # cap dt to avoid jumps
            last_time = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)

            self._handle_mouse()

            # sources -> advance -> swap happen inside render
            rgb = self.sim.render(dt)
            surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
            if surface.get_size() != (self.canvas_w, self.canvas_h):
                surface = pygame.transform.smoothscale(surface, (self.canvas_w, self.canvas_h))
            screen.blit(surface, (0, 0))

            self.fps_history.append(time.time() - now)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()
