"""
Sketches - setup/loop Programs Over the Field Engines

A sketch owns one engine plus whatever per-sketch state it animates
(hue, angle, timers). The host calls setup() once, then loop(dt) and
render() every frame. Pointer input arrives through poke() in frame
pixel coordinates, already clamped to the frame by the host.
"""

import logging
import math
from abc import ABC, abstractmethod

import numpy as np

from .colormaps import apply_colormap, get_colormap, hsl_to_rgb
from .grid_field import GridFieldEngine
from .noise import PerlinNoise
from .raster import blank, draw_segments, fade, upscale_cells, upscale_field
from .rules import LifeRule, NoiseRule
from .sources import FishSchool, RainEmitter
from .wave import WaveBufferEngine

logger = logging.getLogger(__name__)


class Sketch(ABC):
    """Base class for sketches."""

    sketch_name = ""

    def __init__(self, preset, seed=None):
        self.preset = preset
        self.seed = seed
        self.width = 0
        self.height = 0
        self.frame_count = 0
        self.engine = None

    @abstractmethod
    def setup(self, width, height):
        """Build and initialize the engine for a width x height frame."""

    @abstractmethod
    def loop(self, dt):
        """Advance the simulation by one frame."""

    @abstractmethod
    def render(self):
        """Return the current (H, W, 3) uint8 frame."""

    def poke(self, x, y):
        """Pointer input at pixel (x, y). Ignored unless overridden."""

    @property
    def stats(self):
        stats = dict(self.engine.stats)
        stats["frame"] = self.frame_count
        return stats


class MarchingSquaresSketch(Sketch):
    """Noise field with marching-squares isolines on top."""

    sketch_name = "marching"

    def setup(self, width, height):
        p = self.preset
        self.width, self.height = width, height
        self.resolution = max(width, height) * p.get("resolution_frac", 0.02)
        cols = int(width / self.resolution) + 1
        rows = int(height / self.resolution) + 1
        self.threshold = p.get("threshold", 0.0)
        self.lut = get_colormap(p.get("palette", "dusk"))

        rule = NoiseRule(
            x_step=p.get("x_step", 0.1), y_step=p.get("y_step", 0.1),
            z_step=p.get("z_step", 0.03), octaves=p.get("octaves", 8),
            seed=self.seed,
        )
        self.engine = GridFieldEngine(rule=rule, resolution=self.resolution, seed=self.seed)
        self.engine.initialize(cols, rows, "noise")

    def loop(self, dt):
        self.engine.step()
        self.frame_count += 1

    def render(self):
        field = self.engine.field
        # field spans (cols-1)*res which can overshoot the frame
        span_w = int(round((self.engine.cols - 1) * self.resolution)) + 1
        span_h = int(round((self.engine.rows - 1) * self.resolution)) + 1
        up = upscale_field(field, span_w, span_h)[:self.height, :self.width]
        frame = blank(self.width, self.height)
        bg = apply_colormap(up, self.lut, lo=-1.0, hi=1.0)
        frame[:bg.shape[0], :bg.shape[1]] = (bg.astype(np.float32) * 0.35).astype(np.uint8)

        segments = self.engine.extract_isolines(self.threshold).to_array()
        width = max(1, int(self.resolution * 0.1))
        return draw_segments(frame, segments, color=(255, 255, 255), width=width)


class GameOfLifeSketch(Sketch):
    """Hue-cycled Game of Life with fading trails and random births."""

    sketch_name = "life"

    def setup(self, width, height):
        p = self.preset
        self.width, self.height = width, height
        self.cell = max(width, height) * p.get("cell_frac", 0.01)
        cols = max(1, int(round(width / self.cell)))
        rows = max(1, int(round(height / self.cell)))

        self.hue = p.get("hue", 350)
        self.angle = 0.0
        self.trail = p.get("trail", 0.4)
        self.sample_interval = p.get("sample_interval", 1.0)
        self.sample_timer = self.sample_interval
        self.rng = np.random.default_rng(self.seed)

        self.engine = GridFieldEngine(rule=LifeRule(p.get("rule", "B3/S23")),
                                      resolution=self.cell, seed=self.seed)
        self.engine.initialize(cols, rows, "random")
        self._frame = blank(width, height)

    def _random_birth(self):
        cols, rows = self.engine.cols, self.engine.rows
        if cols < 3 or rows < 3:
            return
        x = int(self.rng.integers(1, cols - 1))
        y = int(self.rng.integers(1, rows - 1))
        self.engine.set_cell(x, y, 1.0)

    def loop(self, dt):
        self.sample_timer -= dt
        if self.sample_timer <= 0:
            self._random_birth()
            self.sample_timer = self.sample_interval
        self.engine.step()
        self.frame_count += 1

    def _cell_colors(self):
        cols = self.engine.cols
        x = np.arange(cols, dtype=np.float64)
        # angle advances 0.05 per column as the columns are drawn
        hues = (self.hue * x + self.angle + 0.05 * (x + 1)) % 360
        self.angle += 0.05 * cols
        return hsl_to_rgb(hues)

    def render(self):
        alive = LifeRule.alive(self.engine.field).astype(bool)
        colors = self._cell_colors()
        cells = np.zeros(alive.shape + (3,), dtype=np.uint8)
        cells[:] = colors[None, :, :]

        up_alive = upscale_cells(alive[:, :, None], self.width, self.height)[:, :, 0]
        up_cells = upscale_cells(cells, self.width, self.height)

        frame = fade(self._frame, self.trail)
        frame[up_alive] = up_cells[up_alive]
        self._frame = frame
        return frame

    def poke(self, x, y):
        cx = min(int(x / self.cell), self.engine.cols - 1)
        cy = min(int(y / self.cell), self.engine.rows - 1)
        self.engine.set_cell(cx, cy, 1.0)


class NoiseFlowSketch(Sketch):
    """Noise sampled on a coarse grid, each cell drawn as a rotated stroke."""

    sketch_name = "flow"

    def setup(self, width, height):
        p = self.preset
        self.width, self.height = width, height
        self.resolution = p.get("resolution", 25)
        cols = max(1, int(math.ceil(width / self.resolution)))
        rows = max(1, int(math.ceil(height / self.resolution)))
        self.angle = 0.0
        self.trail = p.get("trail", 0.5)

        rule = NoiseRule(
            x_step=p.get("x_step", 0.01), y_step=p.get("y_step", 0.01),
            z_step=p.get("z_step", 0.003), octaves=p.get("octaves", 8),
            seed=self.seed, x_origin=0,
        )
        self.engine = GridFieldEngine(rule=rule, resolution=self.resolution, seed=self.seed)
        self.engine.initialize(cols, rows, "noise")
        self._frame = blank(width, height)

    def loop(self, dt):
        self.engine.step()
        self.frame_count += 1

    def strokes(self):
        """(N, 2, 2) strokes, one per cell, pointing along the noise angle."""
        field = self.engine.field
        rows, cols = field.shape
        ys, xs = np.mgrid[:rows, :cols]
        heading = field * math.tau * 4 + math.pi / 4
        length = self.resolution * 1.2 * math.sqrt(2)
        x0 = xs * self.resolution
        y0 = ys * self.resolution
        x1 = x0 + np.cos(heading) * length
        y1 = y0 + np.sin(heading) * length
        starts = np.stack([x0, y0], axis=-1).reshape(-1, 2)
        ends = np.stack([x1, y1], axis=-1).reshape(-1, 2)
        return np.stack([starts, ends], axis=1)

    def render(self):
        cols = self.engine.cols
        x = np.arange(cols, dtype=np.float64)
        # angle grows column by column, so each column has its own hue
        angles = self.angle + 0.003 * np.cumsum(x)
        self.angle = float(angles[-1])
        hues = np.tile((angles + x) * 3, self.engine.rows)
        colors = hsl_to_rgb(hues, 0.5, 0.75)

        frame = fade(self._frame, self.trail)
        width = max(1, int(self.resolution * 0.1))
        self._frame = draw_segments(frame, self.strokes(), color=colors, width=width)
        return self._frame


class RippleSketch(Sketch):
    """Damped water ripples from rain, fish and pointer pokes."""

    sketch_name = "ripple"

    def setup(self, width, height):
        p = self.preset
        self.width, self.height = width, height
        self.scale = max(1, int(p.get("scale", 1)))
        sim_w = max(3, width // self.scale)
        sim_h = max(3, height // self.scale)
        self.magnitude = p.get("magnitude", 255.0)
        self.gain = p.get("gain", 1.0)
        self.lut = get_colormap(p.get("palette", "ocean"))

        self.engine = WaveBufferEngine(damping=p.get("damping", 0.88))
        self.engine.initialize(sim_w, sim_h, 0.0)

        noise = PerlinNoise(seed=self.seed) if p.get("steer_with_noise") else None
        self.school = FishSchool(
            sim_w, sim_h, count=p.get("fish_count", 1), radius=p.get("fish_radius", 1),
            speed=p.get("fish_speed", 0.8), interval=p.get("fish_interval", 0.55),
            magnitude=self.magnitude, noise=noise, seed=self.seed,
        )
        self.rain = RainEmitter(
            interval=p.get("rain_interval", 0.55), margin=p.get("rain_margin", 20),
            magnitude=self.magnitude, seed=None if self.seed is None else self.seed + 1,
        )

    def loop(self, dt):
        # sources -> advance -> swap
        self.engine.step(dt, sources=(self.school, self.rain))
        self.frame_count += 1

    def render(self):
        level = self.engine.brightness(self.gain).astype(np.float64) / 255.0
        rgb = apply_colormap(level, self.lut)
        return upscale_cells(rgb, self.width, self.height)

    def poke(self, x, y):
        sx = min(int(x) // self.scale, self.engine.width - 1)
        sy = min(int(y) // self.scale, self.engine.height - 1)
        self.engine.perturb(sx, sy, self.magnitude)


SKETCH_CLASSES = {
    "marching": MarchingSquaresSketch,
    "life": GameOfLifeSketch,
    "flow": NoiseFlowSketch,
    "ripple": RippleSketch,
}
