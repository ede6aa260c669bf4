"""
SketchSimulator - Headless setup/loop Host

Runs one sketch at a time with no window dependency. The viewer and
the CLI snapshot mode both drive sketches through this class.

Usage:
    from field_sketches.simulator import SketchSimulator
    sim = SketchSimulator("isolines", 640, 480)
    frame = sim.render(0.016)  # (H, W, 3) uint8
"""

import logging

from .presets import get_preset
from .raster import apply_glow
from .sketches import SKETCH_CLASSES

logger = logging.getLogger(__name__)


class SketchSimulator:

    def __init__(self, preset_key="isolines", width=640, height=480, seed=None):
        self.width = int(width)
        self.height = int(height)
        self.seed = seed
        self.paused = False
        self.preset_key = None
        self.preset = None
        self.sketch = None
        self.switch(preset_key)

    def switch(self, preset_key):
        """Tear down the current sketch and set up the preset's sketch."""
        preset = get_preset(preset_key)
        if preset is None:
            raise KeyError(f"Unknown preset: {preset_key!r}")
        cls = SKETCH_CLASSES[preset["sketch"]]
        sketch = cls(preset, seed=self.seed)
        sketch.setup(self.width, self.height)

        self.preset_key = preset_key
        self.preset = preset
        self.sketch = sketch
        logger.debug("switched to %s (%s) at %dx%d",
                     preset_key, cls.__name__, self.width, self.height)

    def reset(self):
        self.switch(self.preset_key)

    def resize(self, width, height):
        self.width = int(width)
        self.height = int(height)
        self.reset()

    def step(self, dt):
        if not self.paused:
            self.sketch.loop(dt)

    def render(self, dt=0.016):
        """Run one loop (unless paused) and return the frame."""
        self.step(dt)
        frame = self.sketch.render()
        if self.preset.get("glow"):
            frame = apply_glow(frame)
        return frame

    def run(self, frames, dt=0.016):
        """Run frames loops; return the last frame."""
        frame = None
        for _ in range(frames):
            frame = self.render(dt)
        return frame

    def poke(self, x, y):
        """Pointer input in frame pixels, clamped to the frame."""
        x = min(max(int(x), 0), self.width - 1)
        y = min(max(int(y), 0), self.height - 1)
        self.sketch.poke(x, y)

    @property
    def stats(self):
        return self.sketch.stats
