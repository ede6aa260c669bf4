"""
Wave Buffer Engine - Damped 2D Ripples

Classic two-buffer water ripple: each interior cell becomes half the sum
of its four neighbours in the previous generation, minus its own value in
the current generation, then damped:

    next = (prev[y-1,x] + prev[y+1,x] + prev[y,x-1] + prev[y,x+1]) / 2 - cur[y,x]
    cur[y,x] = next * damping

Border cells are never written (no-flow boundary). After each advance()
the buffers trade roles by reference, so only the two most recent
generations are ever held.

damping >= 1 never decays and blows up; it is allowed but logged.
"""

import logging

import numpy as np

from .engine_base import FieldEngine, validate_dimensions

logger = logging.getLogger(__name__)


class WaveBufferEngine(FieldEngine):

    engine_name = "wave"
    engine_label = "Wave Buffer"

    def __init__(self, damping=0.88):
        """
        Args:
            damping: Default damping factor for advance(), in (0, 1]
        """
        super().__init__()
        self.damping = damping
        self._current = None
        self._previous = None
        self._warned_unstable = False

    @property
    def current(self):
        self._require_ready("current")
        return self._current

    @property
    def previous(self):
        self._require_ready("previous")
        return self._previous

    @property
    def world(self):
        return self.current

    def initialize(self, width, height, initial_value=0.0):
        """Allocate both buffers at width x height, filled with initial_value."""
        width, height = validate_dimensions(width, height)
        current = np.full((height, width), initial_value, dtype=np.float64)
        previous = np.full((height, width), initial_value, dtype=np.float64)
        self._current, self._previous = current, previous
        self._commit(width, height)
        return self

    def perturb(self, x, y, magnitude=255.0):
        """Set current[y, x] = magnitude. No clamping: bad coords raise."""
        self._require_ready("perturb")
        x, y = self._check_bounds(x, y)
        self._current[y, x] = magnitude

    def perturb_cells(self, cells, magnitude=255.0):
        """Set every (x, y) in cells to magnitude, or none of them if any is off the field."""
        self._require_ready("perturb_cells")
        checked = [self._check_bounds(x, y) for x, y in cells]
        if not checked:
            return
        xs, ys = zip(*checked)
        self._current[list(ys), list(xs)] = magnitude

    def sample(self, x, y):
        self._require_ready("sample")
        x, y = self._check_bounds(x, y)
        return float(self._current[y, x])

    def advance(self, damping=None):
        """Propagate one generation into the current buffer (interior only)."""
        self._require_ready("advance")
        if damping is None:
            damping = self.damping
        if damping >= 1.0 and not self._warned_unstable:
            logger.warning("damping %.3f >= 1: ripples will not decay", damping)
            self._warned_unstable = True

        if self.width < 3 or self.height < 3:
            return self._current

        prev = self._previous
        cur = self._current
        # each write reads only prev and the same cell of cur
        nxt = (prev[:-2, 1:-1] + prev[2:, 1:-1] + prev[1:-1, :-2] + prev[1:-1, 2:]) / 2.0
        nxt -= cur[1:-1, 1:-1]
        cur[1:-1, 1:-1] = nxt * damping
        return cur

    def swap(self):
        """Exchange current/previous roles (no copy)."""
        self._require_ready("swap")
        self._current, self._previous = self._previous, self._current
        self.generation += 1

    def step(self, dt=1.0, sources=(), damping=None):
        """One frame in fixed order: sources -> advance -> swap."""
        self._require_ready("step")
        for source in sources:
            source.update(dt, self)
        self.advance(damping)
        self.swap()
        return self._current

    def brightness(self, gain=255.0):
        """Current buffer mapped to uint8 brightness (clamped)."""
        self._require_ready("brightness")
        return np.clip(self._current * gain, 0, 255).astype(np.uint8)

    def clear(self):
        self._require_ready("clear")
        self._current[:] = 0.0
        self._previous[:] = 0.0
        self.generation = 0

    def set_params(self, damping=None, **_kw):
        if damping is not None:
            self.damping = float(damping)
            self._warned_unstable = False

    def get_params(self):
        return {"damping": self.damping}
