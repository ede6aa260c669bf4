"""
Abstract Base Class for Field Engines

The grid field engine and the wave buffer engine share this interface
so sketches and the simulator can drive either one the same way.
Both start uninitialized and become ready after initialize().
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from .errors import InvalidDimension, NotInitialized, OutOfBounds

logger = logging.getLogger(__name__)


def validate_dimensions(width, height):
    """Return (width, height) as ints, or raise InvalidDimension."""
    try:
        w, h = int(width), int(height)
    except (TypeError, ValueError):
        raise InvalidDimension(f"grid size must be integers, got {width!r}x{height!r}")
    if w != width or h != height:
        raise InvalidDimension(f"grid size must be integers, got {width!r}x{height!r}")
    if w <= 0 or h <= 0:
        raise InvalidDimension(f"grid size must be positive, got {w}x{h}")
    return w, h


def cell_index(x, y):
    """Return (x, y) as ints, or raise OutOfBounds for non-whole coordinates."""
    try:
        ix, iy = int(x), int(y)
    except (TypeError, ValueError, OverflowError):
        raise OutOfBounds(f"({x!r}, {y!r}) is not a cell coordinate")
    if ix != x or iy != y:
        raise OutOfBounds(f"({x}, {y}) is not a whole cell coordinate")
    return ix, iy


class FieldEngine(ABC):
    """Base class for field engines."""

    engine_name = ""   # e.g. "grid", "wave"
    engine_label = ""  # e.g. "Grid Field", "Wave Buffer"

    def __init__(self):
        self.width = 0
        self.height = 0
        self.generation = 0
        self._ready = False

    @property
    def ready(self):
        return self._ready

    @property
    def shape(self):
        """(rows, cols) of the owned field, numpy order."""
        return (self.height, self.width)

    def _require_ready(self, op):
        if not self._ready:
            raise NotInitialized(f"{self.engine_label}: {op}() called before initialize()")

    def _check_bounds(self, x, y):
        """Return (x, y) as ints, or raise OutOfBounds."""
        x, y = cell_index(x, y)
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds(
                f"({x}, {y}) outside {self.width}x{self.height} field"
            )
        return x, y

    def _commit(self, width, height):
        self.width = width
        self.height = height
        self.generation = 0
        self._ready = True
        logger.debug("%s ready at %dx%d", self.engine_label, width, height)

    @property
    @abstractmethod
    def world(self):
        """The field the renderer should display."""

    @abstractmethod
    def step(self):
        """Advance one time step. Returns the world (display) state."""

    def step_n(self, n):
        """Advance n steps. Returns final state."""
        for _ in range(n):
            self.step()
        return self.world

    @abstractmethod
    def set_params(self, **params):
        """Update engine parameters."""

    @abstractmethod
    def get_params(self):
        """Return dict of current parameter values."""

    @abstractmethod
    def clear(self):
        """Zero the field and reset the generation counter."""

    @property
    def stats(self):
        """Return current world statistics."""
        self._require_ready("stats")
        world = self.world
        return {
            "generation": self.generation,
            "mass": float(world.sum()),
            "mean": float(world.mean()),
            "max": float(world.max()),
            "alive_pct": float((np.abs(world) > 0.01).sum()) / world.size * 100,
        }
