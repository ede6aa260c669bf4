"""
Grid Field Engine - Discrete Scalar Field with Isoline Extraction

Owns a (rows, cols) scalar field advanced by an interchangeable rule
(cellular automaton or coherent noise), classifies 2x2 neighbourhoods
into marching-squares cell states and extracts isoline segments.

Coordinates in the public API are (x, y); the array is indexed [y, x].
"""

import logging
import math

import numpy as np

from .engine_base import FieldEngine, cell_index, validate_dimensions
from .errors import InvalidThreshold, OutOfBounds
from .marching import cell_state, corner_bits, segments_array, state_grid, Segment, Point
from .rules import LifeRule, NoiseRule, RULE_CLASSES

logger = logging.getLogger(__name__)

FILL_POLICIES = ("zero", "random", "noise")


def _check_threshold(threshold):
    try:
        ok = math.isfinite(threshold)
    except TypeError:
        ok = False
    if not ok:
        raise InvalidThreshold(f"threshold must be a finite number, got {threshold!r}")


class Isolines:
    """Lazy, restartable sequence of isoline segments.

    Built from a snapshot of cell states taken when extract_isolines()
    was called; every iteration walks the same segments again.
    """

    def __init__(self, states, resolution):
        self._states = states
        self.resolution = resolution
        self._array = None

    def to_array(self):
        """(N, 2, 2) array of [[x0, y0], [x1, y1]] segments."""
        if self._array is None:
            self._array = segments_array(self._states, self.resolution)
        return self._array

    def __iter__(self):
        for (x0, y0), (x1, y1) in self.to_array():
            yield Segment(Point(float(x0), float(y0)), Point(float(x1), float(y1)))

    def __len__(self):
        return len(self.to_array())


class GridFieldEngine(FieldEngine):

    engine_name = "grid"
    engine_label = "Grid Field"

    def __init__(self, rule="life", resolution=1.0, seed=None, **rule_params):
        """
        Args:
            rule: "life", "noise", or a rule instance with apply(field)
            resolution: World units per cell (segment scale)
            seed: Seed for the random fill
            rule_params: Passed to the rule class when rule is a name
        """
        super().__init__()
        if isinstance(rule, str):
            if rule not in RULE_CLASSES:
                raise ValueError(f"Unknown rule: {rule!r}")
            if rule == "noise":
                rule_params.setdefault("seed", seed)
            rule = RULE_CLASSES[rule](**rule_params)
        self.rule = rule
        self.resolution = resolution
        self.rng = np.random.default_rng(seed)
        self.fill_policy = "zero"
        self._field = None

    @property
    def cols(self):
        return self.width

    @property
    def rows(self):
        return self.height

    @property
    def world(self):
        self._require_ready("world")
        return self._field

    @property
    def field(self):
        return self.world

    def _fill(self, shape, fill_policy):
        if fill_policy == "zero":
            return np.zeros(shape, dtype=np.float64)
        if fill_policy == "random":
            return self.rng.random(shape)
        if fill_policy == "noise":
            sampler = self.rule if isinstance(self.rule, NoiseRule) else NoiseRule()
            return sampler.sample(shape)
        raise ValueError(f"Unknown fill policy: {fill_policy!r} (expected one of {FILL_POLICIES})")

    def initialize(self, cols, rows, fill_policy="zero"):
        """Allocate a cols x rows field filled per fill_policy."""
        cols, rows = validate_dimensions(cols, rows)
        field = self._fill((rows, cols), fill_policy)
        # commit only after allocation succeeded
        self._field = field
        self.fill_policy = fill_policy
        self._commit(cols, rows)
        return self

    def seed(self, fill_policy=None):
        """Refill the field in place of the current one."""
        self._require_ready("seed")
        policy = fill_policy or self.fill_policy
        self._field = self._fill(self.shape, policy)
        self.fill_policy = policy
        self.generation = 0

    def step(self):
        """Advance one generation with the configured rule."""
        self._require_ready("step")
        self._field = np.asarray(self.rule.apply(self._field), dtype=np.float64)
        self.generation += 1
        return self._field

    def set_cell(self, x, y, value=1.0):
        self._require_ready("set_cell")
        x, y = self._check_bounds(x, y)
        self._field[y, x] = value

    def get_cell(self, x, y):
        self._require_ready("get_cell")
        x, y = self._check_bounds(x, y)
        return float(self._field[y, x])

    def count_neighbors(self, x, y):
        """Live cells among the 8 wrapped neighbours of (x, y)."""
        self._require_ready("count_neighbors")
        x, y = self._check_bounds(x, y)
        alive = LifeRule.alive(self._field)
        total = 0
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                col = (x + dx + self.cols) % self.cols
                row = (y + dy + self.rows) % self.rows
                total += int(alive[row, col])
        return total - int(alive[y, x])

    def classify_neighborhood(self, x, y, threshold=0.0):
        """Cell state (0-15) of the 2x2 block with top-left corner (x, y)."""
        self._require_ready("classify_neighborhood")
        _check_threshold(threshold)
        x, y = cell_index(x, y)
        if not (0 <= x < self.cols - 1 and 0 <= y < self.rows - 1):
            raise OutOfBounds(
                f"2x2 block at ({x}, {y}) leaves {self.cols}x{self.rows} field"
            )
        f = self._field
        a, b, c, d = corner_bits(
            [f[y, x], f[y, x + 1], f[y + 1, x + 1], f[y + 1, x]], threshold
        )
        return int(cell_state(a, b, c, d))

    def cell_states(self, threshold=0.0):
        """(rows-1, cols-1) array of cell states for every interior block."""
        self._require_ready("cell_states")
        _check_threshold(threshold)
        return state_grid(self._field, threshold)

    def extract_isolines(self, threshold=0.0):
        """Isoline segments through every 2x2 block, scaled by resolution."""
        self._require_ready("extract_isolines")
        _check_threshold(threshold)
        return Isolines(state_grid(self._field, threshold), self.resolution)

    def clear(self):
        self._require_ready("clear")
        self._field = np.zeros(self.shape, dtype=np.float64)
        self.generation = 0

    def set_params(self, resolution=None, **params):
        if resolution is not None:
            self.resolution = resolution
        self.rule.set_params(**params)

    def get_params(self):
        params = {"rule_type": getattr(self.rule, "name", type(self.rule).__name__),
                  "resolution": self.resolution}
        params.update(self.rule.get_params())
        return params

    @property
    def stats(self):
        stats = super().stats
        if isinstance(self.rule, LifeRule):
            alive_count = int(LifeRule.alive(self._field).sum())
            stats["mass"] = float(alive_count)
            stats["alive_pct"] = alive_count / self._field.size * 100
        return stats
