"""
Grid Field Step Rules

Interchangeable update rules for GridFieldEngine:

- LifeRule: outer-totalistic cellular automaton in B/S notation
  - B3/S23: Conway's Game of Life
  - B36/S23: HighLife (self-replicating)
  - B3678/S34678: Day & Night
- NoiseRule: every cell resampled from coherent noise at slowly
  drifting offsets; cells are independent of each other.

A rule's apply() returns a brand new field and never writes into the
one it reads.
"""

import numpy as np

from .noise import PerlinNoise


def parse_rule(rule_str):
    """Parse B/S notation like 'B3/S23' into (birth_set, survive_set)."""
    rule_str = rule_str.upper().replace(" ", "")
    parts = rule_str.split("/")
    birth = set()
    survive = set()
    for part in parts:
        if part.startswith("B"):
            birth = {int(c) for c in part[1:]}
        elif part.startswith("S"):
            survive = {int(c) for c in part[1:]}
    return birth, survive


def count_neighbors_moore(alive):
    """Count live Moore neighbours (8) with toroidal wrap via np.roll."""
    n = np.zeros(alive.shape, dtype=np.int32)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            n += np.roll(np.roll(alive, dy, axis=0), dx, axis=1)
    return n


class LifeRule:
    """B/S cellular automaton. A cell is alive when its value > 0.5."""

    name = "life"

    def __init__(self, rule="B3/S23"):
        self.rule_str = rule
        self.birth, self.survive = parse_rule(rule)

    @staticmethod
    def alive(field):
        return (field > 0.5).astype(np.int32)

    def neighbors(self, field):
        return count_neighbors_moore(self.alive(field))

    def apply(self, field):
        alive = self.alive(field).astype(bool)
        neighbors = count_neighbors_moore(alive.astype(np.int32))

        born = ~alive & np.isin(neighbors, list(self.birth))
        survived = alive & np.isin(neighbors, list(self.survive))

        return (born | survived).astype(np.float64)

    def set_params(self, rule=None, **_kw):
        if rule is not None:
            self.rule_str = rule
            self.birth, self.survive = parse_rule(rule)

    def get_params(self):
        return {"rule": self.rule_str}


class NoiseRule:
    """Resample the field from noise(x_step*(x+x_origin), y_step*y, z).

    z advances by z_step after each apply(), giving smooth evolution in
    time as well as space.
    """

    name = "noise"

    def __init__(self, noise=None, x_step=0.1, y_step=0.1, z_step=0.03,
                 octaves=8, seed=None, x_origin=1):
        """
        Args:
            noise: Callable noise(x, y, z) -> [-1, 1]; default PerlinNoise
            x_step: Sample spacing between columns
            y_step: Sample spacing between rows
            z_step: Time offset increment per step
            octaves: Octaves for the default noise source
            seed: Seed for the default noise source
            x_origin: Column index the first sample is taken at (1 for
                contours, 0 for the flow field)
        """
        self.noise = noise if noise is not None else PerlinNoise(seed=seed, octaves=octaves)
        self.x_step = x_step
        self.y_step = y_step
        self.z_step = z_step
        self.x_origin = x_origin
        self.z = 0.0

    def sample(self, shape):
        """Sample a full (rows, cols) field at the current z offset."""
        rows, cols = shape
        xs = self.x_step * (np.arange(cols, dtype=np.float64) + self.x_origin)
        ys = self.y_step * np.arange(rows, dtype=np.float64)
        values = self.noise(xs[None, :], ys[:, None], self.z)
        return np.broadcast_to(np.asarray(values, dtype=np.float64), shape).copy()

    def apply(self, field):
        values = self.sample(field.shape)
        self.z += self.z_step
        return values

    def set_params(self, x_step=None, y_step=None, z_step=None, x_origin=None, **_kw):
        if x_origin is not None:
            self.x_origin = x_origin
        if x_step is not None:
            self.x_step = float(x_step)
        if y_step is not None:
            self.y_step = float(y_step)
        if z_step is not None:
            self.z_step = float(z_step)

    def get_params(self):
        return {
            "x_step": self.x_step,
            "y_step": self.y_step,
            "z_step": self.z_step,
            "x_origin": self.x_origin,
        }


RULE_CLASSES = {
    "life": LifeRule,
    "noise": NoiseRule,
}
