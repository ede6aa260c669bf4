"""
Disturbance Sources for the Wave Buffer

- DisturbanceSource: a moving point ("fish") that glides toward a target
  and writes a fixed value under its footprint every tick
- FishSchool: fixed pool of sources that pick new targets on a timer,
  either at random or steered by noise
- RainEmitter: drops a single splash at a random cell on a timer

All timers are delta-time driven so they behave the same at any frame
rate. Sources write through WaveBufferEngine.perturb(), which raises
OutOfBounds for coordinates off the field.
"""

import math

import numpy as np


def round_half_up(v):
    return int(math.floor(v + 0.5))


def lerp(a, b, t):
    return a + (b - a) * t


class DisturbanceSource:
    """Point emitter that drifts toward its target."""

    def __init__(self, position, radius=1, speed=0.5, magnitude=255.0):
        """
        Args:
            position: (x, y) starting position
            radius: Footprint length in cells (diagonal run from position)
            speed: Interpolation rate toward target, per second
            magnitude: Value written into the current buffer
        """
        x, y = position
        self.position = (float(x), float(y))
        self.target = self.position
        self.radius = int(radius)
        self.speed = speed
        self.magnitude = magnitude

    def move_to(self, x, y):
        """Set a new target; position glides there over later updates."""
        self.target = (float(x), float(y))

    def footprint(self, position=None):
        """Integer cells under the source (at position, default the current one)."""
        x, y = self.position if position is None else position
        return [(round_half_up(x + i), round_half_up(y + i)) for i in range(self.radius)]

    def update(self, dt, engine):
        """Move toward target then splash the footprint into engine.

        If any footprint cell is off the field, OutOfBounds is raised and
        neither the position nor the engine changes.
        """
        t = min(max(dt * self.speed, 0.0), 1.0)
        x, y = self.position
        tx, ty = self.target
        position = (lerp(x, tx, t), lerp(y, ty, t))
        engine.perturb_cells(self.footprint(position), self.magnitude)
        self.position = position


class FishSchool:
    """Fixed-size pool of DisturbanceSources with periodic retargeting."""

    def __init__(self, width, height, count=1, radius=1, speed=0.1,
                 interval=0.55, magnitude=255.0, noise=None, seed=None):
        """
        Args:
            width, height: Field size the fish swim in
            count: Number of fish (fixed for the run)
            radius: Footprint length of each fish
            speed: Glide rate toward target
            interval: Seconds between retargeting
            magnitude: Splash value
            noise: Optional noise(x, y) -> [-1, 1] used to steer targets
            seed: Seed for random placement
        """
        self.width = width
        self.height = height
        self.radius = max(1, min(int(radius), width, height))
        self.interval = interval
        self.noise = noise
        self.rng = np.random.default_rng(seed)
        self.timer = 0.0
        self.retargets = 0
        self.fish = [
            DisturbanceSource(self._random_point(), radius=self.radius, speed=speed,
                              magnitude=magnitude)
            for _ in range(count)
        ]

    def _span(self, size):
        """Inclusive (lo, hi) range for a fish's top-left coordinate.

        Keeps a one-cell margin past the footprint when the field allows it,
        and always keeps the whole diagonal footprint on the field.
        """
        last = size - self.radius
        lo = min(self.radius + 1, last)
        hi = max(lo, size - self.radius - 2)
        return lo, hi

    def _random_point(self):
        lo_x, hi_x = self._span(self.width)
        lo_y, hi_y = self._span(self.height)
        return (float(self.rng.integers(lo_x, hi_x + 1)),
                float(self.rng.integers(lo_y, hi_y + 1)))

    def _noise_point(self, fish):
        px, py = fish.position
        tx, ty = fish.target
        # z drifts per retarget so lattice-aligned positions still vary
        z = 0.5 + 0.37 * self.retargets
        n = self.noise(px * 0.05, ty * 0.05, z)
        n2 = self.noise(py * 0.05, tx * 0.05, z)
        x = np.interp(n, (-1.0, 1.0), self._span(self.width))
        y = np.interp(n2, (-1.0, 1.0), self._span(self.height))
        return (float(x), float(y))

    def retarget(self):
        for fish in self.fish:
            if self.noise is not None:
                fish.move_to(*self._noise_point(fish))
            else:
                fish.move_to(*self._random_point())
        self.retargets += 1

    def update(self, dt, engine):
        self.timer -= dt
        if self.timer <= 0:
            self.retarget()
            self.timer = self.interval
        for fish in self.fish:
            fish.update(dt, engine)

    def __iter__(self):
        return iter(self.fish)

    def __len__(self):
        return len(self.fish)


class RainEmitter:
    """Periodic single-cell raindrops away from the field edge."""

    def __init__(self, interval=0.55, margin=20, magnitude=255.0, seed=None):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.margin = margin
        self.magnitude = magnitude
        self.rng = np.random.default_rng(seed)
        self.timer = 0.0
        self.drops = 0

    def drop(self, engine):
        """Splash one random cell. Returns its (x, y)."""
        mx = min(self.margin, (engine.width - 1) // 2)
        my = min(self.margin, (engine.height - 1) // 2)
        x = int(self.rng.integers(mx, engine.width - mx))
        y = int(self.rng.integers(my, engine.height - my))
        engine.perturb(x, y, self.magnitude)
        self.drops += 1
        return x, y

    def update(self, dt, engine):
        self.timer -= dt
        while self.timer <= 0:
            self.drop(engine)
            self.timer += self.interval
