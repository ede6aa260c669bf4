"""
Coherent Noise Source

Seeded 3D gradient (Perlin) noise, vectorised over numpy arrays so a
whole grid can be sampled in one call. Octaves are summed fBm-style and
normalised by total amplitude, so output stays in [-1, 1].

Usage:
    noise = PerlinNoise(seed=7, octaves=8)
    v = noise(0.1, 0.2, 0.03)               # float
    grid = noise(xs[None, :], ys[:, None])  # broadcast array
"""

import numpy as np


# 12 cube-edge gradient directions
_GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)


def _fade(t):
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t, a, b):
    return a + t * (b - a)


class PerlinNoise:
    """Seeded multi-octave 3D gradient noise.

    Deterministic: two instances built with the same seed return the same
    values for the same inputs. Calling it has no side effects.
    """

    def __init__(self, seed=None, octaves=1, persistence=0.5, lacunarity=2.0):
        """
        Args:
            seed: Seed for the permutation table (None = random)
            octaves: Number of summed octaves (noise detail)
            persistence: Amplitude multiplier per octave
            lacunarity: Frequency multiplier per octave
        """
        if int(octaves) < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        self.seed = seed
        self.octaves = int(octaves)
        self.persistence = persistence
        self.lacunarity = lacunarity

        rng = np.random.default_rng(seed)
        p = rng.permutation(256).astype(np.int64)
        self._perm = np.concatenate([p, p])

    def _grad(self, h, x, y, z):
        g = _GRAD3[self._perm[h] % 12]
        return g[..., 0] * x + g[..., 1] * y + g[..., 2] * z

    def _octave(self, x, y, z):
        """Single octave of gradient noise."""
        fx, fy, fz = np.floor(x), np.floor(y), np.floor(z)
        xf, yf, zf = x - fx, y - fy, z - fz
        xi = fx.astype(np.int64) & 255
        yi = fy.astype(np.int64) & 255
        zi = fz.astype(np.int64) & 255

        u, v, w = _fade(xf), _fade(yf), _fade(zf)
        perm = self._perm

        a = perm[xi] + yi
        aa = perm[a] + zi
        ab = perm[a + 1] + zi
        b = perm[xi + 1] + yi
        ba = perm[b] + zi
        bb = perm[b + 1] + zi

        g = self._grad
        near = _lerp(
            v,
            _lerp(u, g(aa, xf, yf, zf), g(ba, xf - 1, yf, zf)),
            _lerp(u, g(ab, xf, yf - 1, zf), g(bb, xf - 1, yf - 1, zf)),
        )
        far = _lerp(
            v,
            _lerp(u, g(aa + 1, xf, yf, zf - 1), g(ba + 1, xf - 1, yf, zf - 1)),
            _lerp(u, g(ab + 1, xf, yf - 1, zf - 1), g(bb + 1, xf - 1, yf - 1, zf - 1)),
        )
        return _lerp(w, near, far)

    def __call__(self, x, y, z=0.0):
        """Sample noise at (x, y, z). Scalars return float, arrays broadcast."""
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )

        total = np.zeros(x.shape, dtype=np.float64)
        amplitude = 1.0
        frequency = 1.0
        norm = 0.0
        for _ in range(self.octaves):
            total += amplitude * self._octave(x * frequency, y * frequency, z * frequency)
            norm += amplitude
            amplitude *= self.persistence
            frequency *= self.lacunarity

        out = np.clip(total / norm, -1.0, 1.0)
        if out.ndim == 0:
            return float(out)
        return out

    def grid(self, cols, rows, x_step, y_step, z=0.0, x0=0.0, y0=0.0):
        """Sample a (rows, cols) grid at x0 + x_step*i, y0 + y_step*j."""
        xs = x0 + x_step * np.arange(cols, dtype=np.float64)
        ys = y0 + y_step * np.arange(rows, dtype=np.float64)
        return self(xs[None, :], ys[:, None], z)
