#!/usr/bin/env python3
"""
Tests for the coherent noise source.
"""

import numpy as np
import pytest

from field_sketches.noise import PerlinNoise


def test_scalar_call_returns_float():
    noise = PerlinNoise(seed=1)
    v = noise(0.3, 0.7, 0.1)
    assert isinstance(v, float)
    assert -1.0 <= v <= 1.0


def test_zero_on_lattice_points():
    noise = PerlinNoise(seed=1, octaves=1)
    assert noise(0.0, 0.0, 0.0) == 0.0
    assert noise(3.0, -2.0, 5.0) == 0.0


def test_same_seed_same_values():
    xs = np.linspace(-4, 4, 50)
    a = PerlinNoise(seed=42, octaves=4)(xs, xs[::-1], 0.5)
    b = PerlinNoise(seed=42, octaves=4)(xs, xs[::-1], 0.5)
    c = PerlinNoise(seed=43, octaves=4)(xs, xs[::-1], 0.5)
    assert np.array_equal(a, b), "Noise must be a pure function of seed and inputs"
    assert not np.array_equal(a, c)


def test_range_and_variation_over_grid():
    noise = PerlinNoise(seed=7, octaves=8)
    grid = noise.grid(64, 48, 0.1, 0.1, z=1.3)
    assert grid.shape == (48, 64)
    assert np.all(np.isfinite(grid))
    assert grid.min() >= -1.0 and grid.max() <= 1.0
    assert grid.std() > 0.05, "Noise should vary across the grid"


def test_spatially_coherent():
    noise = PerlinNoise(seed=3, octaves=1)
    xs = np.linspace(0, 3, 301)
    v = noise(xs, 0.37, 0.11)
    assert np.abs(np.diff(v)).max() < 0.05, "Neighbouring samples should be close"


def test_broadcasting():
    noise = PerlinNoise(seed=0)
    out = noise(np.arange(5)[None, :] * 0.1, np.arange(3)[:, None] * 0.1)
    assert out.shape == (3, 5)


def test_rejects_zero_octaves():
    with pytest.raises(ValueError):
        PerlinNoise(octaves=0)
