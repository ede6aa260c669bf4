#!/usr/bin/env python3
"""
Tests for the wave buffer engine.

Verifies:
1. Interior propagation formula and untouched borders
2. Reference swap (no copy) and two-generation history
3. perturb/sample strict bounds
4. Null input stays null; damping decays energy
"""

import numpy as np
import pytest

from field_sketches.errors import InvalidDimension, NotInitialized, OutOfBounds
from field_sketches.wave import WaveBufferEngine


def test_initialize_fills_both_buffers():
    engine = WaveBufferEngine().initialize(6, 4, 0.25)
    assert engine.current.shape == (4, 6)
    assert np.all(engine.current == 0.25) and np.all(engine.previous == 0.25)
    assert engine.current is not engine.previous, "Buffers must be separate arrays"


@pytest.mark.parametrize("w,h", [(0, 3), (3, -2)])
def test_initialize_rejects_bad_dimensions(w, h):
    engine = WaveBufferEngine()
    with pytest.raises(InvalidDimension):
        engine.initialize(w, h)
    assert not engine.ready


def test_uninitialized_engine_raises():
    engine = WaveBufferEngine()
    with pytest.raises(NotInitialized):
        engine.advance(0.9)
    with pytest.raises(NotInitialized):
        engine.perturb(0, 0, 1.0)
    with pytest.raises(NotInitialized):
        engine.swap()


def test_perturb_then_sample():
    engine = WaveBufferEngine().initialize(5, 5)
    engine.perturb(2, 3, 255.0)
    assert engine.sample(2, 3) == 255.0
    assert engine.current[3, 2] == 255.0, "perturb writes current[y][x]"


@pytest.mark.parametrize("x,y", [(5, 0), (0, 5), (-1, 2), (2, -1)])
def test_perturb_out_of_bounds(x, y):
    engine = WaveBufferEngine().initialize(5, 5)
    with pytest.raises(OutOfBounds):
        engine.perturb(x, y, 1.0)
    assert np.all(engine.current == 0.0), "Failed perturb must not write anything"


@pytest.mark.parametrize("x,y", [(1.5, 1), (1, 0.25), (float("nan"), 0), ("a", 1)])
def test_perturb_rejects_fractional_coordinates(x, y):
    engine = WaveBufferEngine().initialize(5, 5)
    with pytest.raises(OutOfBounds):
        engine.perturb(x, y, 1.0)
    assert np.all(engine.current == 0.0)


def test_whole_float_coordinates_are_cells():
    engine = WaveBufferEngine().initialize(5, 5)
    engine.perturb(2.0, np.int64(3), 4.0)
    assert engine.sample(2, 3) == 4.0


def test_perturb_cells_is_all_or_nothing():
    engine = WaveBufferEngine().initialize(5, 5)
    with pytest.raises(OutOfBounds):
        engine.perturb_cells([(1, 1), (2, 2), (5, 5)], 9.0)
    assert np.all(engine.current == 0.0), "No cell may be written when one is off the field"
    engine.perturb_cells([(1, 1), (2, 2)], 9.0)
    assert engine.sample(1, 1) == 9.0 and engine.sample(2, 2) == 9.0
    assert (engine.current != 0).sum() == 2


def test_advance_scenario_4x4():
    engine = WaveBufferEngine().initialize(4, 4, 0.0)
    engine.previous[:] = 1.0
    engine.advance(0.88)
    cur = engine.current
    for x, y in [(1, 1), (1, 2), (2, 1), (2, 2)]:
        assert cur[y, x] == pytest.approx(1.76), f"Interior ({x},{y}) = {cur[y, x]}"
    border = np.ones((4, 4), dtype=bool)
    border[1:3, 1:3] = False
    assert np.all(cur[border] == 0.0), "Border cells must be untouched"


def test_advance_matches_reference_loop():
    rng = np.random.default_rng(0)
    engine = WaveBufferEngine().initialize(9, 7)
    engine.current[:] = rng.normal(size=(7, 9))
    engine.previous[:] = rng.normal(size=(7, 9))
    cur = engine.current.copy()
    prev = engine.previous.copy()
    for y in range(1, 6):
        for x in range(1, 8):
            cur[y][x] = ((prev[y - 1][x] + prev[y + 1][x] + prev[y][x - 1] + prev[y][x + 1]) / 2
                         - cur[y][x]) * 0.9
    engine.advance(0.9)
    assert np.allclose(engine.current, cur)


def test_swap_exchanges_references():
    engine = WaveBufferEngine().initialize(4, 4)
    cur, prev = engine.current, engine.previous
    engine.swap()
    assert engine.current is prev and engine.previous is cur, "swap must not copy"
    assert engine.generation == 1


def test_null_input_stays_null():
    engine = WaveBufferEngine().initialize(8, 8, 0.0)
    for _ in range(2):
        engine.advance(1.0)
        engine.swap()
    assert np.all(engine.current == 0.0) and np.all(engine.previous == 0.0)


def test_damping_decays_a_splash():
    engine = WaveBufferEngine(damping=0.9).initialize(32, 32)
    engine.perturb(16, 16, 100.0)
    energy = []
    for _ in range(200):
        engine.step()
        energy.append(float(np.abs(engine.current).sum() + np.abs(engine.previous).sum()))
    assert np.all(np.isfinite(engine.current))
    assert energy[-1] < energy[10] * 0.01, "Damped ripples should die out"


def test_step_runs_sources_before_advance():
    calls = []

    class Recorder:
        def update(self, dt, engine):
            calls.append(("source", dt, engine.generation))
            engine.perturb(2, 2, 10.0)

    engine = WaveBufferEngine().initialize(5, 5)
    engine.step(0.5, sources=[Recorder()], damping=1.0)
    assert calls == [("source", 0.5, 0)]
    # splash was advanced (negated) then swapped into previous
    assert engine.previous[2, 2] == -10.0
    assert engine.current[2, 2] == 0.0


def test_brightness_clamps():
    engine = WaveBufferEngine().initialize(3, 3)
    engine.perturb(0, 0, 2.0)
    engine.perturb(1, 0, -1.0)
    engine.perturb(2, 0, 0.5)
    b = engine.brightness(255.0)
    assert b.dtype == np.uint8
    assert b[0, 0] == 255 and b[0, 1] == 0 and b[0, 2] == 127


def test_unstable_damping_is_allowed(caplog):
    engine = WaveBufferEngine().initialize(5, 5)
    with caplog.at_level("WARNING"):
        engine.advance(1.5)
        engine.advance(1.5)
    warnings = [r for r in caplog.records if "will not decay" in r.getMessage()]
    assert len(warnings) == 1, "Unstable damping should warn once, not raise"
