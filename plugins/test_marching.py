#!/usr/bin/env python3
"""
Tests for the marching-squares lookup table.

Verifies:
1. Complementary states connect the same edge midpoints
2. Saddle states always give two separate segments
3. Empty/full states give nothing
4. Vectorised extraction agrees with the per-cell table
"""

import numpy as np
import pytest

from field_sketches.marching import (
    Edge, SADDLE_STATES, SEGMENT_TABLE, cell_segments, cell_state,
    edge_midpoint, segments_array, state_grid,
)


def _endpoint_set(segments):
    return {frozenset(map(tuple, seg)) for seg in segments}


def test_table_has_sixteen_entries():
    assert len(SEGMENT_TABLE) == 16


@pytest.mark.parametrize("state", [1, 2, 3, 4, 6, 7])
def test_complement_states_share_segments(state):
    comp = 15 - state
    a = _endpoint_set(cell_segments(state, 3, 2, resolution=4.0))
    b = _endpoint_set(cell_segments(comp, 3, 2, resolution=4.0))
    assert a == b, f"States {state} and {comp} should connect the same midpoints"
    assert len(a) == 1


@pytest.mark.parametrize("state", SADDLE_STATES)
def test_saddles_have_two_segments(state):
    segs = SEGMENT_TABLE[state]
    assert len(segs) == 2, f"Saddle state {state} must give two segments"
    edges = [e for seg in segs for e in seg]
    assert sorted(edges) == sorted(Edge), "Saddle segments must use all four edges once"


def test_saddles_are_not_merged():
    assert _endpoint_set(cell_segments(5, 0, 0)) != _endpoint_set(cell_segments(10, 0, 0))


@pytest.mark.parametrize("state", [0, 15])
def test_uniform_states_emit_nothing(state):
    assert cell_segments(state, 0, 0) == []


def test_every_segment_joins_two_different_edges():
    for state, segs in enumerate(SEGMENT_TABLE):
        for e0, e1 in segs:
            assert e0 != e1, f"Degenerate segment in state {state}"


def test_edge_midpoints():
    assert edge_midpoint(Edge.TOP, 2, 3, 10) == (25.0, 30.0)
    assert edge_midpoint(Edge.RIGHT, 2, 3, 10) == (30.0, 35.0)
    assert edge_midpoint(Edge.BOTTOM, 2, 3, 10) == (25.0, 40.0)
    assert edge_midpoint(Edge.LEFT, 2, 3, 10) == (20.0, 35.0)


def test_cell_state_packing():
    assert cell_state(1, 0, 1, 0) == 10
    assert cell_state(0, 1, 0, 1) == 5
    assert cell_state(1, 1, 1, 1) == 15


def test_state_grid_corners():
    field = np.array([
        [1.0, 0.0],
        [0.0, 1.0],
    ])
    assert state_grid(field, 0.5)[0, 0] == 10, "a and c on -> saddle 10"


def test_segments_array_matches_table():
    rng = np.random.default_rng(1)
    states = rng.integers(0, 16, size=(6, 5)).astype(np.int8)
    expected = []
    for y in range(6):
        for x in range(5):
            for seg in cell_segments(int(states[y, x]), x, y, 2.0):
                expected.append([list(seg.start), list(seg.end)])
    got = segments_array(states, 2.0)
    assert got.shape == (len(expected), 2, 2)
    assert np.allclose(got, np.array(expected).reshape(-1, 2, 2))


def test_segments_array_empty():
    assert segments_array(np.zeros((3, 3), dtype=np.int8)).shape == (0, 2, 2)
