"""
Marching Squares Lookup

A 2x2 block of field values is classified into a 4-bit cell state:

    a ---- b        state = a*8 + b*4 + c*2 + d
    |      |        a=(x, y)    b=(x+1, y)
    d ---- c        c=(x+1, y+1) d=(x, y+1)

Each corner bit is 1 when its value is above the threshold. The state
indexes SEGMENT_TABLE, which lists the edge-midpoint pairs to connect.
Complementary states (s and 15 - s) share the same segments; the saddle
states 5 and 10 always produce two separate segments.

Drawing style (colour, line width) is not part of this table.
"""

import enum
from collections import namedtuple

import numpy as np


class Edge(enum.IntEnum):
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


# Edge midpoint offsets inside a unit cell, (x, y)
EDGE_OFFSETS = {
    Edge.TOP: (0.5, 0.0),
    Edge.RIGHT: (1.0, 0.5),
    Edge.BOTTOM: (0.5, 1.0),
    Edge.LEFT: (0.0, 0.5),
}

T, R, B, L = Edge.TOP, Edge.RIGHT, Edge.BOTTOM, Edge.LEFT

SEGMENT_TABLE = (
    (),                  # 0  ....
    ((B, L),),           # 1  d
    ((R, B),),           # 2  c
    ((R, L),),           # 3  c d
    ((T, R),),           # 4  b
    ((T, L), (R, B)),    # 5  b d (saddle)
    ((T, B),),           # 6  b c
    ((T, L),),           # 7  b c d
    ((T, L),),           # 8  a
    ((T, B),),           # 9  a d
    ((T, R), (B, L)),    # 10 a c (saddle)
    ((T, R),),           # 11 a c d
    ((R, L),),           # 12 a b
    ((R, B),),           # 13 a b d
    ((B, L),),           # 14 a b c
    (),                  # 15 abcd
)

del T, R, B, L

SADDLE_STATES = (5, 10)

Point = namedtuple("Point", ["x", "y"])
Segment = namedtuple("Segment", ["start", "end"])


def cell_state(a, b, c, d):
    """Pack four 0/1 corner bits into a cell state."""
    return a * 8 + b * 4 + c * 2 + d * 1


def corner_bits(values, threshold):
    """0/1 int array: 1 where value > threshold."""
    return (np.asarray(values) > threshold).astype(np.int8)


def state_grid(field, threshold):
    """Cell states for every 2x2 block of a (rows, cols) field.

    Returns an int8 array of shape (rows-1, cols-1) where entry [y, x]
    classifies the block whose top-left corner is field[y, x].
    """
    bits = corner_bits(field, threshold)
    a = bits[:-1, :-1]
    b = bits[:-1, 1:]
    c = bits[1:, 1:]
    d = bits[1:, :-1]
    return (a * 8 + b * 4 + c * 2 + d).astype(np.int8)


def edge_midpoint(edge, x, y, resolution=1.0):
    """World-space midpoint of an edge of cell (x, y)."""
    ox, oy = EDGE_OFFSETS[edge]
    return Point((x + ox) * resolution, (y + oy) * resolution)


def cell_segments(state, x, y, resolution=1.0):
    """Segments for one cell state at cell (x, y)."""
    return [
        Segment(edge_midpoint(e0, x, y, resolution), edge_midpoint(e1, x, y, resolution))
        for e0, e1 in SEGMENT_TABLE[state]
    ]


# Per-state segment arrays for vectorised extraction: (n, 2, 2) unit offsets
_UNIT_SEGMENTS = [
    np.array([[EDGE_OFFSETS[e0], EDGE_OFFSETS[e1]] for e0, e1 in pairs],
             dtype=np.float64).reshape(-1, 2, 2)
    for pairs in SEGMENT_TABLE
]


def segments_array(states, resolution=1.0):
    """All segments for a state grid as an (N, 2, 2) float array.

    Segments are ordered row-major by cell, then by table order.
    """
    out = []
    for state in range(1, 15):
        ys, xs = np.nonzero(states == state)
        if len(xs) == 0:
            continue
        unit = _UNIT_SEGMENTS[state]
        origin = np.stack([xs, ys], axis=-1).astype(np.float64)
        segs = origin[:, None, None, :] + unit[None, :, :, :]
        order = np.repeat(ys * states.shape[1] + xs, len(unit))
        out.append((order, segs.reshape(-1, 2, 2)))
    if not out:
        return np.zeros((0, 2, 2), dtype=np.float64)
    order = np.concatenate([o for o, _ in out])
    segs = np.concatenate([s for _, s in out])
    # stable sort keeps table order inside a cell
    idx = np.argsort(order, kind="stable")
    return segs[idx] * resolution
