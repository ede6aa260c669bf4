"""
Colormaps for Field Sketches

Maps float values to RGB. Each colormap is a (256, 3) uint8 lookup
table; hue-cycled cells use hsl_to_rgb instead.
"""

import numpy as np


def _interpolate_colors(stops, n=256):
    """
    Build a colormap by smoothstep interpolation between color stops.

    Args:
        stops: List of (position, (r, g, b)) where position is [0, 1]
        n: Number of entries in the LUT
    """
    positions = np.array([s[0] for s in stops], dtype=np.float64)
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    t = np.linspace(0.0, 1.0, n)

    j = np.clip(np.searchsorted(positions, t, side="right") - 1, 0, len(stops) - 2)
    span = positions[j + 1] - positions[j]
    frac = np.where(span > 0, (t - positions[j]) / np.where(span > 0, span, 1.0), 0.0)
    frac = np.clip(frac, 0.0, 1.0)
    frac = frac * frac * (3 - 2 * frac)  # smoothstep

    lut = colors[j] + frac[:, None] * (colors[j + 1] - colors[j])
    return lut.astype(np.uint8)


# --- Colormap Definitions ---

def ink():
    """Plain greyscale, black to white."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (1.00, (255, 255, 255)),
    ])


def ocean():
    """Deep blue to cyan to white ocean depths."""
    return _interpolate_colors([
        (0.00, (0, 2, 15)),
        (0.25, (5, 20, 80)),
        (0.50, (10, 80, 160)),
        (0.75, (40, 180, 220)),
        (1.00, (200, 250, 255)),
    ])


def ember():
    """Black through red to yellow-white."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (0.25, (70, 8, 0)),
        (0.50, (190, 40, 5)),
        (0.75, (245, 150, 30)),
        (1.00, (255, 245, 200)),
    ])


def dusk():
    """Navy through violet to pale pink, for noise fields."""
    return _interpolate_colors([
        (0.00, (4, 4, 18)),
        (0.35, (40, 20, 90)),
        (0.65, (150, 60, 150)),
        (1.00, (250, 200, 220)),
    ])


# Registry of all colormaps
COLORMAPS = {
    "ink": ink,
    "ocean": ocean,
    "ember": ember,
    "dusk": dusk,
}


def get_colormap(name):
    """Get a colormap LUT (256, 3) uint8 array by name."""
    return COLORMAPS[name]()


def apply_colormap(field, lut, lo=0.0, hi=1.0):
    """
    Apply a colormap LUT to a 2D float field.

    Args:
        field: 2D numpy array
        lut: (256, 3) uint8 colormap lookup table
        lo, hi: Field values mapped to the first and last LUT entries

    Returns:
        (H, W, 3) uint8 RGB image
    """
    span = hi - lo if hi != lo else 1.0
    norm = np.clip((np.asarray(field, dtype=np.float64) - lo) / span, 0, 1)
    return lut[(norm * 255).astype(np.uint8)]


def hsl_to_rgb(hue, saturation=0.5, lightness=0.5):
    """Vectorised HSL -> RGB. hue in degrees (any range), returns uint8 (..., 3)."""
    h = (np.asarray(hue, dtype=np.float64) % 360.0) / 60.0
    c = (1.0 - abs(2.0 * lightness - 1.0)) * saturation
    x = c * (1.0 - np.abs(h % 2.0 - 1.0))
    m = lightness - c / 2.0

    sector = np.floor(h).astype(np.int64) % 6
    zeros = np.zeros_like(h)
    cc = np.full_like(h, c)
    r = np.choose(sector, [cc, x, zeros, zeros, x, cc])
    g = np.choose(sector, [x, cc, cc, x, zeros, zeros])
    b = np.choose(sector, [zeros, zeros, x, cc, cc, x])

    rgb = np.stack([r, g, b], axis=-1) + m
    return np.clip(np.round(rgb * 255), 0, 255).astype(np.uint8)
