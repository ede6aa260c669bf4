"""
Numpy Rasterizer

Turns engine output (segments, per-cell colours) into (H, W, 3) uint8
frames. This is the drawing-surface side of the sketches: the engines
only emit data.
"""

import numpy as np
from scipy.ndimage import gaussian_filter, zoom


def blank(width, height, color=(0, 0, 0)):
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[:] = color
    return frame


def fade(frame, alpha):
    """Darken a frame toward black, like a translucent black fillRect."""
    return (frame.astype(np.float32) * (1.0 - alpha)).astype(np.uint8)


def draw_segments(frame, segments, color=(255, 255, 255), width=1):
    """Stroke (N, 2, 2) segments [[x0, y0], [x1, y1]] into frame in place.

    color is one RGB triple or an (N, 3) array with one colour per segment.
    """
    segments = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 2)
    if len(segments) == 0:
        return frame
    h, w = frame.shape[:2]

    p0 = segments[:, 0, :]
    p1 = segments[:, 1, :]
    length = np.sqrt(((p1 - p0) ** 2).sum(axis=1)).max()
    n = max(2, int(np.ceil(length)) + 1)
    t = np.linspace(0.0, 1.0, n)
    pts = p0[:, None, :] + t[None, :, None] * (p1 - p0)[:, None, :]
    pts = np.rint(pts.reshape(-1, 2)).astype(np.int64)

    colors = np.asarray(color, dtype=np.uint8)
    if colors.ndim == 2:
        colors = np.repeat(colors, n, axis=0)

    r = max(0, int(width) // 2)
    for oy in range(-r, r + 1):
        for ox in range(-r, r + 1):
            xs = pts[:, 0] + ox
            ys = pts[:, 1] + oy
            keep = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
            frame[ys[keep], xs[keep]] = colors[keep] if colors.ndim == 2 else colors
    return frame


def upscale_cells(cells_rgb, width, height):
    """Nearest-neighbour blow-up of a (rows, cols, 3) cell image to pixels."""
    rows, cols = cells_rgb.shape[:2]
    ys = np.minimum((np.arange(height) * rows) // height, rows - 1)
    xs = np.minimum((np.arange(width) * cols) // width, cols - 1)
    return cells_rgb[ys[:, None], xs[None, :]]


def upscale_field(field, width, height):
    """Bilinear upsample of a (rows, cols) float field to (height, width)."""
    rows, cols = field.shape
    out = zoom(field, (height / rows, width / cols), order=1)
    # zoom can be off by one pixel from rounding
    out = out[:height, :width]
    if out.shape != (height, width):
        out = np.pad(out, ((0, height - out.shape[0]), (0, width - out.shape[1])), mode="edge")
    return out


def apply_glow(frame, sigma=3.0, intensity=0.4, factor=4):
    """Soft bloom: blur a downsampled copy and add it back."""
    h, w = frame.shape[:2]
    small = frame[::factor, ::factor, :].astype(np.float32)
    glow = gaussian_filter(small, [sigma, sigma, 0])
    glow = np.repeat(np.repeat(glow, factor, axis=0), factor, axis=1)[:h, :w, :]
    result = frame.astype(np.float32) + glow * intensity
    np.clip(result, 0, 255, out=result)
    return result.astype(np.uint8)
