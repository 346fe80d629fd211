"""
Incremental error evaluation.

The distance between two images is the sum over pixels of the squared
per-channel difference. Drawing a line only changes the pixels it covers, so
the change in total distance is computed from those pixels alone; the cost is
proportional to the line length, not the image area.

Blended values are rounded to 8 bits before they are scored, so the delta
describes exactly the pixels that would be written and accumulating deltas
never drifts from the true distance.
"""

import math

import numpy as np

from linez.models import CHANNEL_MAX
from linez.raster import check_same_dimensions
from linez.rasterizer import as_coverage


def pixel_distance(a, b):
    """Squared channel distance between two pixels."""
    return sum((int(ca) - int(cb)) ** 2 for ca, cb in zip(a, b))


def squared_distance(a, b):
    """Row-wise squared channel distance between two (N, 3) pixel arrays."""
    diff = a.astype(np.int64) - b.astype(np.int64)
    return np.einsum("ij,ij->i", diff, diff)


def composite(before, color, weights):
    """
    Blend color over before at the given per-pixel coverage.

    Returns uint8 pixels; at full coverage the result is exactly color.
    """
    color = np.asarray(color, dtype=np.float64)
    if np.all(weights >= 1.0):
        return np.broadcast_to(color.astype(np.uint8), before.shape).copy()

    w = np.asarray(weights, dtype=np.float64)[:, None]
    blended = before.astype(np.float64) * (1.0 - w) + color * w
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def propose(candidate_pixels, color, canvas, target):
    """
    Score drawing color over candidate_pixels.

    Returns (coverage, delta, after) where after holds the composited pixels
    that would be written at coverage.xs / coverage.ys.
    """
    check_same_dimensions(target, canvas)
    color = np.asarray(color)
    if color.shape != (3,) or np.any(color < 0) or np.any(color > CHANNEL_MAX):
        raise ValueError(f"color must be three channels in [0, {CHANNEL_MAX}], got {color.tolist()}")
    coverage = as_coverage(candidate_pixels)

    if len(coverage) == 0:
        return coverage, 0.0, np.empty((0, 3), dtype=np.uint8)

    before = canvas.gather(coverage.xs, coverage.ys)
    wanted = target.gather(coverage.xs, coverage.ys)
    after = composite(before, color, coverage.weights)

    delta = int(squared_distance(wanted, after).sum()) - int(squared_distance(wanted, before).sum())
    return coverage, float(delta), after


def evaluate_delta(candidate_pixels, color, canvas, target):
    """
    Change in total distance if color were drawn over candidate_pixels.

    Negative means the canvas would move closer to the target. An empty
    coverage yields exactly 0.
    """
    _, delta, _ = propose(candidate_pixels, color, canvas, target)
    return delta


def full_distance(canvas, target):
    """Brute-force distance over every pixel. Not for the hot path."""
    check_same_dimensions(target, canvas)
    diff = canvas.pixels.astype(np.int64) - target.pixels.astype(np.int64)
    return float(np.sum(diff * diff))


def normalized_error(distance, width, height):
    """Root mean squared channel error in [0, 255], for display and logs."""
    samples = width * height * 3
    if samples == 0:
        return 0.0
    return math.sqrt(max(distance, 0.0) / samples)
