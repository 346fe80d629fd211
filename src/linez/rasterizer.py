"""
Line rasterization.

Turns a LineCandidate into the set of pixels it covers. Lines are walked one
cell per step along their major axis with exact integer rounding on the minor
axis, optionally widened by a square brush or anti-aliased. The result is
clipped to the buffer and never contains the same coordinate twice, since the
evaluator sums per-pixel deltas.
"""

import math
from typing import NamedTuple

import numpy as np


class CoveredPixel(NamedTuple):
    """A pixel touched by a line and the fraction of it the line occupies."""
    x: int
    y: int
    weight: float = 1.0


class Coverage:
    """
    Deduplicated pixels touched by one candidate.

    Stored column-wise so the evaluator can work on whole arrays at once;
    iterating yields CoveredPixel tuples in walk order.
    """

    __slots__ = ("xs", "ys", "weights")

    def __init__(self, xs, ys, weights):
        self.xs = xs
        self.ys = ys
        self.weights = weights

    @classmethod
    def empty(cls):
        return cls(
            np.empty(0, dtype=np.intp),
            np.empty(0, dtype=np.intp),
            np.empty(0, dtype=np.float64),
        )

    @property
    def solid(self):
        """True when every covered pixel has full weight."""
        return bool(np.all(self.weights >= 1.0))

    def __len__(self):
        return len(self.xs)

    def __iter__(self):
        for x, y, w in zip(self.xs.tolist(), self.ys.tolist(), self.weights.tolist()):
            yield CoveredPixel(x, y, w)

    def __repr__(self):
        return f"Coverage(len={len(self)})"


def as_coverage(pixels):
    """
    Normalize a Coverage or an iterable of CoveredPixel into a Coverage.

    Hand-built sequences are deduplicated like rasterizer output; their
    coordinates are left unclipped so that the buffer can reject bad ones.
    """
    if isinstance(pixels, Coverage):
        return pixels

    items = [CoveredPixel(*p) for p in pixels]
    if not items:
        return Coverage.empty()

    xs = np.array([p.x for p in items], dtype=np.intp)
    ys = np.array([p.y for p in items], dtype=np.intp)
    weights = np.array([p.weight for p in items], dtype=np.float64)
    if np.any((weights < 0.0) | (weights > 1.0)):
        raise ValueError("coverage weights must lie in [0, 1]")

    # coordinates may be out of bounds here, so key cells by their pair
    _, linear = np.unique(np.stack([xs, ys], axis=1), axis=0, return_inverse=True)
    return _deduplicate(xs, ys, weights, linear.reshape(-1))


def _rounded_offsets(lo, count, d, steps):
    """
    floor(t * d / steps + 1/2) for t in lo .. lo + count - 1.

    The lo part is reduced with Python integers first so far-away starting
    points cannot overflow int64.
    """
    q, r = divmod(2 * lo * d + steps, 2 * steps)
    k = np.arange(count, dtype=np.int64)
    return q + (r + 2 * k * d) // (2 * steps)


def digital_line(x0, y0, x1, y1, lo=0, hi=None):
    """
    Cells visited walking from (x0, y0) to (x1, y1), endpoints included.

    Exactly one cell per step along the major axis, so no cell repeats.
    lo and hi restrict the walk to steps lo..hi without changing which cells
    those steps visit.
    """
    dx = x1 - x0
    dy = y1 - y0
    steps = max(abs(dx), abs(dy))

    if steps == 0:
        return np.array([x0], dtype=np.intp), np.array([y0], dtype=np.intp)

    if hi is None:
        hi = steps
    count = hi - lo + 1
    xs = x0 + _rounded_offsets(lo, count, dx, steps)
    ys = y0 + _rounded_offsets(lo, count, dy, steps)
    return xs.astype(np.intp), ys.astype(np.intp)


def antialiased_line(x0, y0, x1, y1, lo=0, hi=None):
    """
    Xiaolin Wu style coverage: two cells per step straddling the ideal line.

    Returns xs, ys, weights; zero-weight cells are dropped.
    """
    dx = x1 - x0
    dy = y1 - y0
    steps = max(abs(dx), abs(dy))

    if steps == 0:
        return (
            np.array([x0], dtype=np.intp),
            np.array([y0], dtype=np.intp),
            np.ones(1, dtype=np.float64),
        )

    if hi is None:
        hi = steps
    t = np.arange(lo, hi + 1, dtype=np.float64)

    if abs(dx) >= abs(dy):
        major = x0 + np.sign(dx) * t
        minor = y0 + t * (dy / steps)
    else:
        major = y0 + np.sign(dy) * t
        minor = x0 + t * (dx / steps)

    low = np.floor(minor)
    frac = minor - low

    major_all = np.concatenate([major, major]).astype(np.intp)
    minor_all = np.concatenate([low, low + 1]).astype(np.intp)
    weights = np.concatenate([1.0 - frac, frac])

    keep = weights > 0.0
    major_all, minor_all, weights = major_all[keep], minor_all[keep], weights[keep]

    if abs(dx) >= abs(dy):
        return major_all, minor_all, weights
    return minor_all, major_all, weights


def _stamp(xs, ys, weights, thickness):
    """Widen each cell into a thickness x thickness square."""
    if thickness <= 1:
        return xs, ys, weights

    offsets = np.arange(thickness, dtype=np.intp) - (thickness - 1) // 2
    ox, oy = np.meshgrid(offsets, offsets)
    ox = ox.ravel()
    oy = oy.ravel()

    xs = (xs[:, None] + ox[None, :]).ravel()
    ys = (ys[:, None] + oy[None, :]).ravel()
    weights = np.repeat(weights, len(ox))
    return xs, ys, weights


def _deduplicate(xs, ys, weights, linear):
    """Keep one entry per cell, the one with the largest weight, in walk order."""
    order = np.lexsort((-weights, linear))
    _, first = np.unique(linear[order], return_index=True)
    keep = np.sort(order[first])
    return Coverage(xs[keep], ys[keep], weights[keep])


def _visible_steps(x0, y0, x1, y1, width, height, margin):
    """
    Range of step indices whose cells can land inside the buffer.

    Clips the ideal segment against the buffer widened by margin cells on
    every side (Liang-Barsky) and pads the result by one step. Returns
    (lo, hi) or None when the segment misses the widened buffer.
    """
    steps = max(abs(x1 - x0), abs(y1 - y0))
    u_lo, u_hi = 0.0, 1.0

    for p, d, size in ((x0, x1 - x0, width), (y0, y1 - y0, height)):
        low, high = -margin, size - 1 + margin
        if d == 0:
            if p < low or p > high:
                return None
            continue
        a = (low - p) / d
        b = (high - p) / d
        if a > b:
            a, b = b, a
        u_lo = max(u_lo, a)
        u_hi = min(u_hi, b)
        if u_lo > u_hi:
            return None

    lo = max(0, math.floor(u_lo * steps) - 1)
    hi = min(steps, math.ceil(u_hi * steps) + 1)
    return lo, hi


def rasterize(candidate, width, height, antialias=False):
    """
    Pixels covered by candidate inside a width x height buffer.

    Only the part of the line near the buffer is walked, so the cost follows
    the visible length. Out-of-bounds cells are dropped, not clamped.
    """
    x0, y0 = candidate.start
    x1, y1 = candidate.end

    # a brush or an anti-aliased neighbour reaches at most this far from the ideal line
    window = _visible_steps(x0, y0, x1, y1, width, height, margin=candidate.thickness + 1)
    if window is None:
        return Coverage.empty()
    lo, hi = window

    if antialias:
        xs, ys, weights = antialiased_line(x0, y0, x1, y1, lo, hi)
    else:
        xs, ys = digital_line(x0, y0, x1, y1, lo, hi)
        weights = np.ones(len(xs), dtype=np.float64)

    xs, ys, weights = _stamp(xs, ys, weights, candidate.thickness)

    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    if not inside.any():
        return Coverage.empty()
    xs, ys, weights = xs[inside], ys[inside], weights[inside]

    if candidate.thickness == 1 and not antialias:
        # one cell per step already
        return Coverage(xs, ys, weights)

    return _deduplicate(xs, ys, weights, ys * width + xs)
