"""
Random line candidate sampling.

Endpoints are uniform over the canvas, each color channel uniform over its
full range. Degenerate (zero-length) lines are allowed.
"""

import numpy as np

from linez.models import CHANNEL_MAX, LineCandidate


def make_rng(seed=None):
    """Create the single random stream used for a run."""
    return np.random.default_rng(seed)


def sample_line(bounds, rng, thickness=1, max_thickness=None):
    """
    Draw one LineCandidate inside bounds.

    Args:
        bounds: (width, height) of the canvas
        rng: numpy Generator owned by the caller
        thickness: brush size, or lower bound when max_thickness is larger
        max_thickness: optional inclusive upper bound for the brush size
    """
    width, height = bounds
    if width <= 0 or height <= 0:
        raise ValueError(f"cannot sample inside {width}x{height} bounds")

    x0, x1 = rng.integers(0, width, size=2)
    y0, y1 = rng.integers(0, height, size=2)
    r, g, b = rng.integers(0, CHANNEL_MAX + 1, size=3)

    if max_thickness is not None and max_thickness > thickness:
        thickness = rng.integers(thickness, max_thickness + 1)

    return LineCandidate(
        start=(int(x0), int(y0)),
        end=(int(x1), int(y1)),
        color=(int(r), int(g), int(b)),
        thickness=int(thickness),
    )


class LineSampler:
    """Samples candidates with a fixed thickness range."""

    def __init__(self, thickness=1, max_thickness=None):
        if thickness < 1:
            raise ValueError(f"thickness must be >= 1, got {thickness}")
        if max_thickness is not None and max_thickness < thickness:
            max_thickness = None
        self.thickness = thickness
        self.max_thickness = max_thickness

    @classmethod
    def from_config(cls, sampler_config):
        return cls(
            thickness=sampler_config.thickness,
            max_thickness=sampler_config.max_thickness,
        )

    def sample(self, bounds, rng):
        return sample_line(bounds, rng, self.thickness, self.max_thickness)
