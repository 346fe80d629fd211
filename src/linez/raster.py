"""
Fixed-size RGB pixel grids.

A RasterBuffer wraps a (height, width, 3) uint8 numpy array. The target image
is held in a read-only buffer, the approximation in a writable one. Indexing
outside the grid is a programming error and raises BoundsError; callers clip
coordinates before they get here.
"""

import numpy as np

from linez.errors import BoundsError, DimensionMismatch, ReadOnlyBufferError
from linez.models import CHANNEL_MAX


class RasterBuffer:
    """Row-major grid of RGB pixels with fixed dimensions."""

    def __init__(self, pixels, readonly=False):
        array = np.asarray(pixels)

        if array.ndim != 3 or array.shape[2] != 3:
            raise DimensionMismatch(f"expected (height, width, 3) pixels, got shape {array.shape}")
        if array.shape[0] == 0 or array.shape[1] == 0:
            raise DimensionMismatch(f"empty pixel array {array.shape}")
        if np.issubdtype(array.dtype, np.floating):
            # normalized channels
            if not np.all(np.isfinite(array)) or array.min() < 0.0 or array.max() > 1.0:
                raise ValueError("float channel values must lie in [0, 1]")
            array = np.rint(array * CHANNEL_MAX)
        elif array.dtype != np.uint8:
            if not np.issubdtype(array.dtype, np.integer):
                raise ValueError(f"unsupported pixel dtype {array.dtype}")
            if array.min() < 0 or array.max() > CHANNEL_MAX:
                raise ValueError(f"channel values outside [0, {CHANNEL_MAX}]")

        self._pixels = np.array(array, dtype=np.uint8, order="C", copy=True)
        self._pixels.flags.writeable = not readonly

    @classmethod
    def blank(cls, width, height):
        """Create an all-black writable buffer."""
        if width <= 0 or height <= 0:
            raise DimensionMismatch(f"invalid buffer size {width}x{height}")
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @classmethod
    def from_array(cls, array, readonly=False):
        """Create a buffer holding a copy of an RGB array."""
        return cls(array, readonly=readonly)

    @property
    def width(self):
        return self._pixels.shape[1]

    @property
    def height(self):
        return self._pixels.shape[0]

    @property
    def readonly(self):
        return not self._pixels.flags.writeable

    @property
    def pixels(self):
        """Read-only view of the underlying array."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x, y):
        """Return the pixel at (x, y) as an (r, g, b) tuple."""
        if not self.in_bounds(x, y):
            raise BoundsError(x, y, self.width, self.height)
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, x, y, pixel):
        """Overwrite the pixel at (x, y)."""
        self._check_writable()
        if not self.in_bounds(x, y):
            raise BoundsError(x, y, self.width, self.height)
        self._pixels[y, x] = pixel

    def gather(self, xs, ys):
        """Return an (N, 3) uint8 copy of the pixels at the given coordinates."""
        xs, ys = self._check_bounds(xs, ys)
        return self._pixels[ys, xs]

    def scatter(self, xs, ys, values):
        """Write (N, 3) pixel values at the given coordinates."""
        self._check_writable()
        xs, ys = self._check_bounds(xs, ys)
        self._pixels[ys, xs] = values

    def snapshot(self):
        """Independent writable copy of the pixel array."""
        return self._pixels.copy()

    def copy(self, readonly=False):
        return RasterBuffer(self._pixels, readonly=readonly)

    def _check_writable(self):
        if self.readonly:
            raise ReadOnlyBufferError("buffer is read-only")

    def _check_bounds(self, xs, ys):
        xs = np.asarray(xs, dtype=np.intp)
        ys = np.asarray(ys, dtype=np.intp)
        if xs.shape != ys.shape:
            raise DimensionMismatch(f"coordinate arrays differ in shape: {xs.shape} vs {ys.shape}")

        outside = (xs < 0) | (xs >= self.width) | (ys < 0) | (ys >= self.height)
        if outside.any():
            i = int(np.argmax(outside))
            raise BoundsError(int(xs[i]), int(ys[i]), self.width, self.height)
        return xs, ys

    def __repr__(self):
        mode = "readonly" if self.readonly else "writable"
        return f"RasterBuffer({self.width}x{self.height}, {mode})"


def check_same_dimensions(target, canvas):
    """Raise DimensionMismatch unless both buffers share width and height."""
    if target.width != canvas.width or target.height != canvas.height:
        raise DimensionMismatch(
            f"target is {target.width}x{target.height} but canvas is {canvas.width}x{canvas.height}"
        )
