"""Exception types raised by linez."""


class LinezError(Exception):
    """Base class for all linez errors."""


class BoundsError(LinezError, IndexError):
    """A pixel index falls outside the buffer dimensions."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"pixel ({x}, {y}) outside {width}x{height} buffer")


class DimensionMismatch(LinezError, ValueError):
    """Buffers that must share dimensions do not, or a pixel array is malformed."""


class ReadOnlyBufferError(LinezError):
    """Attempted to write into a read-only buffer."""


class LoopStoppedError(LinezError):
    """Attempted to run an optimization loop that has already stopped."""
