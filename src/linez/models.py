"""
Pydantic data models for linez.

Line candidates are validated on construction so that a malformed proposal
fails loudly at the start of an iteration instead of corrupting the canvas.
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

CHANNEL_MAX = 255

Point = Tuple[int, int]
Pixel = Tuple[int, int, int]

BLACK = (0, 0, 0)
WHITE = (CHANNEL_MAX, CHANNEL_MAX, CHANNEL_MAX)


class LoopState(str, Enum):
    """Lifecycle state of an optimization loop."""
    RUNNING = "running"
    STOPPED = "stopped"


class LineCandidate(BaseModel):
    """A sampled, not yet committed line proposal."""
    start: Point
    end: Point
    color: Pixel
    thickness: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("color")
    @classmethod
    def _channels_in_range(cls, value):
        for channel in value:
            if not 0 <= channel <= CHANNEL_MAX:
                raise ValueError(f"color channel {channel} outside [0, {CHANNEL_MAX}]")
        return value


class RunStats(BaseModel):
    """Counters describing the progress of one run."""
    iterations: int = 0
    accepted: int = 0
    rejected: int = 0
    faults: int = 0
    distance: float = 0.0
    normalized_error: float = 0.0

    model_config = ConfigDict(extra="forbid")

    @property
    def acceptance_rate(self):
        """Fraction of completed iterations that drew a line."""
        if self.iterations == 0:
            return 0.0
        return self.accepted / self.iterations
