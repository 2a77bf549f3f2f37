"""Type definitions for the Spectral Pitch project."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto

from .errors import InvalidRange

# Sentinel label returned when no note is detected
NO_NOTE = ""


class NoObservation(Enum):
    """Padding entry in a detection window. Never counted as a vote."""

    PLACEHOLDER = auto()

    def __repr__(self):
        return "NoObservation"


NO_OBSERVATION = NoObservation.PLACEHOLDER


@dataclass(frozen=True)
class InspectionRange:
    """Half-open interval ``[min, max)`` of bin indices to search."""

    min: int
    max: int

    def __len__(self):
        return max(self.max - self.min, 0)

    def validate(self, bin_count: int) -> None:
        """Raise InvalidRange unless ``0 <= min < max <= bin_count``."""
        if self.min >= self.max:
            raise InvalidRange(f"Empty inspection range [{self.min}, {self.max})")
        if self.min < 0 or self.max > bin_count:
            raise InvalidRange(
                f"Inspection range [{self.min}, {self.max}) exceeds "
                f"bin array of length {bin_count}"
            )

    @classmethod
    def full(cls, bin_count: int) -> "InspectionRange":
        return cls(0, bin_count)

    @classmethod
    def for_frequencies(
        cls, low_hz: float, high_hz: float, resolution: float, bin_count: int
    ) -> "InspectionRange":
        """Map a frequency band in Hz to the bins that cover it.

        The band is widened to whole bins (floor of the low edge, ceiling of
        the high edge) and clipped to the array.
        """
        if resolution <= 0:
            raise InvalidRange(f"Resolution must be positive, got {resolution}")
        low = max(int(math.floor(low_hz / resolution)), 0)
        high = min(int(math.ceil(high_hz / resolution)), bin_count)
        return cls(low, high)


@dataclass(frozen=True)
class BinPeak:
    """The strongest bin found in an inspection range."""

    index: int  # Bin index
    intensity: float  # Value stored in that bin (0 if nothing in range was positive)
