"""Peak search over spectral bin arrays."""

from typing import Sequence, Union

import numpy as np

from .logging_config import get_logger
from .note_types import BinPeak, InspectionRange

logger = get_logger(__name__)

BinArray = Union[Sequence[float], np.ndarray]


def fft_bin_count(fft_size: int) -> int:
    """Number of frequency bins produced by an FFT of the given size."""
    return int(fft_size) // 2


def find_peak(bins: BinArray, bin_range: InspectionRange) -> BinPeak:
    """Find the strongest bin inside ``bin_range``.

    The scan keeps the earliest index on ties and starts from the range start
    with intensity 0, so a range holding nothing above 0 reports
    ``bin_range.min`` with intensity 0.

    Raises:
        InvalidRange: If the range is empty or falls outside ``bins``
    """
    bin_range.validate(len(bins))

    window = np.asarray(bins[bin_range.min : bin_range.max], dtype=float)
    # NaN never beats anything in a strict comparison
    window = np.where(np.isnan(window), 0.0, window)
    offset = int(np.argmax(window))  # first occurrence of the maximum
    intensity = float(window[offset])

    if intensity <= 0:
        return BinPeak(bin_range.min, 0.0)
    return BinPeak(bin_range.min + offset, intensity)


def find_max_bin(bins: BinArray, bin_range: InspectionRange) -> int:
    """Index of the strongest bin inside ``bin_range``."""
    return find_peak(bins, bin_range).index


def bin_to_frequency(index: int, resolution: float) -> float:
    """Centre frequency of a bin in Hz."""
    return (index + 0.5) * resolution
