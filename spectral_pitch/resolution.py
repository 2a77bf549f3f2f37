"""Calibration helpers tying a sample rate to an FFT size and resolution."""

import numpy as np

from .bins import fft_bin_count
from .errors import InvalidInput
from .logging_config import get_logger

logger = get_logger(__name__)

# Smallest analysis window ever recommended
MIN_FFT_SIZE = 512


def _check_sample_rate(sample_rate: float) -> None:
    if not np.isfinite(sample_rate) or sample_rate <= 0:
        raise InvalidInput(f"Sample rate must be a positive finite number, got {sample_rate}")


def resolution(sample_rate: float, fft_size: int) -> float:
    """Width of one frequency bin in Hz.

    Args:
        sample_rate: Audio sample rate in Hz
        fft_size: Analysis window length in samples (positive and even)

    Returns:
        Hz per bin, ``(sample_rate / 2) / (fft_size / 2)``

    Raises:
        InvalidInput: If the sample rate is not positive or the FFT size is
            not a positive even integer
    """
    _check_sample_rate(sample_rate)
    if int(fft_size) != fft_size or fft_size <= 0 or fft_size % 2:
        raise InvalidInput(f"FFT size must be a positive even integer, got {fft_size}")

    return (sample_rate / 2) / fft_bin_count(fft_size)


def recommend_size(sample_rate: float, desired_resolution: float) -> int:
    """Smallest power-of-two FFT size (at least MIN_FFT_SIZE) reaching a resolution.

    Args:
        sample_rate: Audio sample rate in Hz
        desired_resolution: Largest acceptable bin width in Hz

    Returns:
        A power of two ``>= MIN_FFT_SIZE`` whose resolution is ``<= desired_resolution``

    Raises:
        InvalidInput: If either argument is not a positive finite number, or the
            resolution is too fine to express as an FFT size
    """
    _check_sample_rate(sample_rate)
    if not np.isfinite(desired_resolution) or desired_resolution <= 0:
        raise InvalidInput(
            f"Desired resolution must be a positive finite number, got {desired_resolution}"
        )

    exact = 2 * (sample_rate / 2) / desired_resolution
    if not np.isfinite(exact):
        raise InvalidInput(
            f"Resolution {desired_resolution} Hz is too fine for a {sample_rate} Hz sample rate"
        )

    size = MIN_FFT_SIZE
    while size < exact:
        size *= 2

    logger.debug(
        f"Recommended FFT size {size} for {desired_resolution} Hz/bin at {sample_rate} Hz "
        f"(exact {exact:.1f})"
    )
    return size


class Calibration:
    """Calibration utilities bound to one audio sample rate."""

    def __init__(self, sample_rate: float) -> None:
        _check_sample_rate(sample_rate)
        self._sample_rate = sample_rate

    def __repr__(self):
        return f"Calibration(sample_rate={self._sample_rate})"

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def band_size(self) -> float:
        """Highest representable frequency (Nyquist) in Hz."""
        return self._sample_rate / 2

    def resolution(self, fft_size: int) -> float:
        return resolution(self._sample_rate, fft_size)

    def recommend_size(self, desired_resolution: float) -> int:
        return recommend_size(self._sample_rate, desired_resolution)
