"""Time-domain audio to spectral bin arrays, the way a browser analyser node does it."""

from __future__ import annotations

from typing import ClassVar, Optional

import numpy as np

from .bins import fft_bin_count
from .errors import InvalidInput
from .logging_config import get_logger

logger = get_logger(__name__)


class SpectrumAnalyser:
    """Produces smoothed magnitude spectra from successive audio frames.

    Each frame is Blackman-windowed, transformed with a real FFT, normalised by
    the FFT size and blended with the previous frame's magnitudes using the
    smoothing time constant. Results are available in decibels or scaled into
    bytes between ``min_decibels`` and ``max_decibels``.
    """

    MIN_FFT_SIZE: ClassVar[int] = 32
    MAX_FFT_SIZE: ClassVar[int] = 32768

    def __init__(
        self,
        fft_size: int = 2048,
        smoothing_time_constant: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ) -> None:
        if (
            int(fft_size) != fft_size
            or not self.MIN_FFT_SIZE <= fft_size <= self.MAX_FFT_SIZE
            or int(fft_size) & (int(fft_size) - 1)
        ):
            raise InvalidInput(
                f"FFT size must be a power of two between {self.MIN_FFT_SIZE} "
                f"and {self.MAX_FFT_SIZE}, got {fft_size}"
            )
        if not 0.0 <= smoothing_time_constant <= 1.0:
            raise InvalidInput(
                f"Smoothing time constant must be between 0 and 1, got {smoothing_time_constant}"
            )
        if min_decibels >= max_decibels:
            raise InvalidInput(
                f"min_decibels ({min_decibels}) must be below max_decibels ({max_decibels})"
            )

        self._fft_size = int(fft_size)
        self._smoothing = float(smoothing_time_constant)
        self._min_decibels = float(min_decibels)
        self._max_decibels = float(max_decibels)

        n = np.arange(self._fft_size)
        phase = 2 * np.pi * n / self._fft_size
        self._window = 0.42 - 0.5 * np.cos(phase) + 0.08 * np.cos(2 * phase)

        self._previous: Optional[np.ndarray] = None

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def frequency_bin_count(self) -> int:
        return fft_bin_count(self._fft_size)

    @property
    def min_decibels(self) -> float:
        return self._min_decibels

    @property
    def max_decibels(self) -> float:
        return self._max_decibels

    def reset(self) -> None:
        """Drop the smoothing history."""
        self._previous = None
        logger.debug("Spectrum smoothing history cleared")

    def _fit_frame(self, frame: np.ndarray) -> np.ndarray:
        samples = np.asarray(frame, dtype=np.float64).reshape(-1)
        if len(samples) >= self._fft_size:
            return samples[-self._fft_size :]
        # Most recent samples stay at the end
        padded = np.zeros(self._fft_size)
        padded[self._fft_size - len(samples) :] = samples
        return padded

    def _magnitudes(self, frame: np.ndarray) -> np.ndarray:
        samples = self._fit_frame(frame) * self._window
        spectrum = np.fft.rfft(samples)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self._fft_size

        if self._previous is not None:
            magnitude = self._smoothing * self._previous + (1.0 - self._smoothing) * magnitude
        self._previous = magnitude
        return magnitude

    def float_frequency_data(self, frame: np.ndarray) -> np.ndarray:
        """Analyse one frame and return its spectrum in decibels."""
        magnitude = self._magnitudes(frame)
        with np.errstate(divide="ignore"):
            return 20.0 * np.log10(magnitude)

    def byte_frequency_data(self, frame: np.ndarray) -> np.ndarray:
        """Analyse one frame and return its spectrum scaled to 0-255."""
        decibels = self.float_frequency_data(frame)
        span = self._max_decibels - self._min_decibels
        scaled = np.floor(255.0 * (decibels - self._min_decibels) / span)
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)
