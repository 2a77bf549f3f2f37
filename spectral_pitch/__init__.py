"""Spectral Pitch: musical note detection from frequency-domain audio frames."""

from .bins import bin_to_frequency, fft_bin_count, find_max_bin, find_peak
from .detector import SmoothedDetector, detect_naive
from .errors import InvalidInput, InvalidRange, PitchDetectionError
from .note_types import NO_NOTE, NO_OBSERVATION, BinPeak, InspectionRange, NoObservation
from .note_utils import get_note_name, note_to_frequency
from .resolution import MIN_FFT_SIZE, Calibration, recommend_size, resolution

__version__ = "0.1.0"

__all__ = [
    "BinPeak",
    "Calibration",
    "InspectionRange",
    "InvalidInput",
    "InvalidRange",
    "MIN_FFT_SIZE",
    "NO_NOTE",
    "NO_OBSERVATION",
    "NoObservation",
    "PitchDetectionError",
    "SmoothedDetector",
    "bin_to_frequency",
    "detect_naive",
    "fft_bin_count",
    "find_max_bin",
    "find_peak",
    "get_note_name",
    "note_to_frequency",
    "recommend_size",
    "resolution",
]
