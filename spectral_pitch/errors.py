"""Exceptions raised by Spectral Pitch."""


class PitchDetectionError(ValueError):
    """Base class for precondition failures in pitch detection."""


class InvalidRange(PitchDetectionError):
    """An inspection range is empty or does not fit inside the bin array."""


class InvalidInput(PitchDetectionError):
    """A calibration or detector parameter is out of its valid domain."""
