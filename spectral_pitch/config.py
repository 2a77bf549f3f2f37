"""Configuration management for Spectral Pitch components."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from .errors import InvalidInput
from .logging_config import get_logger
from .resolution import resolution

logger = get_logger(__name__)


@dataclass
class DetectorConfig:
    """Parameters for a detection session."""

    sample_rate: int = 44100
    fft_size: int = 2048
    intensity_threshold: float = 128.0  # On the 0-255 byte scale
    window_size: int = 8
    min_frequency: float = 60.0  # Hz, bottom of the inspected band
    max_frequency: float = 1200.0  # Hz, top of the inspected band
    use_flats: bool = False
    smoothing_time_constant: float = 0.8

    _INTEGER_FIELDS: ClassVar[Tuple[str, ...]] = ("sample_rate", "fft_size", "window_size")
    _NUMBER_FIELDS: ClassVar[Tuple[str, ...]] = (
        "intensity_threshold",
        "min_frequency",
        "max_frequency",
        "smoothing_time_constant",
    )

    def __post_init__(self):
        self.validate()

    def _check_types(self) -> None:
        for name in self._INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"{name} must be an integer, got {value!r}")
        for name in self._NUMBER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInput(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidInput(f"{name} must be finite, got {value!r}")
        if not isinstance(self.use_flats, bool):
            raise InvalidInput(f"use_flats must be true or false, got {self.use_flats!r}")

    def validate(self) -> None:
        """Raise InvalidInput if any value has the wrong type or is outside its domain."""
        self._check_types()
        if self.sample_rate <= 0:
            raise InvalidInput(f"sample_rate must be positive, got {self.sample_rate}")
        if self.fft_size <= 0 or self.fft_size & (self.fft_size - 1):
            raise InvalidInput(f"fft_size must be a power of two, got {self.fft_size}")
        if self.intensity_threshold < 0:
            raise InvalidInput(
                f"intensity_threshold must be non-negative, got {self.intensity_threshold}"
            )
        if self.window_size < 1:
            raise InvalidInput(f"window_size must be at least 1, got {self.window_size}")
        if not 0 <= self.min_frequency < self.max_frequency:
            raise InvalidInput(
                f"Frequency band [{self.min_frequency}, {self.max_frequency}) is empty"
            )
        if not 0.0 <= self.smoothing_time_constant <= 1.0:
            raise InvalidInput(
                "smoothing_time_constant must be between 0 and 1, "
                f"got {self.smoothing_time_constant}"
            )

    @property
    def resolution(self) -> float:
        return resolution(self.sample_rate, self.fft_size)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectorConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **updates: Any) -> "DetectorConfig":
        """Copy of this config with non-None ``updates`` applied."""
        values = self.to_dict()
        values.update({key: value for key, value in updates.items() if value is not None})
        return DetectorConfig.from_dict(values)


class ConfigManager:
    """Loads detector configuration from a JSON file."""

    DEFAULT_PATH = Path("~/.config/spectral_pitch/detector.json")

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize the configuration manager.

        Args:
            config_path: JSON file to read, or None to use the default location
        """
        self.config_path = Path(config_path or self.DEFAULT_PATH).expanduser()

    def load(self) -> DetectorConfig:
        """Load configuration from file, falling back to defaults.

        Missing keys take their default values.

        Raises:
            InvalidInput: If the file is not valid JSON or holds invalid values
        """
        if not self.config_path.exists():
            logger.debug(f"No configuration at {self.config_path}, using defaults")
            return DetectorConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidInput(f"Malformed configuration {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise InvalidInput(f"Configuration {self.config_path} must be a JSON object")

        config = DetectorConfig.from_dict(data)
        logger.info(f"Loaded configuration from {self.config_path}")
        return config
