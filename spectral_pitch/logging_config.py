"""Centralized logging configuration for Spectral Pitch.

This module provides a consistent way to configure logging across the package.
"""

import logging
import sys
from typing import Optional, Dict

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "spectral_pitch": logging.INFO,
    "spectral_pitch.bins": logging.INFO,
    "spectral_pitch.resolution": logging.INFO,
    "spectral_pitch.note_utils": logging.INFO,
    "spectral_pitch.detector": logging.INFO,  # Set to DEBUG for per-frame votes
    # Plumbing
    "spectral_pitch.spectrum": logging.INFO,
    "spectral_pitch.sources": logging.INFO,
    "spectral_pitch.config": logging.INFO,
    "spectral_pitch.cli": logging.INFO,
    "spectral_pitch.logging_config": logging.WARNING,  # Keep this module quiet
    # Libraries/third-party
    "soundfile": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None

# Cache for loggers to avoid duplicate setup
_logger_cache: Dict[str, logging.Logger] = {}


def _get_console_handler() -> logging.Handler:
    global _console_handler

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)
    return _console_handler


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'spectral_pitch' log levels with this level (e.g., "DEBUG").
    """
    handler = _get_console_handler()

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("spectral_pitch"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for existing in logger.handlers[:]:
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("spectral_pitch").debug("Logging configuration complete")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    The logger name must be explicitly listed in MODULE_LOG_LEVELS.

    Args:
        name: The full module name (e.g., 'spectral_pitch.detector')

    Returns:
        A configured logger instance

    Raises:
        ValueError: If the module name is not in MODULE_LOG_LEVELS
    """
    if name in _logger_cache:
        return _logger_cache[name]

    if name not in MODULE_LOG_LEVELS:
        raise ValueError(
            f"Logger '{name}' not found in MODULE_LOG_LEVELS. "
            "Please add it to the configuration."
        )

    logger = logging.getLogger(name)
    logger.setLevel(MODULE_LOG_LEVELS[name])
    _logger_cache[name] = logger
    return logger
