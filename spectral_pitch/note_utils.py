"""Utility functions for working with musical notes and frequencies."""

import re

import numpy as np

from .errors import InvalidInput
from .logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)

# Standard reference: A4 = 440Hz, MIDI note 69
A4_FREQUENCY = 440.0
A4_MIDI = 69

NOTE_NAMES_SHARPS = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTE_NAMES_FLATS = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Note letter, optional accidental, signed octave
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?[0-9]+)$")


def get_note_name(freq: float, use_flats: bool = False, a4: float = A4_FREQUENCY) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')
        a4: Reference frequency for A4 in Hz

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3')

    Raises:
        InvalidInput: If the frequency is not a positive finite number

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
        - Frequencies below C0 get negative octaves (e.g., 'F-1')
    """
    if not np.isfinite(freq) or freq <= 0:
        raise InvalidInput(f"Frequency must be a positive number, got {freq}")

    # Calculate half steps from A4
    half_steps = int(round(12 * np.log2(freq / a4)))
    midi_number = A4_MIDI + half_steps

    # SPN octave calculation (C4 is middle C)
    octave = (midi_number // 12) - 1
    note_idx = midi_number % 12

    names = NOTE_NAMES_FLATS if use_flats else NOTE_NAMES_SHARPS
    return f"{names[note_idx]}{octave}"


def note_to_frequency(note_name: str, a4: float = A4_FREQUENCY) -> float:
    """Convert an SPN note name (e.g. 'A4', 'Bb3', 'F#-1') to its frequency in Hz."""
    match = NOTE_PATTERN.match(note_name.strip()) if note_name else None
    if not match:
        raise InvalidInput(f"Invalid note name: '{note_name}'")

    letter, accidental, octave = match.groups()
    note_idx = NOTE_NAMES_SHARPS.index(letter.upper())
    if accidental == "#":
        note_idx += 1
    elif accidental == "b":
        note_idx -= 1

    midi_number = (int(octave) + 1) * 12 + note_idx
    return a4 * 2.0 ** ((midi_number - A4_MIDI) / 12.0)
