"""Note detection from spectral bin arrays."""

from __future__ import annotations

from collections import deque
from typing import Callable, ClassVar, Deque, Dict, Tuple, TypeAlias, Union

from .bins import BinArray, bin_to_frequency, find_max_bin, find_peak
from .errors import InvalidInput
from .logging_config import get_logger
from .note_types import NO_NOTE, NO_OBSERVATION, InspectionRange, NoObservation
from .note_utils import get_note_name

logger = get_logger(__name__)

NoteName: TypeAlias = str
NoteMapper: TypeAlias = Callable[[float], NoteName]
WindowEntry: TypeAlias = Union[NoteName, NoObservation]


def _check_resolution(resolution: float) -> None:
    if resolution <= 0:
        raise InvalidInput(f"Resolution must be positive, got {resolution}")


def detect_naive(
    bins: BinArray,
    bin_range: InspectionRange,
    resolution: float,
    note_mapper: NoteMapper = get_note_name,
) -> NoteName:
    """Name the note of the strongest bin in a single frame.

    No threshold is applied, so silence still yields the label of the
    range start.
    """
    _check_resolution(resolution)
    max_bin = find_max_bin(bins, bin_range)
    return note_mapper(bin_to_frequency(max_bin, resolution))


class SmoothedDetector:
    """Majority vote over the notes seen in the last ``window_size`` loud frames.

    Frames whose strongest bin is below ``intensity_threshold`` are ignored
    entirely: they return no note and do not enter the window. Every other
    frame pushes its note into a fixed-size FIFO window and the most frequent
    note in the window is reported. Ties go to the note that was first seen
    by this detector.

    The window starts out padded with placeholders that never win a vote.
    Instances hold mutable state; use one detector per audio stream.
    """

    DEFAULT_WINDOW_SIZE: ClassVar[int] = 8

    def __init__(
        self,
        intensity_threshold: float,
        window_size: int = DEFAULT_WINDOW_SIZE,
        note_mapper: NoteMapper = get_note_name,
    ) -> None:
        """Initialize the detector.

        Args:
            intensity_threshold: Minimum peak intensity for a frame to be counted
            window_size: Number of accepted frames that take part in the vote
            note_mapper: Converts a frequency in Hz to a note name
        """
        if intensity_threshold < 0:
            raise InvalidInput(
                f"Intensity threshold must be non-negative, got {intensity_threshold}"
            )
        if int(window_size) != window_size or window_size < 1:
            raise InvalidInput(f"Window size must be a positive integer, got {window_size}")

        self._intensity_threshold = intensity_threshold
        self._window_size = int(window_size)
        self._note_mapper = note_mapper

        self._window: Deque[WindowEntry] = deque()
        # dict keeps first-insertion order, which decides ties in the vote
        self._count: Dict[NoteName, int] = {}
        self._last_dominant: NoteName = NO_NOTE

        self.reset()

    def __repr__(self):
        return (
            f"SmoothedDetector(intensity_threshold={self._intensity_threshold}, "
            f"window_size={self._window_size})"
        )

    @property
    def intensity_threshold(self) -> float:
        return self._intensity_threshold

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def window(self) -> Tuple[WindowEntry, ...]:
        """Snapshot of the window, oldest entry first."""
        return tuple(self._window)

    @property
    def counts(self) -> Dict[NoteName, int]:
        """Snapshot of the vote counts in first-seen order."""
        return dict(self._count)

    @property
    def dominant_note(self) -> NoteName:
        """Note with the most votes in the window, or NO_NOTE if none."""
        dominant_note = NO_NOTE
        dominant_note_count = 0

        for note, count in self._count.items():
            if count > dominant_note_count:
                dominant_note = note
                dominant_note_count = count

        return dominant_note

    def push(self, incoming_note: NoteName) -> None:
        """Slide the window forward by one observed note."""
        outgoing_note = self._window.popleft()
        if outgoing_note is not NO_OBSERVATION:
            self._count[outgoing_note] -= 1

        self._window.append(incoming_note)
        self._count[incoming_note] = self._count.get(incoming_note, 0) + 1

    def reset(self) -> None:
        """Forget all observations. Known notes keep their tie-break order."""
        self._window.clear()
        self._window.extend([NO_OBSERVATION] * self._window_size)

        for note in self._count:
            self._count[note] = 0
        self._last_dominant = NO_NOTE

        logger.debug(f"Detector reset with window size {self._window_size}")

    def detect(
        self, bins: BinArray, bin_range: InspectionRange, resolution: float
    ) -> NoteName:
        """Feed one frame and return the currently dominant note.

        Args:
            bins: Intensity per frequency bin
            bin_range: Bins to search for the peak
            resolution: Width of one bin in Hz

        Returns:
            The dominant note name, or NO_NOTE if the frame is too quiet

        Raises:
            InvalidRange: If ``bin_range`` does not fit ``bins``
            InvalidInput: If ``resolution`` is not positive
        """
        _check_resolution(resolution)
        peak = find_peak(bins, bin_range)

        if peak.intensity < self._intensity_threshold:
            logger.debug(
                f"Frame ignored: peak {peak.intensity} below threshold {self._intensity_threshold}"
            )
            return NO_NOTE

        frequency = bin_to_frequency(peak.index, resolution)
        note = self._note_mapper(frequency)
        self.push(note)

        dominant = self.dominant_note
        logger.debug(
            f"Frame bin {peak.index} ({frequency:.1f}Hz, intensity {peak.intensity}) -> {note}; "
            f"dominant {dominant} {self._count.get(dominant, 0)}/{self._window_size}"
        )
        if dominant != self._last_dominant:
            logger.info(f"Dominant note changed: {self._last_dominant or '-'} -> {dominant}")
            self._last_dominant = dominant

        return dominant

