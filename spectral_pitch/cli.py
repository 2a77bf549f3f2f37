"""Command-line entry point for Spectral Pitch."""

import argparse
import sys
import time
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
import soundfile as sf

from .config import ConfigManager, DetectorConfig
from .detector import SmoothedDetector, detect_naive
from .errors import PitchDetectionError
from .logging_config import get_logger, setup_logging
from .note_types import NO_NOTE, InspectionRange
from .note_utils import get_note_name
from .resolution import recommend_size, resolution
from .sources import LiveInputSource, WavFileSource
from .spectrum import SpectrumAnalyser

logger = get_logger("spectral_pitch.cli")


def track_notes(
    frames: Iterable[np.ndarray], config: DetectorConfig, naive: bool = False
) -> Iterator[str]:
    """Run each time-domain frame through the analyser and a detector.

    Yields one note label (or NO_NOTE) per frame.
    """
    analyser = SpectrumAnalyser(
        fft_size=config.fft_size,
        smoothing_time_constant=config.smoothing_time_constant,
    )
    bin_resolution = config.resolution
    bin_range = InspectionRange.for_frequencies(
        config.min_frequency,
        config.max_frequency,
        bin_resolution,
        analyser.frequency_bin_count,
    )

    def note_mapper(frequency: float) -> str:
        return get_note_name(frequency, use_flats=config.use_flats)

    detector = SmoothedDetector(config.intensity_threshold, config.window_size, note_mapper)
    logger.info(
        f"Tracking bins [{bin_range.min}, {bin_range.max}) at {bin_resolution:.2f} Hz/bin, "
        f"threshold {config.intensity_threshold}, window {config.window_size}"
    )

    for frame in frames:
        bins = analyser.byte_frequency_data(frame)
        if naive:
            yield detect_naive(bins, bin_range, bin_resolution, note_mapper)
        else:
            yield detector.detect(bins, bin_range, bin_resolution)


def report_changes(labels: Iterable[str], seconds_per_frame: float) -> List[Tuple[float, str]]:
    """Print a line each time the label changes and return the printed changes."""
    changes = []
    previous = None
    for index, label in enumerate(labels):
        if label == previous:
            continue
        previous = label
        timestamp = round(index * seconds_per_frame, 3)
        changes.append((timestamp, label))
        print(f"{timestamp:8.3f}s  {'-' if label == NO_NOTE else label}", flush=True)
    return changes


def _add_detection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="JSON configuration file")
    parser.add_argument("--fft-size", type=int, default=None, help="Analysis window size")
    parser.add_argument(
        "--threshold", type=float, default=None, help="Minimum peak intensity (0-255)"
    )
    parser.add_argument("--window", type=int, default=None, help="Smoothing window size")
    parser.add_argument(
        "--min-frequency", type=float, default=None, help="Lowest frequency inspected (Hz)"
    )
    parser.add_argument(
        "--max-frequency", type=float, default=None, help="Highest frequency inspected (Hz)"
    )
    parser.add_argument(
        "--naive", action="store_true", help="Report raw per-frame notes without smoothing"
    )
    parser.add_argument(
        "--flats", action="store_true", help="Use flat notes instead of sharps"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def _load_config(parsed_args, sample_rate: Optional[int] = None) -> DetectorConfig:
    config = ConfigManager(parsed_args.config).load() if parsed_args.config else DetectorConfig()
    return config.replace(
        sample_rate=sample_rate,
        fft_size=parsed_args.fft_size,
        intensity_threshold=parsed_args.threshold,
        window_size=parsed_args.window,
        min_frequency=parsed_args.min_frequency,
        max_frequency=parsed_args.max_frequency,
        use_flats=parsed_args.flats or None,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spectral-pitch", description="Spectral Pitch - note detection from spectra"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    resolution_parser = subparsers.add_parser(
        "resolution", help="Show the bin width for a sample rate and FFT size"
    )
    resolution_parser.add_argument("--sample-rate", type=float, default=44100)
    resolution_parser.add_argument("--fft-size", type=int, default=2048)

    recommend_parser = subparsers.add_parser(
        "recommend", help="Recommend an FFT size for a desired resolution"
    )
    recommend_parser.add_argument("--sample-rate", type=float, default=44100)
    recommend_parser.add_argument(
        "--resolution", type=float, required=True, help="Desired Hz per bin"
    )

    detect_parser = subparsers.add_parser("detect", help="Detect notes in an audio file")
    detect_parser.add_argument("file", help="Audio file to analyse")
    _add_detection_arguments(detect_parser)

    listen_parser = subparsers.add_parser("listen", help="Detect notes from an input device")
    listen_parser.add_argument("--device", type=int, default=None, help="Audio input device ID")
    listen_parser.add_argument(
        "--sample-rate", type=int, default=None, help="Capture sample rate in Hz"
    )
    listen_parser.add_argument(
        "--duration", type=float, default=10.0, help="Listening time in seconds"
    )
    _add_detection_arguments(listen_parser)

    return parser


def _run_detect(parsed_args) -> int:
    config = _load_config(parsed_args)
    source = WavFileSource(parsed_args.file, config.fft_size)
    config = config.replace(sample_rate=source.sample_rate)
    report_changes(
        track_notes(source.frames(), config, naive=parsed_args.naive),
        config.fft_size / config.sample_rate,
    )
    return 0


def _run_listen(parsed_args) -> int:
    import sounddevice as sd

    config = _load_config(parsed_args, sample_rate=parsed_args.sample_rate)
    source = LiveInputSource(
        device_id=parsed_args.device,
        sample_rate=config.sample_rate,
        fft_size=config.fft_size,
    )
    deadline = time.time() + parsed_args.duration

    def frames_until_deadline():
        for frame in source.frames(timeout=1.0):
            if time.time() >= deadline:
                return
            yield frame

    print(f"Listening for {parsed_args.duration:.1f} seconds... (Ctrl+C to stop)")
    try:
        source.start()
    except sd.PortAudioError as e:
        logger.error(f"Could not open input device {parsed_args.device}: {e}")
        return 3

    try:
        report_changes(
            track_notes(frames_until_deadline(), config, naive=parsed_args.naive),
            (config.fft_size // 2) / config.sample_rate,
        )
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        source.stop()
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging("DEBUG" if getattr(parsed_args, "debug", False) else None)

    try:
        if parsed_args.command == "resolution":
            value = resolution(parsed_args.sample_rate, parsed_args.fft_size)
            print(f"{value:.4f} Hz per bin")
        elif parsed_args.command == "recommend":
            size = recommend_size(parsed_args.sample_rate, parsed_args.resolution)
            achieved = resolution(parsed_args.sample_rate, size)
            print(f"{size} ({achieved:.4f} Hz per bin)")
        elif parsed_args.command == "detect":
            return _run_detect(parsed_args)
        elif parsed_args.command == "listen":
            return _run_listen(parsed_args)
        else:
            parser.print_help()
            return 1
    except PitchDetectionError as e:
        logger.error(f"{e}")
        return 2
    except (sf.LibsndfileError, RuntimeError, OSError) as e:
        logger.error(f"Audio error: {e}")
        return 3

    return 0


if __name__ == "__main__":
    sys.exit(main())
