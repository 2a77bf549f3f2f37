"""Audio frame sources feeding the spectrum analyser."""

from __future__ import annotations

import queue
from typing import ClassVar, Iterator, Optional

import numpy as np
import soundfile as sf

from .errors import InvalidInput
from .logging_config import get_logger

logger = get_logger(__name__)


def _to_mono(data: np.ndarray) -> np.ndarray:
    if data.ndim == 1:
        return data
    return data.mean(axis=1)


class WavFileSource:
    """Reads an audio file and yields fixed-size mono frames."""

    def __init__(self, file_path: str, fft_size: int, hop_size: Optional[int] = None):
        if fft_size <= 0:
            raise InvalidInput(f"FFT size must be positive, got {fft_size}")
        hop_size = fft_size if hop_size is None else hop_size
        if hop_size <= 0:
            raise InvalidInput(f"Hop size must be positive, got {hop_size}")

        self._file_path = str(file_path)
        self._fft_size = int(fft_size)
        self._hop_size = int(hop_size)

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels
            self._frames = f.frames

        logger.info(
            f"Opened {self._file_path}: {self._sample_rate} Hz, "
            f"{self._channels} channel(s), {self._frames} frames"
        )

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def hop_size(self) -> int:
        return self._hop_size

    def frames(self) -> Iterator[np.ndarray]:
        """Yield frames of ``fft_size`` samples every ``hop_size`` samples.

        The final frame is zero-padded to full length.
        """
        data, _ = sf.read(self._file_path, dtype="float32", always_2d=True)
        samples = _to_mono(data)

        for start in range(0, len(samples), self._hop_size):
            frame = samples[start : start + self._fft_size]
            if len(frame) < self._fft_size:
                frame = np.concatenate(
                    [frame, np.zeros(self._fft_size - len(frame), dtype=frame.dtype)]
                )
            yield frame

    def __iter__(self):
        return self.frames()


class LiveInputSource:
    """Captures a mono input device and yields the latest ``fft_size`` samples per block."""

    MAX_PENDING_BLOCKS: ClassVar[int] = 32

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: int = 44100,
        fft_size: int = 2048,
        block_size: Optional[int] = None,
        max_pending_blocks: int = MAX_PENDING_BLOCKS,
    ):
        if sample_rate <= 0:
            raise InvalidInput(f"Sample rate must be positive, got {sample_rate}")
        if fft_size <= 0:
            raise InvalidInput(f"FFT size must be positive, got {fft_size}")
        if max_pending_blocks < 1:
            raise InvalidInput(f"max_pending_blocks must be at least 1, got {max_pending_blocks}")

        self._device_id = device_id
        self._sample_rate = int(sample_rate)
        self._fft_size = int(fft_size)
        self._block_size = int(block_size or fft_size // 2)
        self._buffer = np.zeros(self._fft_size, dtype=np.float32)
        self._blocks: "queue.Queue[np.ndarray]" = queue.Queue(maxsize=max_pending_blocks)
        self._stream = None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def is_running(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        if self._stream is not None:
            logger.warning("Input stream already running")
            return

        # PortAudio is only needed once capture starts
        import sounddevice as sd

        self._stream = sd.InputStream(
            device=self._device_id,
            channels=1,
            samplerate=self._sample_rate,
            blocksize=self._block_size,
            callback=self._audio_callback,
            dtype="float32",
        )
        self._stream.start()
        logger.info(f"Listening on device {self._device_id} at {self._sample_rate} Hz")

    def stop(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.info("Input stream stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def _audio_callback(self, indata: np.ndarray, _frames: int, _time_info, status) -> None:
        if status:
            logger.warning(f"Input stream status: {status}")
        block = _to_mono(np.array(indata, dtype=np.float32))
        try:
            self._blocks.put_nowait(block)
        except queue.Full:
            # Consumer fell behind, keep the newest audio
            try:
                self._blocks.get_nowait()
            except queue.Empty:
                pass
            self._blocks.put_nowait(block)
            logger.debug("Dropped a stale input block")

    def frames(self, timeout: Optional[float] = None) -> Iterator[np.ndarray]:
        """Yield the sliding ``fft_size`` buffer once per captured block.

        Stops when the stream is stopped or no block arrives within ``timeout``.
        """
        while self._stream is not None:
            try:
                block = self._blocks.get(timeout=timeout)
            except queue.Empty:
                return
            if len(block) >= self._fft_size:
                self._buffer = block[-self._fft_size :].copy()
            else:
                self._buffer = np.concatenate([self._buffer[len(block) :], block])
            yield self._buffer
