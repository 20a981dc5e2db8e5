"""Per-deck analysis tap producing AnalyserNode-style snapshots."""

from __future__ import annotations

import logging
import threading

import numpy as np

from mixcore.analysis.models import FrequencySnapshot
from mixcore.analysis.spectral import to_byte_spectrum
from mixcore.audio.stream import StreamBuffer
from mixcore.errors import TapClosedError

logger = logging.getLogger(__name__)


class AnalysisTap:
    """Holds the newest samples of one deck and turns them into snapshots.

    The transport pushes PCM with :meth:`push`; readers call
    :meth:`frequency_snapshot` or :meth:`time_domain_snapshot`, which return
    copies. Spectral smoothing advances once per batch of pushed audio, so
    any number of readers between two pushes see the same snapshot.
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        fft_size: int = 2048,
        smoothing: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        buffer_seconds: float = 1.0,
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")

        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels

        buffer_seconds = max(buffer_seconds, fft_size / sample_rate)
        self._buffer = StreamBuffer(sr=sample_rate, max_duration=buffer_seconds)
        self._window = np.blackman(fft_size).astype(np.float32)
        self._smoothed = np.zeros(fft_size // 2)
        self._generation = 0
        self._snapshot_generation = -1
        self._snapshot: np.ndarray | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def push(self, chunk: np.ndarray) -> None:
        """Feed newly played samples. Ignored once the tap is closed."""
        with self._lock:
            if self._closed:
                logger.debug("Dropping %d samples pushed to a closed tap", len(chunk))
                return
            self._buffer.append(chunk)
            self._generation += 1

    def frequency_snapshot(self) -> FrequencySnapshot:
        """Byte-scaled (0-255) magnitude spectrum of the newest frame."""
        with self._lock:
            self._ensure_open()
            if self._snapshot_generation != self._generation or self._snapshot is None:
                frame = self._buffer.latest(self.fft_size) * self._window
                magnitudes = np.abs(np.fft.rfft(frame))[:self.frequency_bin_count]
                self._smoothed = (
                    self.smoothing * self._smoothed + (1.0 - self.smoothing) * magnitudes
                )
                self._snapshot = to_byte_spectrum(
                    self._smoothed, self.fft_size, self.min_decibels, self.max_decibels,
                )
                self._snapshot_generation = self._generation
            return FrequencySnapshot(data=self._snapshot.copy(), sample_rate=self.sample_rate)

    def time_domain_snapshot(self) -> np.ndarray:
        """Newest ``fft_size`` samples as bytes centred on 128."""
        with self._lock:
            self._ensure_open()
            frame = self._buffer.latest(self.fft_size)
        return np.clip(np.round(128.0 + frame * 128.0), 0, 255).astype(np.uint8)

    def close(self) -> None:
        """Release the buffered audio. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._buffer.clear()
            self._smoothed = np.zeros(self.frequency_bin_count)
            self._snapshot = None

    def _ensure_open(self) -> None:
        if self._closed:
            raise TapClosedError("Analysis tap has been closed")
