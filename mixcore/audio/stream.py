"""Ring buffer holding the most recent samples of a live deck."""

from __future__ import annotations

import numpy as np

_DEFAULT_SR = 44100
_DEFAULT_SECONDS = 1.0


class StreamBuffer:
    """Fixed-capacity ring buffer of float32 samples.

    Parameters
    ----------
    sr:
        Sample rate in Hz. Defaults to 44100.
    max_duration:
        Capacity in seconds. Defaults to 1 second, enough for one analysis
        frame at any usual FFT size.
    """

    def __init__(self, sr: int = _DEFAULT_SR, max_duration: float = _DEFAULT_SECONDS) -> None:
        self._sr = sr
        self._capacity = max(1, int(sr * max_duration))
        self._buffer = np.zeros(self._capacity, dtype=np.float32)
        self._write_pos = 0
        self._length = 0

    def append(self, chunk: np.ndarray) -> None:
        """Append samples, overwriting the oldest once full."""
        chunk = np.asarray(chunk, dtype=np.float32).ravel()[-self._capacity:]
        if chunk.size == 0:
            return

        positions = (self._write_pos + np.arange(chunk.size)) % self._capacity
        self._buffer[positions] = chunk
        self._write_pos = int(positions[-1] + 1) % self._capacity
        self._length = min(self._length + chunk.size, self._capacity)

    def latest(self, n_samples: int) -> np.ndarray:
        """Copy of the newest *n_samples*, zero-padded at the front when short."""
        out = np.zeros(n_samples, dtype=np.float32)
        available = min(n_samples, self._length)
        if available == 0:
            return out

        positions = (self._write_pos - available + np.arange(available)) % self._capacity
        out[n_samples - available:] = self._buffer[positions]
        return out

    @property
    def sample_rate(self) -> int:
        return self._sr

    @property
    def duration(self) -> float:
        """Buffered audio in seconds."""
        return self._length / self._sr

    def clear(self) -> None:
        self._buffer[:] = 0
        self._write_pos = 0
        self._length = 0
