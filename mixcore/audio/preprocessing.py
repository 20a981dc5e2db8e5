"""Audio preprocessing utilities."""

from __future__ import annotations

import math
import numbers

import numpy as np

from mixcore.errors import DecodeError


def normalize_sample_rate(sr) -> int:
    """Return *sr* as a positive int; integral floats such as 22050.0 are accepted.

    Raises DecodeError for missing, non-positive or fractional rates.
    """
    if isinstance(sr, bool) or not isinstance(sr, numbers.Real):
        raise DecodeError(f"Invalid sample rate: {sr!r}")
    if not math.isfinite(sr) or sr <= 0 or sr != int(sr):
        raise DecodeError(f"Invalid sample rate: {sr!r}")
    return int(sr)


def to_mono(audio: np.ndarray) -> np.ndarray:
    """Downmix to a single channel.

    Accepts ``(n,)``, ``(channels, n)`` or ``(n, channels)`` arrays.
    Channel-first is the canonical layout: axis 0 is taken as channels when
    it has at most two rows or is the shorter axis.
    """
    audio = np.asarray(audio)
    if audio.ndim == 1:
        return audio
    if audio.ndim != 2:
        raise DecodeError(f"Expected 1-D or 2-D sample array, got {audio.ndim}-D")
    rows, cols = audio.shape
    channel_axis = 0 if rows <= 2 or rows <= cols else 1
    return audio.mean(axis=channel_axis)


def prepare(audio: np.ndarray, sr: int) -> np.ndarray:
    """Validate a decoded buffer and return it as contiguous float32 mono.

    Raises DecodeError for an invalid sample rate or non-finite samples.
    Silent and empty buffers are valid.
    """
    normalize_sample_rate(sr)

    try:
        audio = to_mono(np.asarray(audio, dtype=np.float32))
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Samples are not numeric: {e}") from e

    if audio.size and not np.all(np.isfinite(audio)):
        raise DecodeError("Sample buffer contains NaN or infinite values")

    return np.ascontiguousarray(audio, dtype=np.float32)
