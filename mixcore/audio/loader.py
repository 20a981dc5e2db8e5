"""Audio decoding utilities."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import librosa
import numpy as np

from mixcore.errors import DecodeError

logger = logging.getLogger(__name__)


def load_audio(
    file_path_or_buffer: Union[str, Path, BytesIO, bytes],
    sr: int | None = None,
) -> tuple[np.ndarray, int]:
    """Decode an audio file or buffer and convert to mono.

    Parameters
    ----------
    file_path_or_buffer:
        Path to an audio file, a BytesIO buffer, or the raw bytes of an
        encoded file (WAV, FLAC, OGG, ...).
    sr:
        Target sample rate. ``None`` keeps the native rate.

    Returns
    -------
    tuple[np.ndarray, int]
        A tuple of (audio_array, sample_rate).

    Raises
    ------
    DecodeError
        If the input is missing, corrupt or in an unsupported format.
    """
    if isinstance(file_path_or_buffer, (bytes, bytearray)):
        file_path_or_buffer = BytesIO(file_path_or_buffer)

    try:
        audio, sample_rate = librosa.load(file_path_or_buffer, sr=sr, mono=True)
    except Exception as e:
        logger.warning("Failed to decode audio: %s", e)
        raise DecodeError(f"Could not decode audio: {e}") from e

    return audio.astype(np.float32, copy=False), int(sample_rate)


def decode_pcm(data: bytes) -> np.ndarray:
    """Decode raw little-endian float32 PCM bytes into a sample array."""
    if len(data) % 4 != 0:
        raise DecodeError(
            f"PCM payload of {len(data)} bytes is not a whole number of float32 samples"
        )
    return np.frombuffer(data, dtype="<f4").astype(np.float32)
