"""Short-time energy envelope and peak picking."""

import numpy as np
import librosa
from scipy.signal import find_peaks


def rms_envelope(
    audio: np.ndarray,
    frame_length: int = 2048,
    hop_length: int = 512,
) -> np.ndarray:
    """RMS energy per frame.

    Frames are centred, so frame ``i`` sits at sample ``i * hop_length``.
    """
    if audio.size == 0:
        return np.zeros(0, dtype=np.float32)
    rms = librosa.feature.rms(
        y=audio, frame_length=frame_length, hop_length=hop_length, center=True,
    )
    return rms[0]


def frames_to_seconds(frames, sr: int, hop_length: int = 512):
    return np.asarray(frames, dtype=np.float64) * hop_length / sr


def pick_peaks(
    envelope: np.ndarray,
    sr: int,
    hop_length: int = 512,
    min_distance_seconds: float = 0.3,
) -> np.ndarray:
    """Return times (seconds) of local maxima at least *min_distance_seconds* apart.

    When two maxima are closer than the spacing, the larger one wins.
    """
    if len(envelope) < 3:
        return np.zeros(0)
    distance = max(1, int(round(min_distance_seconds * sr / hop_length)))
    peaks, _ = find_peaks(envelope, distance=distance)
    return frames_to_seconds(peaks, sr, hop_length)
