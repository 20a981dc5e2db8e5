"""Musical key estimation from a pitch-class energy profile."""

import logging

import numpy as np
import librosa

from mixcore.analysis.spectral import magnitude_spectrogram

logger = logging.getLogger(__name__)

NOTE_NAMES = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]

# A4 = 440 Hz sits nine semitones above C.
_A4_HZ = 440.0
_A_PITCH_CLASS = 9


def pitch_classes_for_bins(
    freqs: np.ndarray,
    min_freq: float = 27.5,
    max_freq: float = 5000.0,
) -> np.ndarray:
    """Nearest pitch class (C=0) per bin; -1 for bins outside the range."""
    classes = np.full(len(freqs), -1, dtype=int)
    valid = (freqs >= min_freq) & (freqs <= max_freq) & (freqs > 0)
    semitones = np.round(12 * np.log2(freqs[valid] / _A4_HZ)).astype(int)
    classes[valid] = (semitones + _A_PITCH_CLASS) % 12
    return classes


def pitch_class_profile(
    magnitudes: np.ndarray,
    sr: int,
    min_freq: float = 27.5,
    max_freq: float = 5000.0,
) -> np.ndarray:
    """Accumulate spectral energy (squared magnitude) into 12 pitch classes.

    *magnitudes* is an STFT magnitude matrix of shape ``(bins, frames)``.
    """
    n_fft = 2 * (magnitudes.shape[0] - 1)
    per_bin = np.square(magnitudes, dtype=np.float64).sum(axis=1)
    freqs = librosa.fft_frequencies(sr=sr, n_fft=n_fft)
    classes = pitch_classes_for_bins(freqs, min_freq, max_freq)

    profile = np.zeros(12)
    mask = classes >= 0
    np.add.at(profile, classes[mask], per_bin[mask])
    return profile


def key_from_profile(profile: np.ndarray) -> str:
    """Tonic = strongest pitch class; mode from major vs minor third energy.

    A flat profile (silence) resolves to "Cm".
    """
    tonic = int(np.argmax(profile))
    major_third = profile[(tonic + 4) % 12]
    minor_third = profile[(tonic + 3) % 12]
    is_major = major_third > minor_third
    return NOTE_NAMES[tonic] + ("" if is_major else "m")


def detect_key(
    audio: np.ndarray,
    sr: int,
    n_fft: int = 2048,
    hop_length: int = 512,
    min_freq: float = 27.5,
    max_freq: float = 5000.0,
) -> str:
    magnitudes = magnitude_spectrogram(audio, n_fft, hop_length)
    profile = pitch_class_profile(magnitudes, sr, min_freq, max_freq)
    key = key_from_profile(profile)
    logger.debug("Key profile %s -> %s", np.round(profile / (profile.max() or 1.0), 2), key)
    return key
