"""Spectral descriptors, energy measures and byte-scaled spectra."""

from __future__ import annotations

import math

import numpy as np
import librosa


def magnitude_spectrogram(audio: np.ndarray, n_fft: int = 2048, hop_length: int = 512) -> np.ndarray:
    """Hann-windowed STFT magnitude, shape ``(1 + n_fft // 2, frames)``."""
    if audio.size == 0:
        return np.zeros((1 + n_fft // 2, 0), dtype=np.float32)
    return np.abs(librosa.stft(audio, n_fft=n_fft, hop_length=hop_length, window="hann"))


def average_spectrum(magnitudes: np.ndarray) -> np.ndarray:
    """Mean magnitude per bin across frames."""
    if magnitudes.shape[1] == 0:
        return np.zeros(magnitudes.shape[0])
    return magnitudes.mean(axis=1)


def spectral_centroid(spectrum: np.ndarray, sr: int) -> float:
    """Magnitude-weighted mean frequency in Hz (0 for an empty spectrum).

    Weights are linear magnitudes, not power, as in librosa's default.
    """
    n_fft = 2 * (len(spectrum) - 1)
    freqs = librosa.fft_frequencies(sr=sr, n_fft=n_fft)
    total = float(spectrum.sum())
    if total <= 0:
        return 0.0
    return float(np.dot(freqs, spectrum) / total)


def spectral_rolloff(spectrum: np.ndarray, sr: int, roll_percent: float = 0.85) -> float:
    """Frequency below which *roll_percent* of the spectral magnitude lies.

    Accumulates linear magnitude, not power.
    """
    n_fft = 2 * (len(spectrum) - 1)
    freqs = librosa.fft_frequencies(sr=sr, n_fft=n_fft)
    total = float(spectrum.sum())
    if total <= 0:
        return 0.0
    cumulative = np.cumsum(spectrum)
    idx = int(np.searchsorted(cumulative, roll_percent * total))
    return float(freqs[min(idx, len(freqs) - 1)])


def zero_crossing_rate(audio: np.ndarray) -> float:
    """Sign changes between adjacent samples divided by sample count."""
    if audio.size < 2:
        return 0.0
    positive = audio >= 0
    crossings = np.count_nonzero(positive[1:] != positive[:-1])
    return crossings / audio.size


def rms(audio: np.ndarray) -> float:
    if audio.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(audio, dtype=np.float64))))


def loudness_db(audio: np.ndarray, floor_db: float = -120.0) -> float:
    """RMS level in dBFS, never below *floor_db*."""
    level = rms(audio)
    if level <= 0:
        return floor_db
    return max(floor_db, 20 * math.log10(level))


def energy_curve(
    audio: np.ndarray,
    sr: int,
    scale: float = 20.0,
    ceiling: float = 10.0,
) -> list[float]:
    """One value per second: window RMS x *scale*, clamped to *ceiling*."""
    curve = []
    for start in range(0, len(audio), sr):
        window = audio[start:start + sr]
        curve.append(min(rms(window) * scale, ceiling))
    return curve


def to_byte_spectrum(
    magnitudes: np.ndarray,
    n_fft: int,
    min_db: float = -100.0,
    max_db: float = -30.0,
) -> np.ndarray:
    """Map linear FFT magnitudes to 0-255 the way an AnalyserNode does.

    Magnitudes are normalized by *n_fft*, converted to dB and scaled linearly
    from ``[min_db, max_db]`` onto ``[0, 255]``.
    """
    magnitudes = np.asarray(magnitudes, dtype=np.float64) / n_fft
    with np.errstate(divide="ignore"):
        db = 20 * np.log10(magnitudes)
    scaled = (db - min_db) / (max_db - min_db) * 255.0
    scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=255.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)
