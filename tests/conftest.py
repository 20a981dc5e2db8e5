"""Shared test fixtures for mixcore tests."""

import numpy as np
import pytest


def generate_click_track(
    bpm: float,
    beats_per_bar: int = 4,
    duration_seconds: float = 10.0,
    sr: int = 22050,
    accent_ratio: float = 2.0,
) -> np.ndarray:
    """Generate a synthetic click track with accented downbeats.

    Returns mono float32 audio at the given sample rate.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)

    beat_interval = 60.0 / bpm  # seconds per beat
    click_duration = 0.02  # 20ms click
    click_samples = int(click_duration * sr)

    # Create click sound (short sine burst with envelope)
    t_click = np.arange(click_samples) / sr
    click = np.sin(2 * np.pi * 1000 * t_click) * np.exp(-t_click * 100)

    beat = 0
    time = 0.0
    while time < duration_seconds:
        sample_pos = int(time * sr)
        is_downbeat = (beat % beats_per_bar) == 0
        amplitude = accent_ratio if is_downbeat else 1.0

        end = min(sample_pos + click_samples, n_samples)
        length = end - sample_pos
        if length > 0:
            audio[sample_pos:end] += click[:length] * amplitude

        time += beat_interval
        beat += 1

    # Normalize
    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak

    return audio.astype(np.float32)


def generate_chord(
    partials: list[tuple[float, float]],
    duration_seconds: float = 3.0,
    sr: int = 22050,
) -> np.ndarray:
    """Sum of sines given as (frequency Hz, amplitude) pairs."""
    t = np.arange(int(duration_seconds * sr)) / sr
    audio = np.zeros_like(t)
    for freq, amp in partials:
        audio += amp * np.sin(2 * np.pi * freq * t)
    audio /= max(1.0, np.max(np.abs(audio)))
    return (audio * 0.8).astype(np.float32)


def generate_sine(freq: float, duration_seconds: float, sr: int = 44100, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(duration_seconds * sr)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


@pytest.fixture
def click_120():
    """Click track in 4/4 at 120 BPM, 12 seconds."""
    return generate_click_track(bpm=120, duration_seconds=12)


@pytest.fixture
def a_minor_chord():
    """A4 / C5 / E5 triad with a dominant root."""
    return generate_chord([(440.0, 1.0), (523.25, 0.6), (659.25, 0.4)])


@pytest.fixture
def c_major_chord():
    """C4 / E4 / G4 triad with a dominant root."""
    return generate_chord([(261.63, 1.0), (329.63, 0.6), (392.0, 0.4)])
