"""Unit tests for the envelope, tempo, beat grid, key and spectral helpers."""

import numpy as np
import pytest

from mixcore.analysis.beat_grid import build_beat_grid
from mixcore.analysis.envelope import pick_peaks, rms_envelope
from mixcore.analysis.key import detect_key, key_from_profile, pitch_classes_for_bins
from mixcore.analysis.spectral import (
    energy_curve,
    loudness_db,
    spectral_centroid,
    spectral_rolloff,
    to_byte_spectrum,
    zero_crossing_rate,
)
from mixcore.analysis.tempo import bpm_from_peaks, correct_octave, midpoint_slice
from mixcore.audio.stream import StreamBuffer
from tests.conftest import generate_click_track


# ---------------------------------------------------------------------------
# Tempo
# ---------------------------------------------------------------------------

def test_bpm_from_evenly_spaced_peaks():
    assert bpm_from_peaks(np.array([0.0, 0.5, 1.0, 1.5, 2.0])) == pytest.approx(120.0)


def test_bpm_from_too_few_peaks():
    assert bpm_from_peaks(np.array([1.0])) is None
    assert bpm_from_peaks(np.array([])) is None


def test_correct_octave_folds_into_range():
    assert correct_octave(40) == 80
    assert correct_octave(25) == 100
    assert correct_octave(250) == 125
    assert correct_octave(450) == 112.5
    assert correct_octave(128) == 128


def test_correct_octave_fallback():
    """Missing or nonsensical estimates fall back to the default tempo."""
    assert correct_octave(None) == 120
    assert correct_octave(0) == 120
    assert correct_octave(float("nan")) == 120
    assert correct_octave(None, default_bpm=128) == 128


def test_midpoint_slice_is_centred():
    audio = np.arange(3000, dtype=np.float32)
    window = midpoint_slice(audio, sr=100, seconds=10)

    assert len(window) == 1000
    assert window[0] == 1000


def test_midpoint_slice_short_buffer_untouched():
    audio = np.ones(500, dtype=np.float32)
    assert len(midpoint_slice(audio, sr=100, seconds=10)) == 500


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def test_pick_peaks_respects_minimum_spacing():
    """Of two maxima closer than the spacing, only the larger survives."""
    envelope = np.zeros(60)
    envelope[10] = 1.0
    envelope[15] = 0.5
    envelope[40] = 0.9
    times = pick_peaks(envelope, sr=22050, hop_length=512, min_distance_seconds=0.3)

    np.testing.assert_allclose(times, np.array([10, 40]) * 512 / 22050)


def test_pick_peaks_on_flat_envelope():
    assert len(pick_peaks(np.zeros(100), sr=22050)) == 0
    assert len(pick_peaks(np.zeros(2), sr=22050)) == 0


def test_rms_envelope_of_empty_buffer():
    assert len(rms_envelope(np.zeros(0, dtype=np.float32))) == 0


# ---------------------------------------------------------------------------
# Beat grid
# ---------------------------------------------------------------------------

def test_beat_grid_snaps_to_nearby_peaks():
    """Beats move to the strongest frame within the search window."""
    sr, hop = 5120, 512  # 10 frames per second
    envelope = np.zeros(40)
    envelope[1::5] = 0.8  # one frame after each nominal 120 BPM beat
    envelope[6] = 1.5

    beats = build_beat_grid(envelope, bpm=120, sr=sr, hop_length=hop, search_fraction=0.1)

    assert len(beats) == 8
    np.testing.assert_allclose(
        [b.position_seconds for b in beats],
        [0.1, 0.6, 1.1, 1.6, 2.1, 2.6, 3.1, 3.6],
    )
    assert beats[0].confidence == pytest.approx(0.8)
    assert beats[1].confidence == 1.0  # clamped
    assert [b.is_downbeat for b in beats] == [True, False, False, False] * 2
    assert [b.is_phrase_start for b in beats] == [True] + [False] * 7


def test_beat_grid_keeps_nominal_position_without_energy():
    beats = build_beat_grid(np.zeros(40), bpm=120, sr=5120, hop_length=512)

    np.testing.assert_allclose([b.position_seconds for b in beats], np.arange(8) * 0.5)
    assert all(b.confidence == 0.0 for b in beats)


def test_beat_grid_invalid_input():
    assert build_beat_grid(np.ones(40), bpm=0, sr=5120, hop_length=512) == []
    assert build_beat_grid(np.zeros(0), bpm=120, sr=5120, hop_length=512) == []


def test_beat_grid_follows_click_track():
    """With the true tempo, snapped beats land on clicks; accents score higher."""
    sr = 22050
    audio = generate_click_track(bpm=120, duration_seconds=12, sr=sr)
    beats = build_beat_grid(rms_envelope(audio), bpm=120, sr=sr)

    for beat in beats:
        if beat.confidence > 0:
            nearest = round(beat.position_seconds / 0.5) * 0.5
            assert abs(beat.position_seconds - nearest) < 0.1

    down = [b.confidence for b in beats if b.is_downbeat and b.confidence > 0]
    other = [b.confidence for b in beats if not b.is_downbeat and b.confidence > 0]
    assert np.mean(down) > np.mean(other)


# ---------------------------------------------------------------------------
# Key
# ---------------------------------------------------------------------------

def test_pitch_classes_reference_c():
    freqs = np.array([440.0, 261.63, 523.25, 10.0, 8000.0])
    classes = pitch_classes_for_bins(freqs, min_freq=27.5, max_freq=5000.0)

    assert list(classes) == [9, 0, 0, -1, -1]


def test_key_from_flat_profile_is_c_minor():
    assert key_from_profile(np.zeros(12)) == "Cm"


def test_key_from_profile_mode():
    profile = np.zeros(12)
    profile[7] = 1.0  # G
    profile[11] = 0.5  # B, major third
    assert key_from_profile(profile) == "G"

    profile[10] = 0.8  # Bb, minor third
    assert key_from_profile(profile) == "Gm"


def test_detect_key_a_minor(a_minor_chord):
    assert detect_key(a_minor_chord, sr=22050) == "Am"


def test_detect_key_c_major(c_major_chord):
    assert detect_key(c_major_chord, sr=22050) == "C"


# ---------------------------------------------------------------------------
# Spectral descriptors
# ---------------------------------------------------------------------------

def test_centroid_and_rolloff_of_single_bin():
    spectrum = np.zeros(1025)
    spectrum[100] = 1.0
    bin_hz = 22050 / 2048

    assert spectral_centroid(spectrum, 22050) == pytest.approx(100 * bin_hz)
    assert spectral_rolloff(spectrum, 22050) == pytest.approx(100 * bin_hz)


def test_centroid_and_rolloff_weight_by_magnitude():
    """Linear magnitudes weight the descriptors; squaring would pull them higher."""
    spectrum = np.zeros(1025)
    spectrum[100] = 3.0
    spectrum[300] = 1.0
    bin_hz = 22050 / 2048

    assert spectral_centroid(spectrum, 22050) == pytest.approx(150 * bin_hz)
    # 85% of the total magnitude (3.4) is only reached at bin 300
    assert spectral_rolloff(spectrum, 22050) == pytest.approx(300 * bin_hz)
    assert spectral_rolloff(spectrum, 22050, roll_percent=0.75) == pytest.approx(100 * bin_hz)


def test_zero_crossing_rate_alternating():
    audio = np.array([1.0, -1.0] * 50, dtype=np.float32)
    assert zero_crossing_rate(audio) == pytest.approx(99 / 100)


def test_loudness_of_full_scale_and_silence():
    assert loudness_db(np.ones(100)) == pytest.approx(0.0)
    assert loudness_db(np.zeros(100)) == -120.0


def test_energy_curve_is_clamped_per_second():
    audio = np.concatenate([np.ones(100), np.full(100, 0.1), np.zeros(50)])
    curve = energy_curve(audio, sr=100, scale=20, ceiling=10)

    assert curve == pytest.approx([10.0, 2.0, 0.0])


def test_byte_spectrum_scaling():
    """-100 dB maps to 0, -30 dB to 255, silence to 0."""
    n_fft = 2048
    magnitudes = np.array([0.0, 10 ** (-100 / 20), 10 ** (-65 / 20), 10 ** (-30 / 20), 1.0]) * n_fft
    data = to_byte_spectrum(magnitudes, n_fft)

    assert data.dtype == np.uint8
    assert list(data[[0, 1, 4]]) == [0, 0, 255]
    assert data[3] >= 254
    assert 126 <= data[2] <= 128


# ---------------------------------------------------------------------------
# Stream buffer
# ---------------------------------------------------------------------------

def test_stream_buffer_pads_when_short():
    buf = StreamBuffer(sr=10, max_duration=1.0)
    buf.append(np.array([1.0, 2.0, 3.0]))

    np.testing.assert_array_equal(buf.latest(5), [0, 0, 1, 2, 3])
    assert buf.duration == pytest.approx(0.3)


def test_stream_buffer_wraps():
    buf = StreamBuffer(sr=10, max_duration=1.0)
    buf.append(np.arange(8))
    buf.append(np.arange(8, 14))

    np.testing.assert_array_equal(buf.latest(10), np.arange(4, 14))
    np.testing.assert_array_equal(buf.latest(3), [11, 12, 13])

    buf.clear()
    assert buf.duration == 0.0
    assert not buf.latest(4).any()
