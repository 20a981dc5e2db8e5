"""Tests for band splitting, collisions and EQ suggestions."""

import numpy as np
import pytest

from mixcore.analysis.bands import (
    detect_collisions,
    dominant_frequency,
    frequency_balance,
    split_frequency_bands,
    suggest_eq_adjustments,
)
from mixcore.analysis.models import FrequencyBands, FrequencySnapshot


def _snapshot(fill=None, n_bins: int = 1024, sr: int = 44100) -> FrequencySnapshot:
    data = np.zeros(n_bins, dtype=np.uint8)
    for (start, stop), value in (fill or {}).items():
        data[start:stop] = value
    return FrequencySnapshot(data=data, sample_rate=sr)


def test_full_scale_snapshot_fills_every_band():
    snapshot = FrequencySnapshot(np.full(1024, 255, dtype=np.uint8), 44100)
    bands = split_frequency_bands(snapshot)

    assert all(v == pytest.approx(1.0) for v in bands.as_dict().values())


def test_band_means_use_inclusive_bin_ranges():
    """Sub-bass covers bins 0-3 and bass bins 2-12 at 21.5 Hz per bin."""
    bands = split_frequency_bands(_snapshot({(0, 4): 255}))

    assert bands.sub_bass == pytest.approx(1.0)
    assert bands.bass == pytest.approx(2 / 11)
    assert bands.mids == 0.0


def test_bands_beyond_nyquist_are_zero():
    """At 8 kHz sampling the top bands have no bins."""
    snapshot = FrequencySnapshot(np.full(128, 255, dtype=np.uint8), 8000)
    bands = split_frequency_bands(snapshot)

    assert bands.brilliance == 0.0
    assert bands.presence == 0.0
    assert bands.sub_bass == pytest.approx(1.0)


def test_empty_snapshot_gives_zero_bands():
    assert split_frequency_bands(_snapshot(n_bins=0)) == FrequencyBands()


def test_float_snapshot_is_clipped():
    snapshot = FrequencySnapshot(np.full(1024, 2.0), 44100)
    assert split_frequency_bands(snapshot).mids == pytest.approx(1.0)


def test_collisions_report_shared_bins():
    """Both decks loud in the same bins: one collision per bin."""
    a = _snapshot({(10, 20): 200})
    b = _snapshot({(10, 20): 200})
    collisions = detect_collisions(a, b, threshold=0.6)

    assert len(collisions) == 10
    assert collisions[0].frequency == pytest.approx(10 * a.bin_width)
    assert all(c.severity == pytest.approx(200 / 255) for c in collisions)


def test_collision_severity_is_the_quieter_deck():
    a = _snapshot({(10, 12): 250})
    b = _snapshot({(10, 12): 180})
    collisions = detect_collisions(a, b, threshold=0.6)

    assert [c.severity for c in collisions] == pytest.approx([180 / 255] * 2)


def test_collision_threshold_is_strict():
    a = _snapshot({(10, 12): 153})  # exactly 0.6
    assert detect_collisions(a, a, threshold=0.6) == []


def test_collisions_need_both_decks():
    a = _snapshot({(10, 20): 255})
    b = _snapshot({(30, 40): 255})
    assert detect_collisions(a, b) == []


def test_collisions_compare_common_bins_only():
    a = _snapshot({(0, 1024): 255})
    b = _snapshot({(0, 512): 255}, n_bins=512)
    assert len(detect_collisions(a, b)) == 512


def test_dominant_frequency():
    snapshot = _snapshot({(100, 101): 255, (200, 201): 100})
    assert dominant_frequency(snapshot) == pytest.approx(100 * snapshot.bin_width)


def test_balance_of_silence_is_zero():
    balance = frequency_balance(_snapshot())
    assert (balance.bass_ratio, balance.mids_ratio, balance.highs_ratio) == (0.0, 0.0, 0.0)


def test_balance_ratios_sum_to_one():
    balance = frequency_balance(_snapshot({(0, 50): 255, (100, 300): 120, (400, 900): 40}))
    assert balance.bass_ratio + balance.mids_ratio + balance.highs_ratio == pytest.approx(1.0)


def test_eq_for_silence_boosts_everything():
    eq = suggest_eq_adjustments(_snapshot())

    assert eq.low_db == pytest.approx(4.8)
    assert eq.mid_db == pytest.approx(4.2)
    assert eq.high_db == pytest.approx(3.0)
    assert eq.flags == {"bass": "too_quiet", "mids": "too_quiet", "highs": "too_quiet"}
    assert not eq.balanced


def test_eq_for_bass_heavy_mix_cuts_bass():
    eq = suggest_eq_adjustments(_snapshot({(0, 21): 255}))

    assert eq.low_db == pytest.approx(-7.2)
    assert eq.flags["bass"] == "too_loud"
    assert eq.flags["mids"] == "too_quiet"


def test_eq_on_target_is_balanced():
    snapshot = _snapshot({(0, 50): 255, (100, 300): 120, (400, 900): 40})
    balance = frequency_balance(snapshot)
    target = {"bass": balance.bass_ratio, "mids": balance.mids_ratio, "highs": balance.highs_ratio}
    eq = suggest_eq_adjustments(snapshot, target)

    assert eq.balanced
    assert (eq.low_db, eq.mid_db, eq.high_db) == pytest.approx((0.0, 0.0, 0.0))


def test_eq_is_clamped():
    eq = suggest_eq_adjustments(_snapshot(), {"bass": 2.0, "mids": -2.0, "highs": 0.25})

    assert eq.low_db == 12.0
    assert eq.mid_db == -12.0


def test_band_analysis_is_idempotent():
    snapshot = _snapshot({(0, 50): 255, (100, 300): 120})

    assert split_frequency_bands(snapshot) == split_frequency_bands(snapshot)
    assert suggest_eq_adjustments(snapshot) == suggest_eq_adjustments(snapshot)
