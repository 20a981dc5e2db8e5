"""Perceptual band split, collision detection and EQ suggestions.

All functions are pure: they read one or two FrequencySnapshot values and
return new records.
"""

import math

import numpy as np

from mixcore.analysis.models import (
    Collision,
    EqSuggestion,
    FrequencyBalance,
    FrequencyBands,
    FrequencySnapshot,
)

# (field name, low Hz, high Hz)
BAND_RANGES: tuple[tuple[str, float, float], ...] = (
    ("sub_bass", 20, 60),
    ("bass", 60, 250),
    ("low_mids", 250, 500),
    ("mids", 500, 2000),
    ("high_mids", 2000, 4000),
    ("presence", 4000, 6000),
    ("brilliance", 6000, 20000),
)

DEFAULT_TARGET_BALANCE = {"bass": 0.40, "mids": 0.35, "highs": 0.25}

MAX_EQ_DB = 12.0
_DB_PER_RATIO = 12.0
_FLAG_THRESHOLD_DB = 2.0


def band_bin_range(low: float, high: float, bin_width: float, n_bins: int) -> tuple[int, int]:
    """Inclusive bin index range covering ``[low, high]`` Hz."""
    first = int(math.floor(low / bin_width))
    last = min(int(math.ceil(high / bin_width)), n_bins - 1)
    return first, last


def split_frequency_bands(snapshot: FrequencySnapshot) -> FrequencyBands:
    """Average normalized magnitude inside each of the seven bands."""
    levels = snapshot.normalized()
    n_bins = len(levels)
    if n_bins == 0 or snapshot.sample_rate <= 0:
        return FrequencyBands()

    values = {}
    for name, low, high in BAND_RANGES:
        first, last = band_bin_range(low, high, snapshot.bin_width, n_bins)
        values[name] = float(levels[first:last + 1].mean()) if first <= last else 0.0
    return FrequencyBands(**values)


def detect_collisions(
    snapshot_a: FrequencySnapshot,
    snapshot_b: FrequencySnapshot,
    threshold: float = 0.7,
) -> list[Collision]:
    """Bins where both decks exceed *threshold* (normalized 0-1).

    Only the bins both snapshots share are compared. Frequencies use the
    bin width of *snapshot_a*.
    """
    levels_a = snapshot_a.normalized()
    levels_b = snapshot_b.normalized()
    n = min(len(levels_a), len(levels_b))
    if n == 0:
        return []
    levels_a, levels_b = levels_a[:n], levels_b[:n]

    hits = np.flatnonzero((levels_a > threshold) & (levels_b > threshold))
    bin_width = snapshot_a.bin_width
    return [
        Collision(
            frequency=float(i * bin_width),
            severity=float(min(levels_a[i], levels_b[i])),
        )
        for i in hits
    ]


def dominant_frequency(snapshot: FrequencySnapshot) -> float:
    """Centre frequency of the strongest bin (0 for an empty snapshot)."""
    levels = snapshot.normalized()
    if len(levels) == 0:
        return 0.0
    return float(int(np.argmax(levels)) * snapshot.bin_width)


def frequency_balance(snapshot: FrequencySnapshot) -> FrequencyBalance:
    """Share of total band energy in bass, mids and highs."""
    bands = split_frequency_bands(snapshot)
    bass = bands.sub_bass + bands.bass + bands.low_mids
    mids = bands.mids + bands.high_mids
    highs = bands.presence + bands.brilliance
    total = bass + mids + highs
    if total == 0:
        return FrequencyBalance(0.0, 0.0, 0.0)
    return FrequencyBalance(bass / total, mids / total, highs / total)


def _clamp_db(value: float) -> float:
    return max(-MAX_EQ_DB, min(MAX_EQ_DB, value))


def suggest_eq_adjustments(
    snapshot: FrequencySnapshot,
    target: dict[str, float] | None = None,
) -> EqSuggestion:
    """dB moves that push the snapshot's balance toward *target*.

    Each macro band's ratio deficit is multiplied by 12 dB and clamped to
    +/-12 dB. Moves larger than 2 dB get a ``too_quiet`` or ``too_loud``
    flag.
    """
    target = target or DEFAULT_TARGET_BALANCE
    balance = frequency_balance(snapshot)

    raw = {
        "bass": (target["bass"] - balance.bass_ratio) * _DB_PER_RATIO,
        "mids": (target["mids"] - balance.mids_ratio) * _DB_PER_RATIO,
        "highs": (target["highs"] - balance.highs_ratio) * _DB_PER_RATIO,
    }
    flags = {
        band: ("too_quiet" if adjust > 0 else "too_loud")
        for band, adjust in raw.items()
        if abs(adjust) > _FLAG_THRESHOLD_DB
    }
    return EqSuggestion(
        low_db=_clamp_db(raw["bass"]),
        mid_db=_clamp_db(raw["mids"]),
        high_db=_clamp_db(raw["highs"]),
        flags=flags,
    )
