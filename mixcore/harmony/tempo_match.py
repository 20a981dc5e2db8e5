"""BPM compatibility and sync-tempo calculation."""

import math
import numbers

from mixcore.analysis.models import BpmCompatibility, SyncTempo

EXCELLENT_PERCENT = 6.0
ACCEPTABLE_PERCENT = 10.0
OCTAVE_RATIO_TOLERANCE = 0.1


def _valid_bpm(bpm) -> bool:
    if isinstance(bpm, bool) or not isinstance(bpm, numbers.Real):
        return False
    return math.isfinite(bpm) and bpm > 0


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value}"


def calculate_bpm_compatibility(bpm1: float, bpm2: float) -> BpmCompatibility:
    """Score how well *bpm2* can be matched to *bpm1*.

    Percentages are relative to *bpm1*, so swapping the arguments changes
    ``percentage_diff`` (120 vs 127 gives 5.8%, 127 vs 120 gives 5.5%).
    ``pitch_adjustment`` is ``(bpm2 - bpm1) / bpm1 * 100``.
    """
    if not (_valid_bpm(bpm1) and _valid_bpm(bpm2)):
        return BpmCompatibility(
            compatible=False,
            relationship="unknown",
            percentage_diff=0.0,
            pitch_adjustment=0.0,
            advice="BPM not available for one or both tracks. Beatmatch by ear.",
        )

    percentage_diff = abs(bpm1 - bpm2) / bpm1 * 100
    pitch_adjustment = (bpm2 - bpm1) / bpm1 * 100
    pct = round(percentage_diff, 1)
    pitch = round(pitch_adjustment, 1)

    if percentage_diff == 0:
        return BpmCompatibility(
            compatible=True,
            relationship="perfect match",
            percentage_diff=0.0,
            pitch_adjustment=0.0,
            advice="Perfect BPM match - sync and play!",
        )

    if percentage_diff <= EXCELLENT_PERCENT:
        return BpmCompatibility(
            compatible=True,
            relationship="excellent",
            percentage_diff=pct,
            pitch_adjustment=pitch,
            advice=f"Excellent compatibility. Adjust pitch by {_signed(pitch)}%",
        )

    if percentage_diff <= ACCEPTABLE_PERCENT:
        return BpmCompatibility(
            compatible=True,
            relationship="acceptable",
            percentage_diff=pct,
            pitch_adjustment=pitch,
            advice=f"Acceptable but noticeable pitch change ({_signed(pitch)}%). May sound unnatural.",
        )

    ratio = bpm2 / bpm1
    if abs(ratio - 2.0) < OCTAVE_RATIO_TOLERANCE or abs(ratio - 0.5) < OCTAVE_RATIO_TOLERANCE:
        return BpmCompatibility(
            compatible=True,
            relationship="double/half time",
            percentage_diff=pct,
            pitch_adjustment=0.0,
            advice="Double/half time relationship - creative opportunity! Mix at breakdown.",
        )

    return BpmCompatibility(
        compatible=False,
        relationship="incompatible",
        percentage_diff=pct,
        pitch_adjustment=pitch,
        advice=(
            f"BPM difference too large ({round(percentage_diff)}%). "
            "Mix during breakdown or use creative transition."
        ),
    )


def find_optimal_sync_bpm(bpm1: float, bpm2: float) -> SyncTempo:
    """Meet in the middle: the average tempo and each track's pitch move."""
    if not (_valid_bpm(bpm1) and _valid_bpm(bpm2)):
        return SyncTempo(
            sync_bpm=0.0,
            track1_adjustment=0.0,
            track2_adjustment=0.0,
            advice="BPM not available for one or both tracks.",
        )

    average = (bpm1 + bpm2) / 2
    adjust1 = round((average - bpm1) / bpm1 * 100, 1)
    adjust2 = round((average - bpm2) / bpm2 * 100, 1)
    return SyncTempo(
        sync_bpm=round(average, 1),
        track1_adjustment=adjust1,
        track2_adjustment=adjust2,
        advice=(
            f"Sync at {round(average)} BPM. "
            f"Track 1: {_signed(adjust1)}%, Track 2: {_signed(adjust2)}%"
        ),
    )
