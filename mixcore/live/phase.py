"""Beat-phase alignment between two playing decks."""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Callable

from mixcore.analysis.models import PhaseState
from mixcore.live.deck import PlaybackSource
from mixcore.live.scheduler import PeriodicTask

logger = logging.getLogger(__name__)


def _usable_bpm(bpm) -> bool:
    return bpm is not None and math.isfinite(bpm) and bpm > 0


def compute_phase_state(
    position_a: float | None,
    position_b: float | None,
    bpm_a: float | None,
    bpm_b: float | None,
    sync_threshold: float = 0.1,
) -> PhaseState:
    """Phase offset of two positions within their own beat periods.

    The offset is folded into [0, 0.5]: 0 is aligned, 0.5 is a half beat
    apart. A missing position or BPM gives :meth:`PhaseState.idle`.
    """
    if position_a is None or position_b is None:
        return PhaseState.idle()
    if not (_usable_bpm(bpm_a) and _usable_bpm(bpm_b)):
        return PhaseState.idle()

    period_a = 60.0 / bpm_a
    period_b = 60.0 / bpm_b
    offset_a = position_a % period_a
    offset_b = position_b % period_b

    phase = abs(offset_a / period_a - offset_b / period_b)
    if phase > 0.5:
        phase = 1.0 - phase

    return PhaseState(
        position_a=position_a,
        position_b=position_b,
        next_beat_a=position_a + (period_a - offset_a),
        next_beat_b=position_b + (period_b - offset_b),
        phase=phase,
        bpm_difference=abs(bpm_a - bpm_b),
        synced=phase < sync_threshold,
    )


def _read(deck: PlaybackSource | None) -> tuple[float | None, bool]:
    if deck is None:
        return None, False
    return getattr(deck, "position", None), bool(getattr(deck, "playing", False))


class PhaseAlignmentTracker:
    """Samples two decks on a fixed cadence and keeps the latest PhaseState.

    BPMs default to each deck's ``bpm`` attribute, read at every tick;
    :meth:`set_bpm` pins explicit values instead. Every tick replaces
    :attr:`state`; nothing carries over from the previous tick.
    """

    def __init__(
        self,
        deck_a: PlaybackSource | None,
        deck_b: PlaybackSource | None,
        bpm_a: float | None = None,
        bpm_b: float | None = None,
        interval: float = 0.05,
        sync_threshold: float = 0.1,
        on_update: Callable[[PhaseState], None] | None = None,
    ) -> None:
        self.deck_a = deck_a
        self.deck_b = deck_b
        self.bpm_a = bpm_a
        self.bpm_b = bpm_b
        self.sync_threshold = sync_threshold
        self.on_update = on_update
        self.state = PhaseState.idle()
        self._task = PeriodicTask(interval, self.tick, name="phase-alignment")

    @property
    def running(self) -> bool:
        return self._task.running

    def set_bpm(self, bpm_a: float | None, bpm_b: float | None) -> None:
        self.bpm_a = bpm_a
        self.bpm_b = bpm_b

    def tick(self) -> PhaseState:
        # Both positions are read before anything else happens.
        position_a, playing_a = _read(self.deck_a)
        position_b, playing_b = _read(self.deck_b)

        bpm_a = self.bpm_a if self.bpm_a is not None else getattr(self.deck_a, "bpm", None)
        bpm_b = self.bpm_b if self.bpm_b is not None else getattr(self.deck_b, "bpm", None)

        state = compute_phase_state(position_a, position_b, bpm_a, bpm_b, self.sync_threshold)
        if state.active and not (playing_a and playing_b):
            state = dataclasses.replace(state, active=False)

        self.state = state
        if self.on_update is not None:
            self.on_update(state)
        return state

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()

    async def aclose(self) -> None:
        await self._task.aclose()
