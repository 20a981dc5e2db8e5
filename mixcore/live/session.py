"""Per-session owner of live decks, taps and sampling loops."""

from __future__ import annotations

import logging
from typing import Callable

from mixcore.analysis.models import PhaseState, SpectrumFrame
from mixcore.config import Settings, settings as default_settings
from mixcore.live.deck import LiveDeck
from mixcore.live.phase import PhaseAlignmentTracker
from mixcore.live.spectrum import SpectrumMonitor
from mixcore.live.tap import AnalysisTap

logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns every live resource of one mixing session.

    Each deck gets exactly one :class:`AnalysisTap`. Trackers and monitors
    created here share those taps read-only. :meth:`close` stops every loop
    and releases every tap synchronously; use the session as a context
    manager (sync or async) to make that automatic.
    """

    def __init__(self, config: Settings | None = None, sample_rate: int = 44100) -> None:
        self.config = config or default_settings
        self.sample_rate = sample_rate
        self.decks: dict[str, LiveDeck] = {}
        self._loops: list[PhaseAlignmentTracker | SpectrumMonitor] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add_deck(self, name: str, bpm: float = 0.0) -> LiveDeck:
        self._ensure_open()
        if name in self.decks:
            raise ValueError(f"Deck {name!r} already exists")
        cfg = self.config
        tap = AnalysisTap(
            sample_rate=self.sample_rate,
            fft_size=cfg.tap_fft_size,
            smoothing=cfg.tap_smoothing,
            min_decibels=cfg.tap_min_decibels,
            max_decibels=cfg.tap_max_decibels,
            buffer_seconds=cfg.tap_buffer_seconds,
        )
        deck = LiveDeck(name, tap, bpm=bpm)
        self.decks[name] = deck
        logger.info("Added deck %s (fft=%d, sr=%d)", name, cfg.tap_fft_size, self.sample_rate)
        return deck

    def track_phase(
        self,
        deck_a: LiveDeck | None,
        deck_b: LiveDeck | None,
        on_update: Callable[[PhaseState], None] | None = None,
        start: bool = True,
    ) -> PhaseAlignmentTracker:
        """Create a phase tracker; starting it needs a running event loop."""
        self._ensure_open()
        tracker = PhaseAlignmentTracker(
            deck_a,
            deck_b,
            interval=self.config.phase_tick_interval,
            sync_threshold=self.config.sync_threshold,
            on_update=on_update,
        )
        self._loops.append(tracker)
        if start:
            tracker.start()
        return tracker

    def monitor_spectrum(
        self,
        deck_a: LiveDeck | None,
        deck_b: LiveDeck | None = None,
        on_frame: Callable[[SpectrumFrame], None] | None = None,
        start: bool = True,
    ) -> SpectrumMonitor:
        """Create a band/collision monitor; starting it needs a running event loop."""
        self._ensure_open()
        monitor = SpectrumMonitor(
            deck_a.tap if deck_a is not None else None,
            deck_b.tap if deck_b is not None else None,
            interval=self.config.spectrum_refresh_interval,
            collision_threshold=self.config.collision_threshold,
            on_frame=on_frame,
        )
        self._loops.append(monitor)
        if start:
            monitor.start()
        return monitor

    def close(self) -> None:
        """Stop all loops, then release all taps. Idempotent."""
        if self._closed:
            return
        self._closed = True
        for loop in self._loops:
            loop.stop()
        for deck in self.decks.values():
            deck.tap.close()
        logger.info("Closed session: %d loops stopped, %d taps released",
                    len(self._loops), len(self.decks))

    async def aclose(self) -> None:
        self.close()
        for loop in self._loops:
            await loop.aclose()

    def __enter__(self) -> "AnalysisSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    async def __aenter__(self) -> "AnalysisSession":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session is closed")
