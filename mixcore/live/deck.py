"""Transport-facing handle for one live audio source."""

from __future__ import annotations

from typing import Protocol

from mixcore.live.tap import AnalysisTap


class PlaybackSource(Protocol):
    """What the live components read from a deck.

    ``position`` is the playback position in seconds, or None when nothing
    is loaded. ``playing`` is False while paused.
    """

    position: float | None
    playing: bool


class LiveDeck:
    """One deck: transport state written by the player, plus its single tap.

    The player updates :attr:`position`, :attr:`playing` and pushes played
    samples into :attr:`tap`. Live components only read from it.
    """

    def __init__(self, name: str, tap: AnalysisTap, bpm: float = 0.0) -> None:
        self.name = name
        self.tap = tap
        self.bpm = bpm
        self.position: float | None = None
        self.playing = False

    def __repr__(self) -> str:
        return f"LiveDeck({self.name!r}, bpm={self.bpm}, position={self.position}, playing={self.playing})"
