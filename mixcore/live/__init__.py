"""Real-time subpackage: per-deck taps, sampling loops and the owning session."""

from mixcore.live.deck import LiveDeck, PlaybackSource
from mixcore.live.phase import PhaseAlignmentTracker, compute_phase_state
from mixcore.live.scheduler import CancellationToken, PeriodicTask
from mixcore.live.session import AnalysisSession
from mixcore.live.spectrum import SpectrumMonitor
from mixcore.live.tap import AnalysisTap

__all__ = [
    "LiveDeck",
    "PlaybackSource",
    "PhaseAlignmentTracker",
    "compute_phase_state",
    "CancellationToken",
    "PeriodicTask",
    "AnalysisSession",
    "SpectrumMonitor",
    "AnalysisTap",
]
