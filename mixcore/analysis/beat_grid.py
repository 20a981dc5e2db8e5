"""Beat grid construction: nominal grid snapped to envelope peaks."""

import numpy as np

from mixcore.analysis.models import BeatMarker


def build_beat_grid(
    envelope: np.ndarray,
    bpm: float,
    sr: int,
    hop_length: int = 512,
    search_fraction: float = 0.1,
    beats_per_bar: int = 4,
    beats_per_phrase: int = 16,
) -> list[BeatMarker]:
    """Lay a grid of ``60 / bpm`` second beats over the envelope.

    Each expected beat is moved to the envelope maximum within
    ``+/- search_fraction`` of one beat period. Where the window holds no
    energy the nominal position is kept. Confidence is the envelope value at
    the chosen frame, clamped to 1.
    """
    if bpm <= 0 or len(envelope) == 0:
        return []

    period = (60.0 / bpm) * sr / hop_length  # in envelope frames
    radius = period * search_fraction
    n_frames = len(envelope)

    beats: list[BeatMarker] = []
    count = 0
    expected = 0.0
    while expected < n_frames:
        start = max(0, int(np.floor(expected - radius)))
        end = min(n_frames, int(np.ceil(expected + radius)) + 1)
        window = envelope[start:end]

        position = min(int(round(expected)), n_frames - 1)
        peak = 0.0
        if len(window) and window.max() > 0:
            position = start + int(np.argmax(window))
            peak = float(window.max())

        beats.append(BeatMarker(
            position_seconds=position * hop_length / sr,
            confidence=min(peak, 1.0),
            is_downbeat=count % beats_per_bar == 0,
            is_phrase_start=count % beats_per_phrase == 0,
        ))
        expected += period
        count += 1

    return beats
