"""Display-cadence band and collision sampling for one or two decks."""

from __future__ import annotations

from typing import Callable

from mixcore.analysis.bands import detect_collisions, split_frequency_bands
from mixcore.analysis.models import FrequencySnapshot, SpectrumFrame
from mixcore.live.scheduler import PeriodicTask
from mixcore.live.tap import AnalysisTap


def _snapshot(tap: AnalysisTap | None) -> FrequencySnapshot | None:
    if tap is None or tap.closed:
        return None
    return tap.frequency_snapshot()


class SpectrumMonitor:
    """Reads the decks' taps each refresh and publishes a SpectrumFrame.

    Frames are recomputed from scratch every tick. Collisions are only
    reported when both taps are present.
    """

    def __init__(
        self,
        tap_a: AnalysisTap | None,
        tap_b: AnalysisTap | None = None,
        interval: float = 1 / 60,
        collision_threshold: float = 0.6,
        on_frame: Callable[[SpectrumFrame], None] | None = None,
    ) -> None:
        self.tap_a = tap_a
        self.tap_b = tap_b
        self.collision_threshold = collision_threshold
        self.on_frame = on_frame
        self.frame = SpectrumFrame()
        self._task = PeriodicTask(interval, self.tick, name="spectrum-monitor")

    @property
    def running(self) -> bool:
        return self._task.running

    def tick(self) -> SpectrumFrame:
        snapshot_a = _snapshot(self.tap_a)
        snapshot_b = _snapshot(self.tap_b)

        collisions = []
        if snapshot_a is not None and snapshot_b is not None:
            collisions = detect_collisions(snapshot_a, snapshot_b, self.collision_threshold)

        frame = SpectrumFrame(
            bands_a=split_frequency_bands(snapshot_a) if snapshot_a is not None else None,
            bands_b=split_frequency_bands(snapshot_b) if snapshot_b is not None else None,
            collisions=collisions,
        )
        self.frame = frame
        if self.on_frame is not None:
            self.on_frame(frame)
        return frame

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()

    async def aclose(self) -> None:
        await self._task.aclose()
