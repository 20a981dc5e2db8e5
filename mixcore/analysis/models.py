"""Core data models for audio analysis and mix compatibility."""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class AudioFeatures:
    """Summary features of one analyzed buffer."""
    bpm: float
    key: str  # e.g. "Am", "F#"
    energy: float  # 0.0-1.0
    danceability: float  # 0.0-1.0
    loudness_db: float
    time_signature: int = 4
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class BeatMarker:
    """A single beat on the beat grid."""
    position_seconds: float
    confidence: float  # 0.0-1.0
    is_downbeat: bool = False  # first beat of a bar
    is_phrase_start: bool = False  # first beat of a phrase


@dataclass
class AudioAnalysisResult:
    """Complete offline analysis of one buffer."""
    features: AudioFeatures
    beats: list[BeatMarker]
    waveform: np.ndarray  # float32 mono samples
    frequency_data: np.ndarray  # uint8, byte-scaled average spectrum
    energy_curve: list[float] = field(default_factory=list)  # 0-10 per second
    spectral_centroid: float = 0.0  # Hz
    spectral_rolloff: float = 0.0  # Hz
    zero_crossing_rate: float = 0.0


@dataclass(frozen=True)
class FrequencySnapshot:
    """One frame of per-bin magnitudes from a live tap or a whole buffer.

    Integer data is byte scaled (0-255). Float data is taken as already
    normalized and clipped to [0, 1].
    """
    data: np.ndarray
    sample_rate: int

    @property
    def n_bins(self) -> int:
        return len(self.data)

    @property
    def bin_width(self) -> float:
        if self.n_bins == 0:
            return 0.0
        return (self.sample_rate / 2) / self.n_bins

    def normalized(self) -> np.ndarray:
        data = np.asarray(self.data)
        if np.issubdtype(data.dtype, np.integer):
            return data.astype(np.float64) / 255.0
        return np.clip(data.astype(np.float64), 0.0, 1.0)


@dataclass(frozen=True)
class FrequencyBands:
    """Normalized energy (0-1) in the seven perceptual bands."""
    sub_bass: float = 0.0  # 20-60 Hz
    bass: float = 0.0  # 60-250 Hz
    low_mids: float = 0.0  # 250-500 Hz
    mids: float = 0.0  # 500-2000 Hz
    high_mids: float = 0.0  # 2000-4000 Hz
    presence: float = 0.0  # 4000-6000 Hz
    brilliance: float = 0.0  # 6000-20000 Hz

    def as_dict(self) -> dict[str, float]:
        return {
            "sub_bass": self.sub_bass,
            "bass": self.bass,
            "low_mids": self.low_mids,
            "mids": self.mids,
            "high_mids": self.high_mids,
            "presence": self.presence,
            "brilliance": self.brilliance,
        }


@dataclass(frozen=True)
class Collision:
    """Bin where two decks both carry high energy."""
    frequency: float  # Hz
    severity: float  # min of the two normalized levels


@dataclass(frozen=True)
class FrequencyBalance:
    """Share of total band energy in bass / mids / highs."""
    bass_ratio: float
    mids_ratio: float
    highs_ratio: float


@dataclass(frozen=True)
class EqSuggestion:
    """Per macro-band EQ moves in dB (-12..+12)."""
    low_db: float
    mid_db: float
    high_db: float
    # macro band -> "too_quiet" | "too_loud", only for moves beyond 2 dB
    flags: dict[str, str] = field(default_factory=dict)

    @property
    def balanced(self) -> bool:
        return not self.flags


@dataclass(frozen=True)
class CamelotEntry:
    """Camelot wheel position of a musical key."""
    musical_key: str
    camelot_code: str  # e.g. "8A"
    compatible_codes: tuple[str, str, str, str]  # self, relative, -1, +1
    energy_directions: tuple[str, str, str, str]  # "same" | "up" | "down"


@dataclass(frozen=True)
class KeyCompatibility:
    compatible: bool
    relationship: str
    advice: str


@dataclass(frozen=True)
class BpmCompatibility:
    compatible: bool
    relationship: str
    percentage_diff: float  # relative to the first BPM
    pitch_adjustment: float  # % to apply to the second track
    advice: str


@dataclass(frozen=True)
class SyncTempo:
    sync_bpm: float
    track1_adjustment: float  # %
    track2_adjustment: float  # %
    advice: str


@dataclass(frozen=True)
class BpmRange:
    min: float
    max: float
    typical: float


@dataclass(frozen=True)
class GenreInfo:
    name: str
    bpm_range: BpmRange
    common_keys: tuple[str, ...]
    energy_level: int  # 1-10
    compatible_genres: tuple[str, ...]


@dataclass(frozen=True)
class PhaseState:
    """Beat-phase relation between two decks at one tick."""
    position_a: float
    position_b: float
    next_beat_a: float
    next_beat_b: float
    phase: float  # 0.0 aligned .. 0.5 maximally off
    bpm_difference: float
    synced: bool
    active: bool = True  # False when a deck is paused or absent

    @property
    def time_to_next_beat_a(self) -> float:
        return self.next_beat_a - self.position_a

    @property
    def time_to_next_beat_b(self) -> float:
        return self.next_beat_b - self.position_b

    @classmethod
    def idle(cls) -> "PhaseState":
        return cls(
            position_a=0.0,
            position_b=0.0,
            next_beat_a=0.0,
            next_beat_b=0.0,
            phase=0.0,
            bpm_difference=0.0,
            synced=False,
            active=False,
        )


@dataclass(frozen=True)
class SpectrumFrame:
    """Band energies of both decks and their collisions at one refresh."""
    bands_a: FrequencyBands | None = None
    bands_b: FrequencyBands | None = None
    collisions: list[Collision] = field(default_factory=list)
