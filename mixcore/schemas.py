"""Pydantic models for handing analysis results to visualizers and advisors."""

from pydantic import BaseModel

from mixcore.analysis.models import AudioAnalysisResult


class AudioFeaturesResponse(BaseModel):
    bpm: float
    key: str
    energy: float
    danceability: float
    loudness_db: float
    time_signature: int = 4
    duration_seconds: float = 0.0


class BeatResponse(BaseModel):
    position_seconds: float
    confidence: float
    is_downbeat: bool
    is_phrase_start: bool


class AnalysisResponse(BaseModel):
    features: AudioFeaturesResponse
    beats: list[BeatResponse]
    waveform: list[float] = []
    frequency_data: list[int] = []
    energy_curve: list[float] = []
    spectral_centroid: float = 0.0
    spectral_rolloff: float = 0.0
    zero_crossing_rate: float = 0.0

    @classmethod
    def from_result(cls, result: AudioAnalysisResult, include_waveform: bool = True) -> "AnalysisResponse":
        f = result.features
        return cls(
            features=AudioFeaturesResponse(
                bpm=f.bpm,
                key=f.key,
                energy=f.energy,
                danceability=f.danceability,
                loudness_db=f.loudness_db,
                time_signature=f.time_signature,
                duration_seconds=f.duration_seconds,
            ),
            beats=[
                BeatResponse(
                    position_seconds=b.position_seconds,
                    confidence=b.confidence,
                    is_downbeat=b.is_downbeat,
                    is_phrase_start=b.is_phrase_start,
                )
                for b in result.beats
            ],
            waveform=result.waveform.tolist() if include_waveform else [],
            frequency_data=result.frequency_data.tolist(),
            energy_curve=list(result.energy_curve),
            spectral_centroid=result.spectral_centroid,
            spectral_rolloff=result.spectral_rolloff,
            zero_crossing_rate=result.zero_crossing_rate,
        )


class AdvisorInput(BaseModel):
    """The only fields advice generators may rely on."""
    bpm: float
    key: str
    energy_curve: list[float]

    @classmethod
    def from_result(cls, result: AudioAnalysisResult) -> "AdvisorInput":
        return cls(
            bpm=result.features.bpm,
            key=result.features.key,
            energy_curve=list(result.energy_curve),
        )
