"""Analysis orchestrator - turns a decoded buffer into an AudioAnalysisResult."""

import asyncio
import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import numpy as np

from mixcore.analysis.beat_grid import build_beat_grid
from mixcore.analysis.envelope import rms_envelope
from mixcore.analysis.key import key_from_profile, pitch_class_profile
from mixcore.analysis.models import AudioAnalysisResult, AudioFeatures, BeatMarker
from mixcore.analysis.spectral import (
    average_spectrum,
    energy_curve,
    loudness_db,
    magnitude_spectrogram,
    rms,
    spectral_centroid,
    spectral_rolloff,
    to_byte_spectrum,
    zero_crossing_rate,
)
from mixcore.analysis.tempo import detect_bpm
from mixcore.audio.loader import decode_pcm, load_audio
from mixcore.audio.preprocessing import normalize_sample_rate, prepare
from mixcore.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class AnalysisEngine:
    """Runs the full offline feature extraction over one buffer.

    The engine holds only configuration, so one instance can be shared
    between threads. Each call decodes into its own buffers.
    """

    def __init__(self, config: Settings | None = None):
        self.config = config or default_settings

    def analyze_file(self, file_path_or_buffer: Union[str, Path, BytesIO, bytes]) -> AudioAnalysisResult:
        """Decode and analyze an encoded audio file. Raises DecodeError."""
        audio, sr = load_audio(file_path_or_buffer, sr=self.config.sample_rate)
        return self.analyze_audio(audio, sr)

    def analyze_bytes(self, data: bytes, sr: int) -> AudioAnalysisResult:
        """Analyze raw float32 PCM bytes. Raises DecodeError."""
        return self.analyze_audio(decode_pcm(data), sr)

    async def analyze_async(self, audio: np.ndarray, sr: int) -> AudioAnalysisResult:
        """Run analyze_audio in the default executor, off the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.analyze_audio, audio, sr)

    def analyze_audio(self, audio: np.ndarray, sr: int) -> AudioAnalysisResult:
        """Analyze a decoded buffer.

        Raises DecodeError for malformed input. Silent or empty buffers are
        analyzed normally and give fallback tempo and zero energy.
        """
        cfg = self.config
        sr = normalize_sample_rate(sr)
        audio = prepare(audio, sr)
        duration = len(audio) / sr
        logger.info(f"Analyzing {duration:.1f}s of audio at {sr}Hz")

        # Step 1: Tempo
        logger.info("Step 1: Tempo estimation")
        bpm = detect_bpm(
            audio, sr,
            window_seconds=cfg.bpm_window_seconds,
            frame_length=cfg.envelope_frame_length,
            hop_length=cfg.envelope_hop_length,
            min_peak_distance=cfg.min_peak_distance_seconds,
            min_bpm=cfg.min_bpm,
            max_bpm=cfg.max_bpm,
            default_bpm=cfg.default_bpm,
        )
        logger.info(f"  BPM: {bpm}")

        # Step 2: Beat grid over the whole buffer
        logger.info("Step 2: Beat grid")
        envelope = rms_envelope(audio, cfg.envelope_frame_length, cfg.envelope_hop_length)
        beats = build_beat_grid(
            envelope, bpm, sr,
            hop_length=cfg.envelope_hop_length,
            search_fraction=cfg.beat_search_fraction,
            beats_per_bar=cfg.beats_per_bar,
            beats_per_phrase=cfg.beats_per_phrase,
        )
        logger.info(f"  {len(beats)} beats, {sum(1 for b in beats if b.is_downbeat)} downbeats")

        # Step 3: Spectrum, key and spectral descriptors share one STFT
        logger.info("Step 3: Spectral analysis")
        magnitudes = magnitude_spectrogram(audio, cfg.key_fft_size, cfg.key_hop_length)
        profile = pitch_class_profile(magnitudes, sr, cfg.key_min_frequency, cfg.key_max_frequency)
        key = key_from_profile(profile)
        spectrum = average_spectrum(magnitudes)
        centroid = spectral_centroid(spectrum, sr)
        rolloff = spectral_rolloff(spectrum, sr, cfg.rolloff_percent)
        zcr = zero_crossing_rate(audio)
        frequency_data = to_byte_spectrum(
            spectrum[:cfg.key_fft_size // 2], cfg.key_fft_size,
            cfg.tap_min_decibels, cfg.tap_max_decibels,
        )
        logger.info(f"  key={key} centroid={centroid:.0f}Hz rolloff={rolloff:.0f}Hz zcr={zcr:.3f}")

        # Step 4: Energy
        logger.info("Step 4: Energy")
        energy = _clamp01(rms(audio))
        features = AudioFeatures(
            bpm=bpm,
            key=key,
            energy=energy,
            danceability=self._danceability(beats, energy),
            loudness_db=loudness_db(audio, cfg.loudness_floor_db),
            time_signature=cfg.beats_per_bar,
            duration_seconds=duration,
        )

        return AudioAnalysisResult(
            features=features,
            beats=beats,
            waveform=audio,
            frequency_data=frequency_data,
            energy_curve=energy_curve(audio, sr, cfg.energy_curve_scale, cfg.energy_curve_max),
            spectral_centroid=centroid,
            spectral_rolloff=rolloff,
            zero_crossing_rate=zcr,
        )

    def _danceability(self, beats: list[BeatMarker], energy: float) -> float:
        if not beats:
            return 0.0
        avg_confidence = sum(b.confidence for b in beats) / len(beats)
        return _clamp01(
            avg_confidence * self.config.danceability_beat_weight
            + energy * self.config.danceability_energy_weight
        )
