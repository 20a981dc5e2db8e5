"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings with env var overrides."""

    # Audio
    sample_rate: int | None = None  # None keeps the file's native rate

    # Envelope / tempo
    envelope_frame_length: int = 2048
    envelope_hop_length: int = 512
    bpm_window_seconds: float = 10.0
    min_peak_distance_seconds: float = 0.3
    min_bpm: float = 60.0
    max_bpm: float = 200.0
    default_bpm: float = 120.0

    # Beat grid
    beat_search_fraction: float = 0.1  # +/- fraction of one beat period
    beats_per_bar: int = 4
    beats_per_phrase: int = 16

    # Key
    key_fft_size: int = 2048
    key_hop_length: int = 512
    key_min_frequency: float = 27.5
    key_max_frequency: float = 5000.0

    # Spectral / energy
    rolloff_percent: float = 0.85
    energy_curve_scale: float = 20.0
    energy_curve_max: float = 10.0
    loudness_floor_db: float = -120.0
    danceability_beat_weight: float = 0.7
    danceability_energy_weight: float = 0.3

    # Live taps (AnalyserNode-style snapshots)
    tap_fft_size: int = 2048
    tap_smoothing: float = 0.8
    tap_min_decibels: float = -100.0
    tap_max_decibels: float = -30.0
    tap_buffer_seconds: float = 1.0

    # Live loops
    phase_tick_interval: float = 0.05  # 20 Hz
    sync_threshold: float = 0.1
    spectrum_refresh_interval: float = 1 / 60
    collision_threshold: float = 0.6

    model_config = {"env_prefix": "MIXCORE_"}


settings = Settings()
