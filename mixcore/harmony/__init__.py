"""Harmonic and tempo compatibility subpackage."""

from mixcore.harmony.camelot import (
    CAMELOT_WHEEL,
    are_keys_compatible,
    get_camelot_code,
    get_camelot_entry,
    next_keys_for_energy_shift,
    normalize_key,
)
from mixcore.harmony.tempo_match import calculate_bpm_compatibility, find_optimal_sync_bpm
from mixcore.harmony.genres import (
    GENRE_DATABASE,
    all_genres,
    are_genres_compatible,
    estimate_bpm_from_genre,
    estimate_key_from_characteristics,
    get_compatible_genres,
    get_genre_info,
)

__all__ = [
    "CAMELOT_WHEEL",
    "are_keys_compatible",
    "get_camelot_code",
    "get_camelot_entry",
    "next_keys_for_energy_shift",
    "normalize_key",
    "calculate_bpm_compatibility",
    "find_optimal_sync_bpm",
    "GENRE_DATABASE",
    "all_genres",
    "are_genres_compatible",
    "estimate_bpm_from_genre",
    "estimate_key_from_characteristics",
    "get_compatible_genres",
    "get_genre_info",
]
