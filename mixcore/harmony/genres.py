"""Genre reference data: tempo ranges, common keys and compatible genres."""

import re

from mixcore.analysis.models import BpmRange, GenreInfo

GENRE_DATABASE: dict[str, GenreInfo] = {
    "techno": GenreInfo(
        name="Techno",
        bpm_range=BpmRange(120, 150, 130),
        common_keys=("Am", "Dm", "Em", "Gm", "Cm"),
        energy_level=8,
        compatible_genres=("House", "Trance", "Industrial", "Electro"),
    ),
    "house": GenreInfo(
        name="House",
        bpm_range=BpmRange(118, 135, 125),
        common_keys=("Am", "C", "Dm", "F", "G"),
        energy_level=7,
        compatible_genres=("Techno", "Disco", "Funk", "Soul", "Garage"),
    ),
    "drum-and-bass": GenreInfo(
        name="Drum & Bass",
        bpm_range=BpmRange(160, 180, 174),
        common_keys=("Am", "Dm", "Em", "Bm", "F#m"),
        energy_level=9,
        compatible_genres=("Jungle", "Dubstep", "Breakbeat", "Hardcore"),
    ),
    "trance": GenreInfo(
        name="Trance",
        bpm_range=BpmRange(125, 150, 138),
        common_keys=("C#m", "Am", "Em", "Bm", "F#m"),
        energy_level=8,
        compatible_genres=("Progressive House", "Techno", "Psytrance", "Eurodance"),
    ),
    "dubstep": GenreInfo(
        name="Dubstep",
        bpm_range=BpmRange(130, 145, 140),
        common_keys=("Dm", "Am", "Em", "F#m", "C#m"),
        energy_level=9,
        compatible_genres=("Drum & Bass", "Grime", "Trap", "Bass Music"),
    ),
    "hip-hop": GenreInfo(
        name="Hip-Hop",
        bpm_range=BpmRange(60, 100, 85),
        common_keys=("Am", "Cm", "Dm", "Em", "Gm"),
        energy_level=6,
        compatible_genres=("R&B", "Funk", "Soul", "Trap", "Breakbeat"),
    ),
    "disco": GenreInfo(
        name="Disco",
        bpm_range=BpmRange(110, 130, 120),
        common_keys=("C", "F", "G", "Dm", "Am"),
        energy_level=7,
        compatible_genres=("Funk", "House", "Boogie", "Soul", "Nu-Disco"),
    ),
    "ambient": GenreInfo(
        name="Ambient",
        bpm_range=BpmRange(60, 90, 75),
        common_keys=("C", "Am", "F", "G", "Dm"),
        energy_level=2,
        compatible_genres=("Downtempo", "Drone", "Experimental", "Chillout"),
    ),
}

# Tempo-only entries for genres without a full profile.
_EXTRA_BPM_RANGES = {
    "trap": BpmRange(70, 90, 75),
}

GENRE_BPM_RANGES: dict[str, BpmRange] = {
    **{slug: info.bpm_range for slug, info in GENRE_DATABASE.items()},
    **_EXTRA_BPM_RANGES,
}

DEFAULT_BPM_RANGE = BpmRange(100, 140, 120)

MINOR_KEYS = ("Am", "Dm", "Em", "Bm", "F#m", "Cm", "Gm")
MAJOR_KEYS = ("C", "F", "G", "D", "A", "E", "Bb")

_DARK_MARKERS = ("techno", "dark")
_BRIGHT_MARKERS = ("house", "disco")


def normalize_genre(genre: str) -> str:
    """Lower-case and hyphenate: "Drum and Bass" -> "drum-and-bass"."""
    if not isinstance(genre, str):
        return ""
    return re.sub(r"\s+", "-", genre.strip().lower())


def get_genre_info(genre: str) -> GenreInfo | None:
    return GENRE_DATABASE.get(normalize_genre(genre))


def all_genres() -> list[str]:
    return list(GENRE_DATABASE)


def get_compatible_genres(genre: str) -> list[str]:
    info = get_genre_info(genre)
    return list(info.compatible_genres) if info else []


def are_genres_compatible(genre1: str, genre2: str) -> bool:
    """True if *genre2* is listed as compatible with *genre1*."""
    info = get_genre_info(genre1)
    if info is None:
        return False
    wanted = normalize_genre(genre2)
    return any(normalize_genre(g) == wanted for g in info.compatible_genres)


def estimate_bpm_from_genre(genre: str) -> BpmRange:
    """Typical tempo range for a genre; 100-140 (typical 120) if unknown."""
    return GENRE_BPM_RANGES.get(normalize_genre(genre), DEFAULT_BPM_RANGE)


def estimate_key_from_characteristics(mood: str, genre: str) -> list[str]:
    """Candidate keys for a mood ("dark" | "bright" | "neutral") and genre.

    Techno and dark material lean minor, house and disco or bright material
    lean major, anything else gets a mix of both.
    """
    genre_lower = genre.lower() if isinstance(genre, str) else ""

    if mood == "dark" or any(marker in genre_lower for marker in _DARK_MARKERS):
        return list(MINOR_KEYS[:5])
    if mood == "bright" or any(marker in genre_lower for marker in _BRIGHT_MARKERS):
        return list(MAJOR_KEYS[:5])
    return list(MINOR_KEYS[:3] + MAJOR_KEYS[:3])
