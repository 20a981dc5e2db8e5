"""Camelot wheel lookup and harmonic key compatibility."""

import re

from mixcore.analysis.models import CamelotEntry, KeyCompatibility

_MAJOR_CODES = {
    "C": "8B", "Db": "3B", "D": "10B", "Eb": "5B", "E": "12B", "F": "7B",
    "F#": "2B", "G": "9B", "Ab": "4B", "A": "11B", "Bb": "6B", "B": "1B",
}
_MINOR_CODES = {
    "Am": "8A", "Bbm": "3A", "Bm": "10A", "Cm": "5A", "C#m": "12A", "Dm": "7A",
    "Ebm": "2A", "Em": "9A", "Fm": "4A", "F#m": "11A", "Gm": "6A", "G#m": "1A",
}

# Enharmonic spellings mapped onto the names used by the wheel.
_ENHARMONICS = {
    "C#": "Db", "D#": "Eb", "Gb": "F#", "G#": "Ab", "A#": "Bb", "Cb": "B", "Fb": "E",
    "E#": "F", "B#": "C",
    "Dbm": "C#m", "D#m": "Ebm", "Gbm": "F#m", "Abm": "G#m", "A#m": "Bbm",
    "Cbm": "Bm", "Fbm": "Em", "E#m": "Fm", "B#m": "Cm",
}

RELATIONSHIPS = (
    "same key",
    "relative major/minor",
    "energy step down",
    "energy step up",
)

_KEY_PATTERN = re.compile(
    r"^\s*([A-Ga-g])\s*([#b♯♭]?)\s*(m|min|minor|maj|major)?\s*$"
)
_CODE_PATTERN = re.compile(r"^\s*(1[0-2]|[1-9])\s*([ABab])\s*$")


def _shift(code: str, steps: int) -> str:
    number, letter = int(code[:-1]), code[-1]
    return f"{(number - 1 + steps) % 12 + 1}{letter}"


def _relative(code: str) -> str:
    return code[:-1] + ("A" if code.endswith("B") else "B")


def _build_entry(key: str, code: str) -> CamelotEntry:
    is_major = code.endswith("B")
    return CamelotEntry(
        musical_key=key,
        camelot_code=code,
        compatible_codes=(code, _relative(code), _shift(code, -1), _shift(code, 1)),
        energy_directions=("same", "down" if is_major else "up", "down", "up"),
    )


CAMELOT_WHEEL: dict[str, CamelotEntry] = {
    key: _build_entry(key, code)
    for key, code in {**_MAJOR_CODES, **_MINOR_CODES}.items()
}

_KEY_BY_CODE = {entry.camelot_code: key for key, entry in CAMELOT_WHEEL.items()}


def normalize_key(name: str) -> str | None:
    """Resolve a key name or Camelot code to the wheel's spelling.

    Accepts "Am", "A minor", "a min", "C#" (-> "Db"), "Abm" (-> "G#m") and
    codes such as "8A". Returns None for anything unrecognised.
    """
    if not isinstance(name, str):
        return None

    code_match = _CODE_PATTERN.match(name)
    if code_match:
        return _KEY_BY_CODE.get(code_match.group(1) + code_match.group(2).upper())

    match = _KEY_PATTERN.match(name)
    if not match:
        return None
    letter, accidental, mode = match.groups()
    accidental = {"♯": "#", "♭": "b"}.get(accidental, accidental)
    # Lower-case "m" alone means minor; "maj"/"major" means major.
    minor = mode in ("m", "min", "minor")
    key = letter.upper() + accidental + ("m" if minor else "")
    key = _ENHARMONICS.get(key, key)
    return key if key in CAMELOT_WHEEL else None


def get_camelot_entry(key: str) -> CamelotEntry | None:
    normalized = normalize_key(key)
    return CAMELOT_WHEEL[normalized] if normalized else None


def get_camelot_code(key: str) -> str | None:
    """Camelot code for a key, e.g. "Am" -> "8A". None if unknown."""
    entry = get_camelot_entry(key)
    return entry.camelot_code if entry else None


def are_keys_compatible(key1: str, key2: str) -> KeyCompatibility:
    """Judge whether two keys mix harmonically.

    The relationship is read from *key1*'s compatible list, so the result
    describes moving from *key1* to *key2*.
    """
    info1 = get_camelot_entry(key1)
    info2 = get_camelot_entry(key2)

    if info1 is None or info2 is None:
        return KeyCompatibility(
            compatible=False,
            relationship="unknown",
            advice="One or both keys not recognized. Mix by ear or use a breakdown.",
        )

    if info1.camelot_code == info2.camelot_code:
        return KeyCompatibility(
            compatible=True,
            relationship="perfect match",
            advice="Same key - perfectly harmonic. Mix freely!",
        )

    if info2.camelot_code in info1.compatible_codes:
        index = info1.compatible_codes.index(info2.camelot_code)
        detail = {
            1: "Moving to relative key - smooth transition",
            2: "Stepping down in energy",
            3: "Stepping up in energy",
        }.get(index, "Perfect harmonic match")
        return KeyCompatibility(
            compatible=True,
            relationship=RELATIONSHIPS[index],
            advice=f"Compatible keys ({info1.camelot_code} -> {info2.camelot_code}). {detail}",
        )

    return KeyCompatibility(
        compatible=False,
        relationship="not harmonically compatible",
        advice=(
            f"Keys clash ({info1.camelot_code} vs {info2.camelot_code}). "
            "Consider mixing during breakdown or use key shift."
        ),
    )


def next_keys_for_energy_shift(key: str, direction: str) -> list[str]:
    """Camelot codes to move to for an energy change.

    "up" gives the relative key and +1, "down" the relative key and -1,
    "same" the key's own code. Every direction returns codes, never key
    names. Unknown keys or directions give [].
    """
    entry = get_camelot_entry(key)
    if entry is None:
        return []
    codes = entry.compatible_codes
    if direction == "same":
        return [codes[0]]
    if direction == "up":
        return [codes[1], codes[3]]
    if direction == "down":
        return [codes[1], codes[2]]
    return []
