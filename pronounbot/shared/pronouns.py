"""Canonical pronoun table shared by every lookup provider."""

from __future__ import annotations

# Provider code -> display value.
# PronounDB and Alejo codes live side by side; neither set collides.
PRONOUNS: dict[str, str] = {
    # PronounDB
    "hh": "he/him",
    "hi": "he/it",
    "hs": "he/she",
    "ht": "he/they",
    "ih": "it/him",
    "ii": "it/its",
    "is": "it/she",
    "it": "it/they",
    "shh": "she/he",
    "sh": "she/her",
    "si": "she/it",
    "st": "she/they",
    "th": "they/he",
    "ti": "they/it",
    "ts": "they/she",
    "tt": "they/them",
    "any": "Any",
    "other": "Other",
    "ask": "Ask me my",
    "avoid": "Avoid pronouns, use my name",
    # Alejo
    "aeaer": "Ae/Aer",
    "eem": "E/Em",
    "faefaer": "Fae/Faer",
    "hehim": "He/Him",
    "heshe": "He/She",
    "hethem": "He/They",
    "itits": "It/Its",
    "perper": "Per/Per",
    "sheher": "She/Her",
    "shethem": "She/They",
    "theythem": "They/Them",
    "vever": "Ve/Ver",
    "xexem": "Xe/Xem",
    "ziehir": "Zie/Hir",
}

CANONICAL_VALUES: frozenset[str] = frozenset(PRONOUNS.values())

# Sentinel PronounDB returns for users without a preference
UNSPECIFIED = "unspecified"


def normalize(code: str | None) -> str | None:
    """Map a raw provider code to its display value, or None if unknown."""
    if not code:
        return None
    return PRONOUNS.get(code)


def is_canonical(value: str | None) -> bool:
    return value is not None and value in CANONICAL_VALUES
