# creature_import/lookups.py
"""
Keyword tables for the creature type line.

    "Large monstrosity—semi-intelligent—chaotic"
     size  category      intelligence    alignment

Tables are read-only; each has a resolver that returns the canonical value
or the documented default.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class Size(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class MonsterType(str, Enum):
    ANIMAL = "animal"
    BUG = "bug"
    CONSTRUCT = "construct"
    DEMI_FEY = "demi-fey"
    DRAGON = "dragon"
    FAIRY = "fairy"
    FUNGUS = "fungus"
    MONSTROSITY = "monstrosity"
    MORTAL = "mortal"
    OOZE = "ooze"
    PLANT = "plant"
    UNDEAD = "undead"


class Intelligence(str, Enum):
    MINDLESS = "mindless"
    ANIMAL = "animal"
    SEMI_INTELLIGENT = "semi-intelligent"
    SENTIENT = "sentient"
    GENIUS = "genius"


class Alignment(str, Enum):
    LAWFUL = "lawful"
    NEUTRAL = "neutral"
    CHAOTIC = "chaotic"


# OSE sizes collapse onto the three Dolmenwood sizes. Order matters: the
# first key that prefixes the category text wins.
SIZE_MAP = MappingProxyType({
    "tiny":     Size.SMALL,
    "small":    Size.SMALL,
    "medium":   Size.MEDIUM,
    "large":    Size.LARGE,
    "huge":     Size.LARGE,
    "gigantic": Size.LARGE,
})

MONSTER_TYPE_MAP = MappingProxyType({t.value: t for t in MonsterType})

INTELLIGENCE_MAP = MappingProxyType({
    "mindless":            Intelligence.MINDLESS,
    "animal intelligence": Intelligence.ANIMAL,
    "semi-intelligent":    Intelligence.SEMI_INTELLIGENT,
    "sentient":            Intelligence.SENTIENT,
    "genius":              Intelligence.GENIUS,
})

ALIGNMENT_MAP = MappingProxyType({
    "lawful":                  Alignment.LAWFUL,
    "neutral":                 Alignment.NEUTRAL,
    "chaotic":                 Alignment.CHAOTIC,
    "any alignment":           Alignment.NEUTRAL,
    "alignment by individual": Alignment.NEUTRAL,
})

# Substrings that mark a line as a type line candidate.
ALIGNMENT_KEYWORDS = tuple(ALIGNMENT_MAP.keys())


def resolve_size_and_type(text: str) -> tuple[Size, MonsterType]:
    """'large monstrosity' → (LARGE, MONSTROSITY); unknown parts default."""
    text = text.strip().lower()
    for key, size in SIZE_MAP.items():
        if text == key:
            return size, MonsterType.MORTAL
        if text.startswith(key + " "):
            rest = text[len(key):].strip()
            return size, MONSTER_TYPE_MAP.get(rest, MonsterType.MORTAL)
    return Size.MEDIUM, MONSTER_TYPE_MAP.get(text, MonsterType.MORTAL)


def resolve_intelligence(text: str) -> Intelligence:
    text = text.lower()
    for key, value in INTELLIGENCE_MAP.items():
        if key in text:
            return value
    return Intelligence.ANIMAL


def resolve_alignment(text: str) -> Alignment:
    """Exact phrase lookup first, then lawful/chaotic substrings, else neutral."""
    text = text.strip().lower()
    if text in ALIGNMENT_MAP:
        return ALIGNMENT_MAP[text]
    if "lawful" in text:
        return Alignment.LAWFUL
    if "chaotic" in text:
        return Alignment.CHAOTIC
    return Alignment.NEUTRAL
