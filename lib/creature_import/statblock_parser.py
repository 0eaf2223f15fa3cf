"""
Statblock parser for Dolmenwood creature text (with OSE as an alternate format).

Converts a pasted plain-text creature statblock into a CreatureRecord.

Expected Dolmenwood layout:

    BROOK GOBLIN
    Description text, any number of lines...
    Small fairy—sentient—chaotic
    Level 2 AC 13 HP 2d8 (9) Saves D12 R13 H14 B15 S16
    Att 2 claws (+1, 1d4) or bite (+2, 1d6) Speed 40 Swim 20
    Morale 8 XP 35 Encounters 2d4 (30% in lair)
    Behaviour Mischievous...
    Speech Woldish
    Possessions None Hoard C4
    Ability Name: Description...

Everything after the Level/AC/HP/Saves line is found by keyword, so line
breaks inside the stat lines do not matter. Only a missing type line or a
too-short paste is fatal; every other gap falls back to a default.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Union

from creature_import.ability_parser import is_ability_start, parse_special_abilities
from creature_import.attack_parser import parse_attacks
from creature_import.creature import CreatureRecord, Movement, Saves
from creature_import.cross_reference import cross_reference
from creature_import.enrich import title_case
from creature_import.exceptions import AnchorNotFoundError
from creature_import.lookups import (
    ALIGNMENT_KEYWORDS, resolve_alignment, resolve_intelligence, resolve_size_and_type,
)
from creature_import.normalize import DASH, normalize, require_min_lines


class StatblockFormat(str, Enum):
    DOLMENWOOD = "dolmenwood"
    OSE = "ose"


# ── Defaults ────────────────────────────────────────────────────────

DEFAULT_LEVEL = 1
DEFAULT_AC = 10
DEFAULT_HP_DICE = "1d8"
DEFAULT_HP_VALUE = 4
DEFAULT_SPEED = 40
DEFAULT_MORALE = 7
MORALE_MIN, MORALE_MAX = 2, 12


def clamp_morale(value: int) -> int:
    return max(MORALE_MIN, min(MORALE_MAX, value))


# ── Header / type line ──────────────────────────────────────────────

def find_type_line(lines: list[str]) -> int:
    """Index of the 'size type—intelligence—alignment' line.

    Needs at least two dash separators and an alignment keyword.
    """
    for i, line in enumerate(lines):
        if line.count(DASH) >= 2:
            lower = line.lower()
            if any(keyword in lower for keyword in ALIGNMENT_KEYWORDS):
                return i
    raise AnchorNotFoundError(
        f"Could not find type line (expected format: \"size type{DASH}intelligence{DASH}alignment\")"
    )


def parse_type_line(line: str) -> dict:
    parts = [p.strip().lower() for p in line.split(DASH, 2)]
    parts += [""] * (3 - len(parts))
    size, monster_type = resolve_size_and_type(parts[0])
    return {
        "size": size,
        "monster_type": monster_type,
        "intelligence": resolve_intelligence(parts[1]),
        "alignment": resolve_alignment(parts[2]),
    }


# ── Stat fields ─────────────────────────────────────────────────────

_LEVEL_RE = re.compile(r'\bLevel\s+(\d+)', re.IGNORECASE)
_AC_RE = re.compile(r'\bAC\s+(\d+)', re.IGNORECASE)
_HP_RE = re.compile(r'\bHP\s+(\d+d\d+(?:[+-]\d+)?)\s*\((\d+)\)', re.IGNORECASE)
_SAVES_RE = re.compile(
    r'\bSaves?\s+D(\d+)\s+R(\d+)\s+H(\d+)\s+B(\d+)\s+S(\d+)', re.IGNORECASE
)
_ATTACKS_RE = re.compile(
    r'\bAtt(?:acks?)?\s+(.*?)(?:\s+(?:Speed|Fly|Swim|Climb|Burrow|Morale)\b|$)',
    re.IGNORECASE,
)
_SPEED_RE = re.compile(r'\bSpeed\s+(\d+)', re.IGNORECASE)
_MORALE_RE = re.compile(r'\bMorale\s+(\d+)', re.IGNORECASE)
_XP_RE = re.compile(r'\bXP\s+([\d,]+)', re.IGNORECASE)
_ENCOUNTERS_RE = re.compile(r'\bEnc(?:ounters?)?\s+(\S+)', re.IGNORECASE)
LAIR_PERCENT_RE = re.compile(r'\((\d+)%\s+in\s+lair\)', re.IGNORECASE)
ALWAYS_IN_LAIR_RE = re.compile(r'\balways\s+in\s+lair\b', re.IGNORECASE)

_MOVEMENT_MODES = ("swim", "fly", "climb", "burrow")


def _int_or(pattern: re.Pattern, text: str, default: int) -> int:
    m = pattern.search(text)
    return int(m.group(1)) if m else default


def parse_core_stats(text: str) -> dict:
    """Level, AC, HP and saves."""
    hp = _HP_RE.search(text)
    saves = _SAVES_RE.search(text)
    return {
        "level": max(1, _int_or(_LEVEL_RE, text, DEFAULT_LEVEL)),
        "ac": _int_or(_AC_RE, text, DEFAULT_AC),
        "hp_dice": hp.group(1) if hp else DEFAULT_HP_DICE,
        "hp_value": int(hp.group(2)) if hp else DEFAULT_HP_VALUE,
        "saves": Saves(*(int(v) for v in saves.groups())) if saves else Saves(),
    }


def has_ac_token(text: str) -> bool:
    return _AC_RE.search(text) is not None


def parse_movement(text: str) -> Movement:
    speeds = {}
    for mode in _MOVEMENT_MODES:
        m = re.search(rf'\b{mode}\s+(\d+)', text, re.IGNORECASE)
        speeds[mode] = int(m.group(1)) if m else 0
    return Movement(**speeds)


def parse_lair_chance(text: str) -> int:
    """'(25% in lair)' → 25, '(always in lair)' → 100, otherwise 0."""
    if ALWAYS_IN_LAIR_RE.search(text):
        return 100
    m = LAIR_PERCENT_RE.search(text)
    return min(100, int(m.group(1))) if m else 0


def parse_xp(text: str) -> int:
    m = _XP_RE.search(text)
    return int(m.group(1).replace(",", "")) if m else 0


def extract_attack_text(text: str) -> str:
    """The attack list between 'Att' and the first movement/morale keyword."""
    m = _ATTACKS_RE.search(text)
    return m.group(1).strip() if m else ""


def parse_secondary_stats(text: str) -> dict:
    """Speed, movement, morale, XP, encounters and lair chance."""
    enc = _ENCOUNTERS_RE.search(text)
    return {
        "speed": _int_or(_SPEED_RE, text, DEFAULT_SPEED),
        "movement": parse_movement(text),
        "morale": clamp_morale(_int_or(_MORALE_RE, text, DEFAULT_MORALE)),
        "xp_award": parse_xp(text),
        "encounters": enc.group(1) if enc else "",
        "lair_chance": parse_lair_chance(text) if enc else 0,
    }


# ── Line classification ─────────────────────────────────────────────

_METADATA_RE = re.compile(r'^(Behaviou?r|Speech|Possessions|Hoard)\b', re.IGNORECASE)
_METADATA_FIELD_RE = re.compile(r"^(Behaviou?r|Speech|Possessions|Hoard)\s*:?\s+(.*)$", re.IGNORECASE)
# Keywords are capitalized when a line carries two fields back to back.
_METADATA_SPLIT_RE = re.compile(r"\s+(?=(?:Behaviou?r|Speech|Possessions|Hoard)\s+)")
_STAT_LINE_RE = re.compile(r'^(?:Att(?:acks?)?|Speed|Morale|XP|Enc(?:ounters?)?)\b', re.IGNORECASE)
_CONTINUATION_RE = re.compile(r'^(?:or|and)\s+', re.IGNORECASE)

_METADATA_KEYS = {
    "behaviour": "behaviour",
    "behavior": "behaviour",
    "speech": "speech",
    "possessions": "possessions",
    "hoard": "hoard",
}


def _presplit_metadata(lines: list[str]) -> list[str]:
    """'Possessions None Hoard C4' → ['Possessions None', 'Hoard C4']."""
    out: list[str] = []
    for line in lines:
        if _METADATA_RE.match(line):
            out.extend(part.strip() for part in _METADATA_SPLIT_RE.split(line) if part.strip())
        else:
            out.append(line)
    return out


def classify_lines(lines: list[str]) -> tuple[list[str], dict[str, str], list[str]]:
    """Split the lines after the first stats line into stats, metadata and abilities.

    Returns (stat_lines, metadata, ability_lines). The first line that looks
    like 'Name: text' and is not a stat or metadata line starts the ability
    block; everything from there on is ability text.
    """
    lines = _presplit_metadata(lines)
    stat_lines: list[str] = []
    metadata: dict[str, str] = {}
    current: Optional[list[str]] = None   # [key, value] of the open metadata field

    def close():
        nonlocal current
        if current is not None:
            metadata[current[0]] = current[1]
            current = None

    for i, line in enumerate(lines):
        m = _METADATA_FIELD_RE.match(line)
        if m:
            close()
            current = [_METADATA_KEYS[m.group(1).lower()], m.group(2).strip()]
            continue
        if _STAT_LINE_RE.match(line) or _CONTINUATION_RE.match(line):
            close()
            stat_lines.append(line)
        elif is_ability_start(line):
            close()
            return stat_lines, metadata, lines[i:]
        elif current is not None:
            current[1] = f"{current[1]} {line}".strip()
        else:
            # wrapped stat line, e.g. a long attack list
            stat_lines.append(line)

    close()
    return stat_lines, metadata, []


# ── Main parser ─────────────────────────────────────────────────────

def parse_statblock(text: str) -> CreatureRecord:
    """Parse Dolmenwood statblock text into a CreatureRecord."""
    lines = normalize(text)
    require_min_lines(lines)
    anchor = find_type_line(lines)

    name = title_case(lines[0])
    description = " ".join(lines[1:anchor]).strip()
    type_fields = parse_type_line(lines[anchor])

    first_stats = lines[anchor + 1] if anchor + 1 < len(lines) else ""
    stat_lines, metadata, ability_lines = classify_lines(lines[anchor + 2:])
    stats_text = " ".join([first_stats] + stat_lines)

    abilities = parse_special_abilities(ability_lines)
    attacks = cross_reference(parse_attacks(extract_attack_text(stats_text)), abilities)

    return CreatureRecord(
        name=name,
        description=description,
        **type_fields,
        **parse_core_stats(stats_text),
        attacks=tuple(attacks),
        **parse_secondary_stats(stats_text),
        treasure_type=metadata.get("hoard", ""),
        behaviour=metadata.get("behaviour", ""),
        speech=metadata.get("speech", ""),
        possessions=metadata.get("possessions", ""),
        special_abilities=tuple(abilities),
    )


def parse_creature_statblock(
    text: str, fmt: Union[StatblockFormat, str] = StatblockFormat.DOLMENWOOD
) -> CreatureRecord:
    """Parse *text* in the selected format ('dolmenwood' or 'ose')."""
    fmt = StatblockFormat(fmt)
    if fmt is StatblockFormat.OSE:
        from creature_import.ose_parser import parse_ose_statblock
        return parse_ose_statblock(text)
    return parse_statblock(text)
