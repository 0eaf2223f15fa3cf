# creature_import/ose_parser.py
"""
Parse an Old-School Essentials creature statblock into a CreatureRecord.

Expected layout:

    Name
    Optional description text...
    AC 6 [13], HD 2* (9hp), Att 2 x claw (1d4), bite (1d6) or gaze (paralysis),
    THAC0 18 [+1], MV 120' (40') / 180' (60') flying, SV D12 W13 P14 B15 S16,
    ML 8, AL Chaotic, XP 25, NA 1d6 (2d6), TT C
    ▶ Ability Name: Description text...

OSE statblocks carry no size, category or intelligence, so those keep their
defaults. AC, THAC0 and movement are converted to the Dolmenwood scales.
"""
from __future__ import annotations

import re

from creature_import.ability_parser import is_ose_ability_start, parse_ose_abilities
from creature_import.attack_parser import parse_ose_attacks
from creature_import.creature import CreatureRecord, Movement, Saves
from creature_import.cross_reference import cross_reference
from creature_import.enrich import title_case
from creature_import.exceptions import AnchorNotFoundError
from creature_import.lookups import resolve_alignment
from creature_import.normalize import normalize_ose, require_min_lines
from creature_import.statblock_parser import (
    DEFAULT_AC, DEFAULT_HP_DICE, DEFAULT_HP_VALUE, DEFAULT_MORALE, DEFAULT_SPEED,
    clamp_morale, parse_lair_chance, parse_xp,
)


# Descending and ascending AC, and THAC0 and attack bonus, both sum to 19.
AC_THAC0_BASE = 19
DEFAULT_EXPLORATION_SPEED = 120

_STATS_START_RE = re.compile(r'^AC\s*-?\d+', re.IGNORECASE)
_AC_RE = re.compile(r'\bAC\s*(-?\d+)(?:\s*\[([+-]?\d+)\]?)?', re.IGNORECASE)
_HD_RE = re.compile(r'\bHD\s+(\d+)([+-]\d+)?\**(?:\s*\((\d+)\s*hp\))?', re.IGNORECASE)
_THAC0_RE = re.compile(r'\bTHAC0\s+(\d+)(?:\s*\[([+-]?\d+)\])?', re.IGNORECASE)
_SAVES_RE = re.compile(r'\bSV\s+D(\d+)\s+W(\d+)\s+P(\d+)\s+B(\d+)\s+S(\d+)', re.IGNORECASE)
_MV_RE = re.compile(r'\bMV\s+([^,;]+?)(?=[,;]|$)', re.IGNORECASE)
_ML_RE = re.compile(r'\bML\s+(\d+)', re.IGNORECASE)
_AL_RE = re.compile(r'\bAL\s+([^,;]+)', re.IGNORECASE)
_NA_RE = re.compile(r'\bNA\s+([^\s,;(]+)\s*(?:\(([^)]+)\))?', re.IGNORECASE)
_TT_RE = re.compile(r'\bTT\s+([^,;\n]+)', re.IGNORECASE)
_ATT_RE = re.compile(r'\bAtt\s+(.*?)(?=[,;]\s*(?:THAC0|MV|SV)\b|$)', re.IGNORECASE)

_MOVEMENT_MODES = ("fly", "swim", "climb", "burrow")


# ── Field helpers ───────────────────────────────────────────────────

def parse_ac(text: str) -> int:
    """'AC 6 [13]' → 13; 'AC 2' → 17 (converted from descending)."""
    m = _AC_RE.search(text)
    if not m:
        return DEFAULT_AC
    if m.group(2):
        return int(m.group(2))
    return AC_THAC0_BASE - int(m.group(1))


def has_ac_token(text: str) -> bool:
    return _AC_RE.search(text) is not None


def parse_hit_dice(text: str) -> tuple[int, str, int]:
    """'HD 3+1* (15hp)' → (level 3, '3d8+1', 15).

    Without an explicit hp value the average of the dice is used.
    """
    m = _HD_RE.search(text)
    if not m:
        return 1, DEFAULT_HP_DICE, DEFAULT_HP_VALUE

    count = int(m.group(1))
    mod = int(m.group(2)) if m.group(2) else 0
    dice = f"{count}d8" if count >= 1 else "1d4"
    if mod:
        dice += f"{mod:+d}"

    if m.group(3):
        hp = int(m.group(3))
    elif count >= 1:
        hp = max(1, int(count * 4.5) + mod)
    else:
        hp = max(1, 2 + mod)
    return max(1, count), dice, hp


def parse_attack_bonus(text: str) -> int:
    """'THAC0 17 [+2]' → 2; 'THAC0 17' → 2 (converted)."""
    m = _THAC0_RE.search(text)
    if not m:
        return 0
    if m.group(2):
        return int(m.group(2))
    return AC_THAC0_BASE - int(m.group(1))


def parse_saves(text: str) -> Saves:
    """SV D W P B S map onto doom, ray, hold, blast, spell."""
    m = _SAVES_RE.search(text)
    return Saves(*(int(v) for v in m.groups())) if m else Saves()


def _encounter_speed(segment: str, default_exploration: int) -> int:
    """'120' (40')' → 40; '90'' → 30."""
    m = re.search(r"\((\d+)'?\)", segment)
    if m:
        return int(m.group(1))
    m = re.match(r'\s*(\d+)', segment)
    exploration = int(m.group(1)) if m else default_exploration
    return round(exploration / 3)


def parse_movement(text: str) -> tuple[int, Movement]:
    """MV field → (speed, Movement).

    "120' (40') / 360' (120') flying" → (40, Movement(fly=120))
    """
    m = _MV_RE.search(text)
    if not m:
        return DEFAULT_SPEED, Movement()

    speed = DEFAULT_SPEED
    extra = {}
    for i, segment in enumerate(m.group(1).split("/")):
        segment = segment.strip()
        if i == 0:
            speed = _encounter_speed(segment, DEFAULT_EXPLORATION_SPEED)
            continue
        lower = segment.lower()
        for mode in _MOVEMENT_MODES:
            if mode in lower:
                extra[mode] = _encounter_speed(segment, 0)
                break
    return speed, Movement(**extra)


def parse_encounters(text: str) -> str:
    """'NA 1d4 (2d6)' → '2d6': the wilderness number is preferred."""
    m = _NA_RE.search(text)
    if not m:
        return ""
    return (m.group(2) or m.group(1)).strip()


def _search_text(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


# ── Stats block ─────────────────────────────────────────────────────

def find_stats_line(lines: list[str]) -> int:
    for i in range(1, len(lines)):
        if _STATS_START_RE.match(lines[i]):
            return i
    raise AnchorNotFoundError('Could not find stats line (expected to start with "AC")')


def combine_stats_lines(lines: list[str], start: int) -> tuple[str, int]:
    """Join stats lines from *start* until the first ability line.

    Returns (combined text, index of the first ability line). A line ending
    in a hyphen is a word broken across lines.
    """
    combined = ""
    for i in range(start, len(lines)):
        line = lines[i]
        if is_ose_ability_start(line, allow_plain=i > start):
            return combined, i
        if combined.endswith("-"):
            combined = combined[:-1] + line
        else:
            combined = f"{combined} {line}" if combined else line
    return combined, len(lines)


# ── Main parser ─────────────────────────────────────────────────────

def parse_ose_statblock(text: str) -> CreatureRecord:
    """Parse OSE statblock text into a CreatureRecord."""
    lines = normalize_ose(text)
    require_min_lines(lines)
    stats_start = find_stats_line(lines)

    name = title_case(lines[0])
    description = " ".join(lines[1:stats_start]).strip()
    stats, ability_start = combine_stats_lines(lines, stats_start)

    level, hp_dice, hp_value = parse_hit_dice(stats)
    speed, movement = parse_movement(stats)
    ml = _ML_RE.search(stats)

    abilities = parse_ose_abilities(lines[ability_start:])
    attacks = parse_ose_attacks(_search_text(_ATT_RE, stats), parse_attack_bonus(stats))
    attacks = cross_reference(attacks, abilities)

    return CreatureRecord(
        name=name,
        description=description,
        alignment=resolve_alignment(_search_text(_AL_RE, stats) or "neutral"),
        level=level,
        ac=parse_ac(stats),
        hp_dice=hp_dice,
        hp_value=hp_value,
        saves=parse_saves(stats),
        attacks=tuple(attacks),
        speed=speed,
        movement=movement,
        morale=clamp_morale(int(ml.group(1))) if ml else DEFAULT_MORALE,
        xp_award=parse_xp(stats),
        encounters=parse_encounters(stats),
        lair_chance=parse_lair_chance(stats),
        treasure_type=_search_text(_TT_RE, stats),
        special_abilities=tuple(abilities),
    )
