# creature_import/ability_parser.py
from __future__ import annotations

import re
from typing import Optional

from creature_import.creature import AbilityEntry
from creature_import.enrich import capitalize_words, enrich


# "Name: text" or "Name (usage): text". The name is short and capitalized.
ABILITY_START_RE = re.compile(r"^([A-Z][A-Za-z' -]{0,40}(?:\s*\([^)]*\))?):\s+(.*)$")

# Bullet styles used in OSE ability lines
OSE_BULLET_CHARS = "-▶*•►▸▪·‣‒–—>"
OSE_BULLET_RE = re.compile(rf"^[{re.escape(OSE_BULLET_CHARS)}]\s*([^:]+?)\s*:(.*)$")
OSE_PLAIN_RE = re.compile(r"^([A-Z][A-Za-z' -]+(?:\s*\([^)]*\))?):\s+(.*)$")


def is_ability_start(line: str) -> bool:
    return ABILITY_START_RE.match(line) is not None


def is_ose_ability_start(line: str, allow_plain: bool = True) -> bool:
    if OSE_BULLET_RE.match(line):
        return True
    return allow_plain and OSE_PLAIN_RE.match(line) is not None


def _finish(entries: list[tuple[str, list[str]]], hyphen_join: bool) -> list[AbilityEntry]:
    abilities = []
    for name, parts in entries:
        description = ""
        for part in parts:
            if hyphen_join and description.endswith("-"):
                description = description[:-1] + part
            elif description and part:
                description += " " + part
            else:
                description += part
        abilities.append(AbilityEntry(name=name, description=enrich(description)))
    return abilities


def parse_special_abilities(lines: list[str]) -> list[AbilityEntry]:
    """Parse Dolmenwood ability lines.

    Every line that does not open a new ability continues the previous one.
    Lines before the first ability are ignored.
    """
    entries: list[tuple[str, list[str]]] = []
    current: Optional[tuple[str, list[str]]] = None

    for line in lines:
        m = ABILITY_START_RE.match(line)
        if m:
            current = (m.group(1).strip(), [m.group(2).strip()])
            entries.append(current)
        elif current is not None:
            current[1].append(line)

    return _finish(entries, hyphen_join=False)


def parse_ose_abilities(lines: list[str]) -> list[AbilityEntry]:
    """Parse OSE ability lines: '▶ Name: text' or 'Name: text'.

    Names are title-cased; a line ending in a hyphen is a word broken across
    lines and joins the next line without a space.
    """
    entries: list[tuple[str, list[str]]] = []
    current: Optional[tuple[str, list[str]]] = None

    for line in lines:
        m = OSE_BULLET_RE.match(line) or OSE_PLAIN_RE.match(line)
        if m:
            current = (capitalize_words(m.group(1).strip()), [m.group(2).strip()])
            entries.append(current)
        elif current is not None:
            current[1].append(line)

    return _finish(entries, hyphen_join=True)

