# creature_import/importer.py
"""
Build creature records from pasted text and hand them to storage.

Entry points:
    build_creature_record(text, fmt) -> CreatureRecord
    import_creature_statblock(text, fmt, storage_api=None) -> ImportResult
    validate_creature(record, ac_found) -> list[str]
    creature_key(name) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Union

from creature_import import ose_parser, statblock_parser
from creature_import.creature import CreatureRecord, to_actor_data
from creature_import.cross_reference import SEE_SPECIAL_ABILITIES
from creature_import.statblock_parser import (
    DEFAULT_AC, DEFAULT_HP_DICE, DEFAULT_HP_VALUE, StatblockFormat,
    parse_creature_statblock,
)
from creature_import.storage_api import StorageAPI


_SOURCE_PREFIX_RE = re.compile(r'^(Source\s+\S+)\s*')
# Copy numbering on pasted names: "Brook Goblin #2", "Brook Goblin 2"
_COPY_NUMBER_RE = re.compile(r'(?:\s*#|\s+)\d+$')
_NON_KEY_CHARS_RE = re.compile(r'[^a-z0-9]+')


@dataclass(frozen=True)
class ImportResult:
    key: str
    record: CreatureRecord
    warnings: list[str]
    saved: bool


# ── Key generation ──────────────────────────────────────────────────

def creature_key(creature_name: str) -> str:
    """Storage key for a creature name.

    'Brook Goblin #2'  → 'brook_goblin.json'
    'Drake (Young)'    → 'drake_young.json'
    """
    base = _COPY_NUMBER_RE.sub('', creature_name.strip()).replace("'", "")
    slug = _NON_KEY_CHARS_RE.sub('_', base.lower()).strip('_')
    return f"{slug}.json"


# ── Record builder ──────────────────────────────────────────────────

def format_source_prefix(description: str) -> str:
    """'Source DMB p.12 ...' → '(Source DMB) p.12 ...'."""
    if not description:
        return description
    return _SOURCE_PREFIX_RE.sub(lambda m: f"({m.group(1)}) ", description, count=1)


def build_creature_record(
    text: str, fmt: Union[StatblockFormat, str] = StatblockFormat.DOLMENWOOD
) -> CreatureRecord:
    """Parse *text* and apply the final record formatting.

    Raises StructuralError or AnchorNotFoundError; no partial record is
    produced on those paths.
    """
    record = parse_creature_statblock(text, fmt)
    return replace(record, description=format_source_prefix(record.description))


def has_ac_token(
    text: str, fmt: Union[StatblockFormat, str] = StatblockFormat.DOLMENWOOD
) -> bool:
    """Whether the statblock states an AC at all, in the grammar of *fmt*."""
    if StatblockFormat(fmt) is StatblockFormat.OSE:
        return ose_parser.has_ac_token(text)
    return statblock_parser.has_ac_token(text)


# ── Validation ──────────────────────────────────────────────────────

def validate_creature(record: CreatureRecord, ac_found: bool = False) -> list[str]:
    """Return list of warning strings for missing or suspect fields.

    *ac_found* tells whether the source text carried an AC token; an AC of 10
    is only suspect when it did not.
    """
    warnings = []

    if not record.name:
        warnings.append("Name is empty")

    if not record.attacks:
        warnings.append("No attacks parsed; check the 'Att' portion of the statblock")

    if record.hp_dice == DEFAULT_HP_DICE and record.hp_value == DEFAULT_HP_VALUE:
        warnings.append("Hit points left at default 1d8 (4); may indicate a parsing error")

    if record.ac == DEFAULT_AC and not ac_found:
        warnings.append("AC is 10; may indicate the AC value was not found")

    for attack in record.attacks:
        if attack.attack_effect == SEE_SPECIAL_ABILITIES:
            warnings.append(
                f"Attack '{attack.attack_name}' refers to an ability that was not found"
            )

    return warnings


# ── Import ──────────────────────────────────────────────────────────

def import_creature_statblock(
    text: str,
    fmt: Union[StatblockFormat, str] = StatblockFormat.DOLMENWOOD,
    storage_api: Optional[StorageAPI] = None,
) -> ImportResult:
    """Build the record and, when a storage API is given, save it as a new creature.

    A creature already stored under the same key is replaced, with a warning.
    """
    record = build_creature_record(text, fmt)
    key = creature_key(record.name)
    warnings = validate_creature(record, ac_found=has_ac_token(text, fmt))

    saved = False
    if storage_api is not None:
        if storage_api.get_creature(key) is not None:
            warnings.append(f"Replaced existing creature stored as {key}")
        storage_api.save_creature(key, to_actor_data(record))
        saved = True
        print(f"[CreatureImport] Saved {record.name} as {key}")

    return ImportResult(key=key, record=record, warnings=warnings, saved=saved)
