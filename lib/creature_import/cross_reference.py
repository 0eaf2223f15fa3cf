# creature_import/cross_reference.py
"""
Resolve attack effects that point at a special ability.

    Att ... gaze (paralysis)            Paralysis (DC 15): Target is frozen ...
    Att ... bleat (command)             Commanding bleat (thrice a day): ...
    Att ... breath (see below)          Breath: Cone of fire ...

Lookup keys for each attack, in order:
    1. the effect text
    2. the attack name (the only key when the effect is empty or "see below")
    3. "<effect>ing <attack name>"
A key matches an ability whose name, minus any parenthetical qualifier,
equals it case-insensitively, allowing a trailing "s" on either side. The
first ability in list order wins.
"""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, Optional

from creature_import.creature import AbilityEntry, AttackEntry
from creature_import.enrich import capitalize


SEE_BELOW = "see below"
SEE_SPECIAL_ABILITIES = "See special abilities"

_QUALIFIER_RE = re.compile(r'\s*\(([^)]*)\)?')


def ability_base_name(name: str) -> str:
    """'Paralysis (DC 15)' → 'paralysis'."""
    return re.sub(r'\s*\([^)]*\)', '', name, count=1).strip().lower()


def _qualifier_prefix(name: str) -> str:
    m = _QUALIFIER_RE.search(name)
    return f"({capitalize(m.group(1))}) " if m else ""


def _keys_match(key: str, base: str) -> bool:
    return key == base or key + "s" == base or key == base + "s"


def lookup_keys(attack: AttackEntry) -> list[str]:
    effect = attack.attack_effect.strip().lower()
    name = attack.attack_name.strip().lower()
    if not effect or effect == SEE_BELOW:
        return [name]
    compound = (effect if effect.endswith("ing") else effect + "ing") + " " + name
    return [effect, name, compound]


def find_ability(attack: AttackEntry, abilities: Iterable[AbilityEntry]) -> Optional[AbilityEntry]:
    abilities = list(abilities)
    for key in lookup_keys(attack):
        for ability in abilities:
            if _keys_match(key, ability_base_name(ability.name)):
                return ability
    return None


def resolve_attack_effect(attack: AttackEntry, abilities: Iterable[AbilityEntry]) -> AttackEntry:
    """Return the attack with its effect replaced by the matching ability text.

    Unmatched "see below" effects become a pointer to the ability list; any
    other unmatched effect is returned unchanged.
    """
    ability = find_ability(attack, abilities)
    if ability is not None:
        effect = _qualifier_prefix(ability.name) + ability.description
        return replace(attack, attack_effect=effect)
    if attack.attack_effect.strip().lower() == SEE_BELOW:
        return replace(attack, attack_effect=SEE_SPECIAL_ABILITIES)
    return attack


def cross_reference(
    attacks: Iterable[AttackEntry], abilities: Iterable[AbilityEntry]
) -> list[AttackEntry]:
    abilities = list(abilities)
    return [resolve_attack_effect(a, abilities) for a in attacks]
