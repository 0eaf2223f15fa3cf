# creature_import/creature.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from creature_import.lookups import Alignment, Intelligence, MonsterType, Size


ATTACK_GROUPS = ("a", "b", "c", "d", "e", "f")
NO_DAMAGE = "—"


class AttackType(str, Enum):
    ATTACK = "attack"
    SAVE = "save"


class CustomEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        if is_dataclass(obj):
            return obj.to_dict()
        return super().default(obj)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class _Record:
    """Mixin: camelCase dict export, matching the host system's field names."""

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(f.name): _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class AttackEntry(_Record):
    attack_name: str
    num_attacks: int = 1
    attack_bonus: int = 0
    attack_damage: str = NO_DAMAGE
    attack_effect: str = ""
    attack_type: AttackType = AttackType.ATTACK
    range_short: int = 0
    range_medium: int = 0
    range_long: int = 0
    attack_group: str = "a"

    def __post_init__(self):
        if self.num_attacks < 1:
            raise ValueError(f"num_attacks must be >= 1, got {self.num_attacks}")


@dataclass(frozen=True)
class AbilityEntry(_Record):
    name: str
    description: str = ""


@dataclass(frozen=True)
class Saves(_Record):
    doom: int = 10
    ray: int = 10
    hold: int = 10
    blast: int = 10
    spell: int = 10


@dataclass(frozen=True)
class Movement(_Record):
    swim: int = 0
    fly: int = 0
    climb: int = 0
    burrow: int = 0


@dataclass(frozen=True)
class CreatureRecord(_Record):
    name: str
    description: str = ""
    size: Size = Size.MEDIUM
    monster_type: MonsterType = MonsterType.MORTAL
    intelligence: Intelligence = Intelligence.ANIMAL
    alignment: Alignment = Alignment.NEUTRAL
    level: int = 1
    ac: int = 10
    hp_dice: str = "1d8"
    hp_value: int = 4
    saves: Saves = field(default_factory=Saves)
    attacks: Tuple[AttackEntry, ...] = ()
    speed: int = 40
    movement: Movement = field(default_factory=Movement)
    morale: int = 7
    xp_award: int = 0
    encounters: str = ""
    lair_chance: int = 0
    treasure_type: str = ""
    behaviour: str = ""
    speech: str = ""
    possessions: str = ""
    special_abilities: Tuple[AbilityEntry, ...] = ()


def to_actor_data(record: CreatureRecord) -> Dict[str, Any]:
    """Shape a record the way the host stores a new Creature entity."""
    data = record.to_dict()
    system = {
        "level": data["level"],
        "hp": {"value": data["hpValue"], "max": data["hpValue"]},
        "ac": data["ac"],
        "saves": data["saves"],
        "speed": data["speed"],
        "size": data["size"],
        "alignment": data["alignment"],
        "monsterType": data["monsterType"],
        "intelligence": data["intelligence"],
        "hpDice": data["hpDice"],
        "attacks": data["attacks"],
        "morale": data["morale"],
        "xpAward": data["xpAward"],
        "encounters": data["encounters"],
        "lairChance": data["lairChance"],
        "movement": data["movement"],
        "treasureType": data["treasureType"],
        "description": data["description"] or "",
        "specialAbilities": data["specialAbilities"],
        "behaviour": data["behaviour"],
        "speech": data["speech"],
        "possessions": data["possessions"],
    }
    return {"name": record.name, "type": "Creature", "system": system}
