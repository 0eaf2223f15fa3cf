from creature_import.creature import (
    AbilityEntry, AttackEntry, AttackType, CreatureRecord, Movement, Saves, to_actor_data,
)
from creature_import.exceptions import AnchorNotFoundError, StatblockError, StructuralError
from creature_import.importer import (
    ImportResult, build_creature_record, creature_key, import_creature_statblock,
    validate_creature,
)
from creature_import.statblock_parser import StatblockFormat, parse_creature_statblock


__all__ = [
    "AbilityEntry",
    "AnchorNotFoundError",
    "AttackEntry",
    "AttackType",
    "CreatureRecord",
    "ImportResult",
    "Movement",
    "Saves",
    "StatblockError",
    "StatblockFormat",
    "StructuralError",
    "build_creature_record",
    "creature_key",
    "import_creature_statblock",
    "parse_creature_statblock",
    "to_actor_data",
    "validate_creature",
]
