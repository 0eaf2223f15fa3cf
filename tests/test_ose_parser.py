"""Tests for lib/creature_import/ose_parser.py"""

import os
import pytest
from creature_import.creature import AttackType, Movement, Saves
from creature_import.exceptions import AnchorNotFoundError
from creature_import.lookups import Alignment, Intelligence, MonsterType, Size
from creature_import.ose_parser import (
    combine_stats_lines, find_stats_line, parse_ac, parse_attack_bonus, parse_encounters,
    parse_hit_dice, parse_movement, parse_ose_statblock, parse_saves,
)

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def _load_fixture(name: str) -> str:
    with open(os.path.join(FIXTURES, name), encoding="utf-8") as f:
        return f.read()


COCKATRICE = """Cockatrice
AC 6, HD 5** (22hp), Att 1 x beak (1d6 + petrification) or 1 x touch (see below),
THAC0 15, MV 90' (30') / 180' (60') flying, SV D10 W11 P12 B13 S14 (5),
ML 7, AL Neutral, XP 425, NA 1d4 (2d4), TT D
Petrification: Anyone touched by a cockatrice must save versus paralysis or be turned to stone.
"""


# ── Full statblock (Gargoyle) ──────────────────────────────────────

class TestParseGargoyle:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.record = parse_ose_statblock(_load_fixture("gargoyle_ose.txt"))

    def test_name_and_description(self):
        assert self.record.name == "Gargoyle"
        assert self.record.description == (
            "Magical monsters carved from stone, often found guarding ruins."
        )

    def test_ascending_ac_in_brackets(self):
        assert self.record.ac == 14

    def test_hit_dice(self):
        assert self.record.level == 4
        assert self.record.hp_dice == "4d8"
        assert self.record.hp_value == 18

    def test_saves_map_to_doom_ray_hold_blast_spell(self):
        assert self.record.saves == Saves(doom=10, ray=11, hold=12, blast=13, spell=14)

    def test_movement_uses_encounter_rate(self):
        assert self.record.speed == 30
        assert self.record.movement == Movement(fly=50)

    def test_other_fields(self):
        assert self.record.morale == 11
        assert self.record.alignment is Alignment.CHAOTIC
        assert self.record.xp_award == 175
        assert self.record.encounters == "2d4"
        assert self.record.treasure_type == "C"
        assert self.record.lair_chance == 0

    def test_type_line_fields_keep_defaults(self):
        assert self.record.size is Size.MEDIUM
        assert self.record.monster_type is MonsterType.MORTAL
        assert self.record.intelligence is Intelligence.ANIMAL

    def test_attacks_share_thac0_bonus(self):
        claw, bite, horn = self.record.attacks
        assert claw.attack_name == "Claw"
        assert claw.num_attacks == 2
        assert claw.attack_damage == "1d3"
        assert bite.attack_damage == "1d6"
        assert horn.attack_damage == "1d4"
        assert {a.attack_bonus for a in self.record.attacks} == {4}

    def test_comma_separated_attacks_share_a_group(self):
        assert [a.attack_group for a in self.record.attacks] == ["a", "a", "a"]

    def test_abilities(self):
        immunity, unintelligent = self.record.special_abilities
        assert immunity.name == "Mundane Damage Immunity"
        assert immunity.description == "Can only be harmed by magical attacks."
        assert unintelligent.description == (
            "Will attack anyone who comes near, regardless of their alignment."
        )


class TestParseCockatrice:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.record = parse_ose_statblock(COCKATRICE)

    def test_descending_ac_converted(self):
        assert self.record.ac == 13

    def test_attack_bonus_from_thac0(self):
        beak = self.record.attacks[0]
        assert beak.attack_bonus == 4
        assert beak.attack_damage == "1d6"

    def test_or_starts_new_group(self):
        assert [a.attack_group for a in self.record.attacks] == ["a", "b"]

    def test_effect_resolved_from_ability(self):
        beak = self.record.attacks[0]
        assert beak.attack_effect == (
            "Anyone touched by a cockatrice must save versus paralysis or be turned to stone."
        )

    def test_unmatched_see_below(self):
        touch = self.record.attacks[1]
        assert touch.attack_type is AttackType.SAVE
        assert touch.attack_bonus == 0
        assert touch.attack_damage == "—"
        assert touch.attack_effect == "See special abilities"

    def test_alignment_and_defaults(self):
        assert self.record.alignment is Alignment.NEUTRAL
        assert self.record.morale == 7
        assert self.record.description == ""


# ── Field helpers ──────────────────────────────────────────────────

class TestFieldHelpers:
    def test_ac_2_is_17(self):
        assert parse_ac("AC 2") == 17

    def test_ac_bracket_wins(self):
        assert parse_ac("AC 7 [12]") == 12

    def test_negative_descending_ac(self):
        assert parse_ac("AC -1") == 20

    def test_ac_missing(self):
        assert parse_ac("HD 1") == 10

    def test_hit_dice_with_modifier_uses_average(self):
        assert parse_hit_dice("HD 3+1") == (3, "3d8+1", 14)

    def test_hit_dice_explicit_hp(self):
        assert parse_hit_dice("HD 2* (11hp)") == (2, "2d8", 11)

    def test_hit_dice_missing(self):
        assert parse_hit_dice("AC 5") == (1, "1d8", 4)

    def test_thac0_bracket(self):
        assert parse_attack_bonus("THAC0 17 [+2]") == 2

    def test_thac0_without_bracket(self):
        assert parse_attack_bonus("THAC0 12") == 7

    def test_thac0_missing(self):
        assert parse_attack_bonus("AC 5") == 0

    def test_saves(self):
        assert parse_saves("SV D8 W9 P10 B10 S12 (7)") == Saves(8, 9, 10, 10, 12)

    def test_movement_without_encounter_rate(self):
        assert parse_movement("MV 90'") == (30, Movement())

    def test_movement_swim(self):
        speed, movement = parse_movement("MV 60' (20') / 180' (60') swimming, SV D12")
        assert speed == 20
        assert movement.swim == 60
        assert movement.fly == 0

    def test_movement_missing(self):
        assert parse_movement("AC 5") == (40, Movement())

    def test_encounters_prefers_lair_number(self):
        assert parse_encounters("NA 2d4 (3d10)") == "3d10"
        assert parse_encounters("NA 1d6, TT C") == "1d6"
        assert parse_encounters("AC 5") == ""


class TestStatsLines:
    def test_find_stats_line_skips_name(self):
        assert find_stats_line(["AC Ghoul", "Pale.", "AC 6 [13], HD 2*"]) == 2

    def test_missing_stats_line(self):
        with pytest.raises(AnchorNotFoundError) as exc:
            parse_ose_statblock("Ghoul\nPale.\nHungry.\nAlways hungry.")
        assert "AC" in str(exc.value)

    def test_combine_joins_hyphen_breaks(self):
        lines = ["Ogre", "AC 5 [14], HD 4+1, Att 1 x cl-", "ub (3d6), THAC0 15", "▶ Big: Very."]
        combined, ability_start = combine_stats_lines(lines, 1)
        assert combined == "AC 5 [14], HD 4+1, Att 1 x club (3d6), THAC0 15"
        assert ability_start == 3

    def test_plain_ability_line_ends_stats(self):
        lines = ["Ogre", "AC 5 [14], HD 4+1", "ML 10", "Strong: Very."]
        assert combine_stats_lines(lines, 1) == ("AC 5 [14], HD 4+1 ML 10", 3)
