"""Tests for lib/creature_import/attack_parser.py"""

import time

import pytest
from creature_import.attack_parser import (
    WEAPON_TEMPLATE_DAMAGE, WEAPON_TEMPLATE_EFFECT, clean_attack_name, parse_attacks,
    parse_ose_attacks, split_to_hit_clause, split_top_level,
)
from creature_import.creature import AttackType


# ── Dolmenwood attacks ─────────────────────────────────────────────

class TestParseAttacks:
    def test_and_or_groups(self):
        attacks = parse_attacks("Bite (+3, 1d6) and Claw (+3, 1d4) or Tail Sting (+2, 1)")
        assert [a.attack_name for a in attacks] == ["Bite", "Claw", "Tail Sting"]
        assert [a.attack_group for a in attacks] == ["a", "a", "b"]
        assert attacks[2].attack_damage == "1"
        assert attacks[2].attack_bonus == 2

    def test_effect_only_attack(self):
        (gaze,) = parse_attacks("Gaze (paralysis for 1 turn)")
        assert gaze.attack_type is AttackType.SAVE
        assert gaze.attack_damage == "—"
        assert gaze.attack_effect == "Paralysis for 1 turn"
        assert gaze.attack_bonus == 0

    def test_count_and_negative_bonus(self):
        (claws,) = parse_attacks("3 claws (-1, 1d2)")
        assert claws.num_attacks == 3
        assert claws.attack_bonus == -1

    def test_damage_only_attack(self):
        (breath,) = parse_attacks("breath (2d6, save versus blast)")
        assert breath.attack_name == "Breath"
        assert breath.attack_type is AttackType.SAVE
        assert breath.attack_damage == "2d6"
        assert breath.attack_effect == "[save versus blast](save:blast)"

    def test_mixed_shapes_keep_text_order(self):
        attacks = parse_attacks(
            "gaze (charm) or 2 claws (+3, 1d4) and breath (3d6) or bite (+3, 1d8)"
        )
        assert [a.attack_name for a in attacks] == ["Gaze", "Claws", "Breath", "Bite"]
        assert [a.attack_group for a in attacks] == ["a", "b", "b", "c"]

    def test_comma_before_or(self):
        attacks = parse_attacks("claw (+1, 1d4), or bite (+1, 1d6)")
        assert [a.attack_group for a in attacks] == ["a", "b"]

    def test_groups_wrap_after_f(self):
        text = " or ".join(f"hit{chr(97 + i)} (+1, 1)" for i in range(7))
        attacks = parse_attacks(text)
        assert [a.attack_group for a in attacks] == ["a", "b", "c", "d", "e", "f", "a"]

    def test_generic_weapon_template(self):
        (weapon,) = parse_attacks("weapon (+2)")
        assert weapon.attack_name == "Weapon"
        assert weapon.attack_type is AttackType.ATTACK
        assert weapon.attack_bonus == 2
        assert weapon.attack_damage == WEAPON_TEMPLATE_DAMAGE
        assert weapon.attack_effect == WEAPON_TEMPLATE_EFFECT

    def test_square_brackets_ignored(self):
        (bite,) = parse_attacks("[bite (+2, 1d6)]")
        assert bite.attack_name == "Bite"
        assert bite.attack_damage == "1d6"

    @pytest.mark.parametrize("text", ["", "   ", "—"])
    def test_no_attacks(self, text):
        assert parse_attacks(text) == []


class TestLongAttackText:
    def test_unclosed_clause_after_long_name_run(self):
        start = time.perf_counter()
        assert parse_attacks("a " * 4000 + "(+1, ") == []
        assert time.perf_counter() - start < 2.0

    def test_long_attack_list(self):
        text = " or ".join(f"claw (+1, 1d{i % 12 + 1})" for i in range(1500))
        start = time.perf_counter()
        attacks = parse_attacks(text)
        assert time.perf_counter() - start < 2.0
        assert len(attacks) == 1500
        assert attacks[6].attack_group == "a"


class TestSplitToHitClause:
    def test_plain_damage(self):
        assert split_to_hit_clause("1d8") == ("1d8", "", (0, 0, 0))

    def test_save_reference(self):
        damage, effect, _ = split_to_hit_clause("1d6, save versus hold")
        assert damage == "1d6"
        assert effect == "[save versus hold](save:hold)"

    def test_save_reference_at_start_is_not_split(self):
        damage, effect, _ = split_to_hit_clause("Save Versus Doom")
        assert damage == "Save Versus Doom"
        assert effect == ""

    def test_dice_plus_text(self):
        assert split_to_hit_clause("1d6 + poison") == ("1d6", "Poison", (0, 0, 0))

    def test_alternative_damage(self):
        damage, effect, _ = split_to_hit_clause("2 or 4")
        assert damage == "2"
        assert effect == "Alternative damage: 4 (check abilities)"

    def test_when_mounted(self):
        assert split_to_hit_clause("1d8, when mounted") == ("1d8", "When mounted", (0, 0, 0))

    def test_range(self):
        assert split_to_hit_clause("1d6, range 20'/40'/60'") == ("1d6", "", (20, 40, 60))

    def test_range_with_prime(self):
        _, _, ranges = split_to_hit_clause("1d4, range 10′/20′/30′")
        assert ranges == (10, 20, 30)

    def test_effects_join_on_new_lines(self):
        damage, effect, _ = split_to_hit_clause("1d6 + poison, save versus doom")
        assert damage == "1d6"
        assert effect == "[save versus doom](save:doom)\npoison"

    def test_ranged_attack_entry(self):
        (bow,) = parse_attacks("longbow (+2, 1d6, range 70'/140'/210')")
        assert (bow.range_short, bow.range_medium, bow.range_long) == (70, 140, 210)
        assert bow.attack_damage == "1d6"


class TestCleanAttackName:
    def test_strips_separator_words(self):
        assert clean_attack_name("or bite") == "Bite"
        assert clean_attack_name("and  tail") == "Tail"

    def test_keeps_rest_of_name(self):
        assert clean_attack_name("tail Sting") == "Tail Sting"


# ── OSE attacks ────────────────────────────────────────────────────

class TestSplitTopLevel:
    def test_commas_inside_brackets_are_kept(self):
        assert split_top_level("claw (1d4, bleed) or bite (1d6)") == [
            ("claw (1d4, bleed)", "or"),
            ("bite (1d6)", None),
        ]

    def test_mixed_separators(self):
        segments = split_top_level("2 x claw (1d4), bite (1d8) and tail (1d6)")
        assert [sep for _, sep in segments] == [",", "and", None]

    def test_or_inside_brackets(self):
        assert split_top_level("weapon (1d6 or by weapon)") == [("weapon (1d6 or by weapon)", None)]


class TestParseOseAttacks:
    def test_bonus_applies_to_rolled_attacks(self):
        attacks = parse_ose_attacks("2 x claw (1d4), bite (1d8)", attack_bonus=3)
        assert [a.attack_bonus for a in attacks] == [3, 3]
        assert attacks[0].num_attacks == 2
        assert attacks[0].attack_type is AttackType.ATTACK

    def test_and_keeps_group(self):
        attacks = parse_ose_attacks("claw (1d4) and bite (1d6) or breath (see below)")
        assert [a.attack_group for a in attacks] == ["a", "a", "b"]

    def test_effect_only_is_save_type(self):
        (gaze,) = parse_ose_attacks("gaze (paralysis)", attack_bonus=2)
        assert gaze.attack_type is AttackType.SAVE
        assert gaze.attack_bonus == 0
        assert gaze.attack_damage == "—"
        assert gaze.attack_effect == "Paralysis"

    def test_damage_with_effect(self):
        (bite,) = parse_ose_attacks("bite (1d6 + poison)")
        assert bite.attack_damage == "1d6"
        assert bite.attack_effect == "Poison"

    def test_damage_multiplier(self):
        (slam,) = parse_ose_attacks("slam (1d6 x 2)")
        assert slam.attack_damage == "1d6*2"

    def test_save_link_in_effect(self):
        (sting,) = parse_ose_attacks("sting (1d4, save versus death)")
        assert sting.attack_effect == "Save versus death"
        (spit,) = parse_ose_attacks("spit (blinding, save versus ray)")
        assert spit.attack_effect == "Blinding, [save versus ray](save:ray)"

    def test_names_capitalized_per_word(self):
        (drain,) = parse_ose_attacks("energy drain (1d6)")
        assert drain.attack_name == "Energy Drain"

    def test_no_bracket(self):
        (touch,) = parse_ose_attacks("touch")
        assert touch.attack_name == "Touch"
        assert touch.attack_damage == "—"

    @pytest.mark.parametrize("text", ["", "—", "-", "[]"])
    def test_no_attacks(self, text):
        assert parse_ose_attacks(text) == []
