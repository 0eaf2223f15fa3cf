# creature_import/attack_parser.py
"""
Attack text → list of AttackEntry.

Dolmenwood attack lines mix three shapes that share one line:

    2 claws (+3, 1d4) and bite (+3, 1d6 + poison) or gaze (paralysis)
    ^ to-hit attack       ^ to-hit attack              ^ effect-only
    breath (2d6, save versus blast)
    ^ damage-only

They are matched in three ordered passes over the same text. Each pass claims
the characters it matched, so later passes only ever see unclaimed text.

OSE attack lines are simpler: "2 x claw (1d4), bite (1d8) or breath (see below)".
They are split into segments at top-level separators and each segment is parsed
on its own.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from creature_import.creature import (
    ATTACK_GROUPS, NO_DAMAGE, AttackEntry, AttackType,
)
from creature_import.enrich import (
    SAVE_REF_RE, capitalize, capitalize_words, enrich_save_links,
)


WEAPON_TEMPLATE_DAMAGE = "1d6"
WEAPON_TEMPLATE_EFFECT = "(Replace the damage formula with the weapon damage)"

# Separator markers substituted into the text before matching.
_OR = "|"
_AND = "&"


# ── Dolmenwood patterns ─────────────────────────────────────────────

_NAME = r"[a-zA-Z][a-zA-Z ]{0,60}?"

_TO_HIT_RE = re.compile(
    rf'(\d+)?\s?({_NAME})\s?\(([+-]?\d+),\s*(.{{1,200}}?)\)'
)
_DAMAGE_ONLY_RE = re.compile(
    rf'(\d+)?\s?({_NAME})\s?\((\d+d\d+(?:[+-]\d+)?)\s*(?:,\s*(.{{1,200}}?))?\)'
)
_EFFECT_ONLY_RE = re.compile(rf'({_NAME})\s?\(([^,)]{{1,200}})\)')

_DICE_PLUS_TEXT_RE = re.compile(r'^(\d+d\d+(?:[+-]\d+)?)\s*\+\s*([a-zA-Z].*)$')
_ALT_DAMAGE_RE = re.compile(r'^(.+?)\s+or\s+(.+)$', re.IGNORECASE)
_MOUNTED_RE = re.compile(r',?\s*when mounted', re.IGNORECASE)
_RANGE_RE = re.compile(
    r",?\s*range\s+(\d+)[′']\s*/\s*(\d+)[′']\s*/\s*(\d+)[′']", re.IGNORECASE
)
_SIGNED_INT_RE = re.compile(r'^[+-]?\d+$')


@dataclass
class _Draft:
    """Mutable attack under construction; frozen into AttackEntry at the end."""
    pos: int
    name: str
    num_attacks: int = 1
    bonus: int = 0
    damage: str = NO_DAMAGE
    effect: str = ""
    attack_type: AttackType = AttackType.ATTACK
    ranges: tuple[int, int, int] = (0, 0, 0)
    group: str = "a"

    def freeze(self) -> AttackEntry:
        short, medium, long_ = self.ranges
        return AttackEntry(
            attack_name=self.name,
            num_attacks=self.num_attacks,
            attack_bonus=self.bonus,
            attack_damage=self.damage,
            attack_effect=self.effect,
            attack_type=self.attack_type,
            range_short=short,
            range_medium=medium,
            range_long=long_,
            attack_group=self.group,
        )


class _ClaimedText:
    """Attack text plus the spans already claimed by an earlier pass.

    Claimed spans are blanked with spaces so character positions never shift.
    """

    def __init__(self, text: str):
        self.text = text
        self._chars = list(text)

    def claim(self, start: int, end: int) -> None:
        for i in range(start, end):
            self._chars[i] = " "

    @property
    def unclaimed(self) -> str:
        return "".join(self._chars)


def clean_attack_name(name: str) -> str:
    """Strip leading 'or'/'and' left over from the separators; capitalize."""
    name = re.sub(r'^(?:or|and)\s+', '', name.strip(), flags=re.IGNORECASE).strip()
    return capitalize(name)


def _join_effect(effect: str, extra: str) -> str:
    return f"{effect}\n{extra}" if effect else extra


def _mark_separators(text: str) -> str:
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'[\[\]]', '', text)
    text = re.sub(r'\)\s*,?\s+or\s+', f') {_OR} ', text, flags=re.IGNORECASE)
    text = re.sub(r'\)\s*,?\s+and\s+', f') {_AND} ', text, flags=re.IGNORECASE)
    return re.sub(r'^\s*(?:or|and)\s+', '', text, flags=re.IGNORECASE)


def split_to_hit_clause(raw: str) -> tuple[str, str, tuple[int, int, int]]:
    """Split the text after '+N,' into (damage, effect, ranges).

    '1d6, save versus hold'      → ('1d6', '[save versus hold](save:hold)', ...)
    '1d3 + poison'               → ('1d3', 'poison', ...)
    '2 or 4'                     → ('2', 'Alternative damage: 4 (check abilities)', ...)
    '1d8, when mounted'          → ('1d8', 'When mounted', ...)
    "1d6, range 20'/40'/60'"     → ('1d6', '', (20, 40, 60))
    """
    raw = raw.strip()
    damage, effect = raw, ""

    m = SAVE_REF_RE.search(raw)
    if m and m.start() > 0:
        damage = re.sub(r'[,+\s]+$', '', raw[:m.start()].strip())
        effect = enrich_save_links(raw[m.start():].strip())

    m = _DICE_PLUS_TEXT_RE.match(damage)
    if m:
        damage = m.group(1).strip()
        effect = _join_effect(effect, m.group(2).strip())

    m = _ALT_DAMAGE_RE.match(damage)
    if m:
        damage = m.group(1).strip()
        effect = _join_effect(
            effect, f"Alternative damage: {m.group(2).strip()} (check abilities)"
        )

    m = _MOUNTED_RE.search(damage)
    if m:
        damage = damage[:m.start()].strip()
        effect = _join_effect(effect, "When mounted")

    ranges = (0, 0, 0)
    m = _RANGE_RE.search(damage) or _RANGE_RE.search(effect)
    if m:
        ranges = (int(m.group(1)), int(m.group(2)), int(m.group(3)))
        damage = _RANGE_RE.sub('', damage).strip()
        effect = _RANGE_RE.sub('', effect).strip()

    return damage, capitalize(effect), ranges


def _assign_groups(drafts: list[_Draft], marked: str) -> None:
    """Same letter across 'and'/comma, next letter after each 'or'."""
    drafts.sort(key=lambda d: d.pos)
    group_idx = 0
    for i, draft in enumerate(drafts):
        draft.group = ATTACK_GROUPS[group_idx % len(ATTACK_GROUPS)]
        if i + 1 < len(drafts) and _OR in marked[draft.pos:drafts[i + 1].pos]:
            group_idx += 1


def parse_attacks(attack_text: str) -> list[AttackEntry]:
    """Parse Dolmenwood attack text (the part after 'Att')."""
    if not attack_text.strip() or attack_text.strip() == NO_DAMAGE:
        return []

    marked = _mark_separators(attack_text)
    claimed = _ClaimedText(marked)
    drafts: list[_Draft] = []

    # Pass 1: [N] name (+bonus, damage and/or effect)
    for m in _TO_HIT_RE.finditer(claimed.unclaimed):
        damage, effect, ranges = split_to_hit_clause(m.group(4))
        drafts.append(_Draft(
            pos=m.start(),
            name=clean_attack_name(m.group(2)),
            num_attacks=max(1, int(m.group(1))) if m.group(1) else 1,
            bonus=int(m.group(3)),
            damage=damage,
            effect=effect,
            ranges=ranges,
        ))
        claimed.claim(m.start(), m.end())

    # Pass 2: [N] name (dice[, extra]) with no roll bonus
    for m in _DAMAGE_ONLY_RE.finditer(claimed.unclaimed):
        drafts.append(_Draft(
            pos=m.start(),
            name=clean_attack_name(m.group(2)),
            num_attacks=max(1, int(m.group(1))) if m.group(1) else 1,
            damage=m.group(3).strip(),
            effect=capitalize(enrich_save_links((m.group(4) or "").strip())),
            attack_type=AttackType.SAVE,
        ))
        claimed.claim(m.start(), m.end())

    # Pass 3: name (effect), a single clause with no comma
    for m in _EFFECT_ONLY_RE.finditer(claimed.unclaimed):
        name = clean_attack_name(m.group(1))
        inner = m.group(2).strip()
        if name.lower() == "weapon" and _SIGNED_INT_RE.match(inner):
            drafts.append(_Draft(
                pos=m.start(),
                name=name,
                bonus=int(inner),
                damage=WEAPON_TEMPLATE_DAMAGE,
                effect=WEAPON_TEMPLATE_EFFECT,
            ))
        else:
            drafts.append(_Draft(
                pos=m.start(),
                name=name,
                effect=capitalize(enrich_save_links(inner)),
                attack_type=AttackType.SAVE,
            ))

    _assign_groups(drafts, marked)
    return [d.freeze() for d in drafts]


# ── OSE attacks ─────────────────────────────────────────────────────

_OSE_SEGMENT_RE = re.compile(r'^(?:(\d+)\s*x\s*)?(.+?)\s*(?:\((.+?)\))?\s*$', re.IGNORECASE)
_OSE_DICE_RE = re.compile(r'^(\d+d\d+(?:\s*[+*x-]\s*\d+)*)', re.IGNORECASE)
_HAS_DICE_RE = re.compile(r'\d+d\d+', re.IGNORECASE)


def split_top_level(text: str) -> list[tuple[str, Optional[str]]]:
    """Split on commas, ' or ' and ' and ' outside parentheses.

    Returns (segment, separator_after) pairs; the last separator is None.

    'claw (1d4, bleed) or bite (1d6)' → [('claw (1d4, bleed)', 'or'), ('bite (1d6)', None)]
    """
    segments: list[tuple[str, Optional[str]]] = []
    current: list[str] = []
    depth = 0
    i = 0

    while i < len(text):
        ch = text[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth = max(0, depth - 1)

        if depth == 0:
            if ch == ',':
                segments.append((''.join(current).strip(), ','))
                current = []
                i += 1
                continue
            matched_word = None
            for word in ("or", "and"):
                token = f" {word} "
                if text[i:i + len(token)].lower() == token:
                    matched_word = word
                    break
            if matched_word:
                segments.append((''.join(current).strip(), matched_word))
                current = []
                i += len(matched_word) + 1
                continue

        current.append(ch)
        i += 1

    tail = ''.join(current).strip()
    if tail:
        segments.append((tail, None))
    return segments


def _parse_ose_bracket(bracket: str) -> tuple[str, str, AttackType]:
    """Bracket content → (damage, effect, attack type)."""
    if not bracket:
        return NO_DAMAGE, "", AttackType.ATTACK
    if not _HAS_DICE_RE.search(bracket):
        return NO_DAMAGE, enrich_save_links(capitalize(bracket)), AttackType.SAVE

    m = _OSE_DICE_RE.match(bracket)
    if not m:
        return re.sub(r'\s+', '', bracket), "", AttackType.ATTACK

    damage = re.sub(r'x', '*', re.sub(r'\s+', '', m.group(1)), flags=re.IGNORECASE)
    remaining = re.sub(r'^[,+]\s*', '', bracket[m.end():].strip())
    effect = enrich_save_links(capitalize(remaining)) if remaining else ""
    return damage, effect, AttackType.ATTACK


def parse_ose_attacks(attack_text: str, attack_bonus: int = 0) -> list[AttackEntry]:
    """Parse OSE attack text (between 'Att' and 'THAC0').

    The single THAC0-derived bonus applies to every rolled attack; effect-only
    attacks are save-type and carry no bonus.
    """
    attack_text = re.sub(r'[\[\]]', '', attack_text).strip()
    if not attack_text or attack_text in (NO_DAMAGE, "-"):
        return []

    attacks: list[AttackEntry] = []
    group_idx = 0

    for segment, sep in split_top_level(attack_text):
        if segment:
            m = _OSE_SEGMENT_RE.match(segment)
            if m:
                damage, effect, attack_type = _parse_ose_bracket((m.group(3) or "").strip())
                name = capitalize_words(m.group(2).strip())
                attacks.append(AttackEntry(
                    attack_name=name,
                    num_attacks=max(1, int(m.group(1))) if m.group(1) else 1,
                    attack_bonus=attack_bonus if attack_type is AttackType.ATTACK else 0,
                    attack_damage=damage,
                    attack_effect=effect,
                    attack_type=attack_type,
                    attack_group=ATTACK_GROUPS[group_idx % len(ATTACK_GROUPS)],
                ))
        if sep == "or":
            group_idx += 1

    return attacks
