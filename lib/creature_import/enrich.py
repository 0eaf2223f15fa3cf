# creature_import/enrich.py
"""
Inline markup for descriptive text.

    "Save Versus Hold"  → "[Save Versus Hold](save:hold)"
    "1d6"               → "[[/r 1d6]]"

The markup is inert here; the presentation layer turns it into save buttons
and inline rolls.
"""
from __future__ import annotations

import re


SAVE_NAMES = ("doom", "ray", "hold", "blast", "spell")

SAVE_REF_RE = re.compile(
    r'\bSave\s+(?:vs\.?|Versus)\s+(Doom|Ray|Hold|Blast|Spell)\b', re.IGNORECASE
)
DICE_RE = re.compile(r'\b(\d+d\d+(?:[+-]\d+)?)\b')


def enrich_save_links(text: str) -> str:
    return SAVE_REF_RE.sub(
        lambda m: f"[{m.group(0)}](save:{m.group(1).lower()})", text
    )


def enrich_roll_formulas(text: str) -> str:
    return DICE_RE.sub(r'[[/r \1]]', text)


def enrich(text: str) -> str:
    """Full enrichment used on ability descriptions."""
    return enrich_roll_formulas(enrich_save_links(text))


# ── Text helpers ────────────────────────────────────────────────────

def title_case(text: str) -> str:
    """'BROOK GOBLIN' → 'Brook Goblin'."""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), text.lower())


def capitalize(text: str) -> str:
    """Upper-case the first character only; the rest is left alone."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def capitalize_words(text: str) -> str:
    """Upper-case each word's first letter without lowering the rest.

    'energy drain (level)' → 'Energy Drain (Level)'
    """
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), text)
