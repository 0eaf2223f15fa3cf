# creature_import/normalize.py
from __future__ import annotations

import re

from creature_import.exceptions import StructuralError


# Field separator on Dolmenwood type lines: "Small fairy—sentient—chaotic"
DASH = "—"

MIN_STATBLOCK_LINES = 4


def _unify_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(text: str) -> list[str]:
    """Trimmed, non-empty lines."""
    lines = [line.strip() for line in text.split("\n")]
    return [line for line in lines if line]


def normalize(text: str) -> list[str]:
    """Dolmenwood text: en-dashes and double hyphens become the em-dash separator."""
    text = _unify_line_endings(text)
    text = text.replace("–", DASH)
    text = text.replace("--", DASH)
    return split_lines(text)


def normalize_ose(text: str) -> list[str]:
    """OSE text: plain quotes, ' x ' for the multiplication sign, plain hyphens."""
    text = _unify_line_endings(text)
    text = re.sub(r'[“”]', '"', text)
    text = re.sub(r"[‘’′`]", "'", text)
    text = re.sub(r'\s*×\s*', ' x ', text)
    text = re.sub(r'[‑–—]', '-', text)
    return split_lines(text)


def require_min_lines(lines: list[str]) -> None:
    if len(lines) < MIN_STATBLOCK_LINES:
        raise StructuralError(
            f"Statblock too short: found {len(lines)} non-empty line(s), need at "
            f"least {MIN_STATBLOCK_LINES} (name, type or stats line, and stats)"
        )
