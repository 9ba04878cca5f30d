"""
Modifier text extraction.

Turns trade-site modifier lines such as "Adds 24 to 40 Physical Damage" or
"18% increased Physical Damage" into ModifierRecord instances. Recognised
affixes live in a fixed table of (pattern, extractor) pairs; adding a new
affix means adding one entry to ``MOD_PATTERNS``.

Unrecognised lines are normal (life, resistances, ...) and produce an empty
record rather than an error.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional, Tuple

from weapon_value.weapon_dps.models import ModifierRecord

logger = logging.getLogger(__name__)

NUMBER = r"(\d+(?:\.\d+)?)"
RANGE_SEPARATOR = r"\s*(?:-|to)\s*"

NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?")
RANGE_RE = re.compile(NUMBER + RANGE_SEPARATOR + NUMBER, re.IGNORECASE)

INCREASED_PHYS_RE = re.compile(
    NUMBER + r"\s*%\s*(increased|reduced)\s+Physical\s+Damage", re.IGNORECASE
)
INCREASED_ATTACK_SPEED_RE = re.compile(
    NUMBER + r"\s*%\s*(increased|reduced)\s+Attack\s+Speed", re.IGNORECASE
)
# Attack speed granted to someone other than the wielder
OTHER_ENTITY_RE = re.compile(
    r"\b(?:companions?|minions?|all(?:y|ies))\b|\bhave\s+\d", re.IGNORECASE
)

Extractor = Callable[[re.Match, str], Optional[ModifierRecord]]


def parse_number(text: Optional[str]) -> Optional[float]:
    """First number in text like "+20%", "1.15" or "Quality: +20%".

    Returns None when the text holds no number.
    """
    if not text or not isinstance(text, str):
        return None
    match = NUMBER_RE.search(text)
    if not match:
        return None
    return float(match.group(0))


def parse_range(text: Optional[str]) -> Optional[Tuple[float, float]]:
    """Parse "289-521" or "24 to 40" into (min, max)."""
    if not text or not isinstance(text, str):
        return None
    match = RANGE_RE.search(text)
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


def _signed(value: str, direction: str) -> float:
    amount = float(value)
    return -amount if direction.lower() == "reduced" else amount


def _increased_phys(match: re.Match, line: str) -> Optional[ModifierRecord]:
    return ModifierRecord(increased_phys_pct=_signed(match.group(1), match.group(2)))


def _increased_attack_speed(match: re.Match, line: str) -> Optional[ModifierRecord]:
    if OTHER_ENTITY_RE.search(line):
        return None
    return ModifierRecord(
        increased_attack_speed_pct=_signed(match.group(1), match.group(2))
    )


def _flat_damage(damage_type: str) -> Extractor:
    def extract(match: re.Match, line: str) -> Optional[ModifierRecord]:
        return ModifierRecord(**{
            f"flat_{damage_type}_min": float(match.group(1)),
            f"flat_{damage_type}_max": float(match.group(2)),
        })
    return extract


def _flat_damage_re(label: str) -> re.Pattern:
    return re.compile(
        r"Adds\s+" + NUMBER + RANGE_SEPARATOR + NUMBER + r"\s+" + label + r"\s+Damage",
        re.IGNORECASE,
    )


MOD_PATTERNS: List[Tuple[re.Pattern, Extractor]] = [
    (INCREASED_PHYS_RE, _increased_phys),
    (INCREASED_ATTACK_SPEED_RE, _increased_attack_speed),
    (_flat_damage_re("Physical"), _flat_damage("phys")),
    (_flat_damage_re("Fire"), _flat_damage("fire")),
    (_flat_damage_re("Cold"), _flat_damage("cold")),
    (_flat_damage_re("Lightning"), _flat_damage("lightning")),
    (_flat_damage_re("Chaos"), _flat_damage("chaos")),
]


def extract_modifiers(line: Optional[str]) -> ModifierRecord:
    """Extract every recognised effect from one modifier line.

    Examples:
        "162% increased Physical Damage" -> increased_phys_pct=162
        "Adds 5 to 138 Fire Damage"      -> flat_fire_min=5, flat_fire_max=138
        "Companions have 10% increased Attack Speed" -> empty
    """
    record = ModifierRecord()
    if not line or not isinstance(line, str):
        return record

    text = line.strip()
    for pattern, extractor in MOD_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        extracted = extractor(match, text)
        if extracted is not None:
            record = record + extracted

    return record


def extract_all(lines: Iterable[Optional[str]]) -> ModifierRecord:
    """Sum the effects of many lines; several lines of one kind accumulate."""
    total = ModifierRecord()
    matched = 0
    for line in lines:
        record = extract_modifiers(line)
        if not record.is_empty():
            matched += 1
        total = total + record
    logger.debug("Extracted weapon modifiers from %d line(s)", matched)
    return total
