"""
Stat aggregation for weapon listings.

Collects the displayed ("final") stats of a listing and sums its modifier
lines into one total record plus a rune-only record, so the rune optimizer
can strip the runes currently socketed and try alternatives.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Optional

from weapon_value.result import EvaluationFailure, FailureReason, Ok, Result, failure
from weapon_value.weapon_dps.constants import FALLBACK_SOCKET_COUNT
from weapon_value.weapon_dps.mod_extractor import extract_all, parse_number, parse_range
from weapon_value.weapon_dps.models import (
    ELEMENTS,
    FinalStats,
    ItemStats,
    ModFragment,
    ModifierRecord,
    WeaponListing,
)

logger = logging.getLogger(__name__)

NUM_SOCKETS_RE = re.compile(r"numSockets(\d+)")
RUNE_SOCKET_RE = re.compile(r"socket--rune\b")


def parse_socket_count(socket_text: Optional[str]) -> Optional[int]:
    """Socket count from raw socket markup.

    Prefers a ``numSockets<N>`` class token; otherwise counts
    ``socket--rune`` markers. Returns None when neither is present.
    """
    if not socket_text:
        return None
    match = NUM_SOCKETS_RE.search(socket_text)
    if match:
        return int(match.group(1))
    rune_sockets = len(RUNE_SOCKET_RE.findall(socket_text))
    if rune_sockets > 0:
        return rune_sockets
    return None


def resolve_socket_count(
    listing: WeaponListing, fallback: int = FALLBACK_SOCKET_COUNT
) -> int:
    """Explicit count, else parsed markup, else the fallback policy value."""
    if listing.socket_count is not None:
        if isinstance(listing.socket_count, bool) or not isinstance(listing.socket_count, int):
            raise TypeError("socket_count must be an int")
        if listing.socket_count < 0:
            raise ValueError(f"socket_count must be >= 0, got {listing.socket_count}")
        return listing.socket_count

    parsed = parse_socket_count(listing.socket_text)
    if parsed is not None:
        return parsed

    logger.debug(
        "Socket count undeterminable for %s, assuming %d",
        listing.item_id or "listing", fallback,
    )
    return fallback


def sum_fragments(fragments: Iterable[ModFragment], runes_only: bool = False) -> ModifierRecord:
    return extract_all(
        fragment.text for fragment in fragments
        if not runes_only or fragment.is_rune
    )


def _elemental_ranges(
    texts: Dict[str, str], mods: ModifierRecord
) -> Dict[str, float]:
    ranges: Dict[str, float] = {}
    for element in ELEMENTS:
        parsed = parse_range(texts.get(element))
        if parsed is None:
            # Nothing displayed separately: only flat modifiers contribute
            parsed = mods.flat_range(element)
        ranges[f"{element}_min"], ranges[f"{element}_max"] = parsed
    return ranges


def parse_final_stats(
    listing: WeaponListing, mods: ModifierRecord
) -> Result[FinalStats, EvaluationFailure]:
    """Displayed physical range, attack rate and elemental ranges."""
    phys = parse_range(listing.physical_damage_text)
    if phys is None:
        return failure(FailureReason.MISSING_DATA, "no physical damage range")

    aps = parse_number(listing.attacks_per_second_text)
    if aps is None:
        return failure(FailureReason.MISSING_DATA, "no attacks per second")

    return Ok(FinalStats(
        phys_min=phys[0],
        phys_max=phys[1],
        aps=aps,
        **_elemental_ranges(listing.elemental_damage_texts, mods),
    ))


def aggregate(
    listing: WeaponListing, fallback_socket_count: int = FALLBACK_SOCKET_COUNT
) -> Result[ItemStats, EvaluationFailure]:
    """
    Aggregate one listing into final stats and modifier totals.

    Returns Err(MISSING_DATA) for listings without a damage range or
    attack rate; those are not weapons as far as DPS is concerned.

    Raises:
        ValueError: if an explicit socket count is negative.
    """
    socket_count = resolve_socket_count(listing, fallback_socket_count)

    quality = parse_number(listing.quality_text) or 0.0
    mods = sum_fragments(listing.fragments).with_quality(quality)
    rune_mods = sum_fragments(listing.fragments, runes_only=True)

    final = parse_final_stats(listing, mods)
    if final.is_err():
        logger.debug("Skipping %s: %s", listing.item_id or "listing", final.error)
        return final

    return Ok(ItemStats(
        final=final.unwrap(),
        mods=mods,
        rune_mods=rune_mods,
        rune_slot_count=socket_count,
        crit_chance_pct=parse_number(listing.critical_chance_text),
    ))
