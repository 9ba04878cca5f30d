"""
Weapon DPS formulas.

Forward: base weapon stats + modifiers -> displayed stats and DPS.
Reverse: displayed stats + known modifiers -> base weapon stats.

Order of operations (forward):
1. Physical = base + all flat physical (affixes, runes)
2. x (1 + increased physical%)
3. x (1 + quality%), applied last and independent of affix percentages
4. Elemental = base + flat; weapons have no local elemental scaling
5. APS = base APS x (1 + increased attack speed%)

The reverse transform is the closed-form inverse of steps 1-5.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from weapon_value.result import EvaluationFailure, FailureReason, Ok, Result, failure
from weapon_value.weapon_dps.constants import (
    DEFAULT_CRIT_CHANCE_PCT,
    DEFAULT_CRIT_MULTIPLIER,
    ROUND_TRIP_TOLERANCE,
)
from weapon_value.weapon_dps.models import (
    ELEMENTS,
    BaseStats,
    DpsResult,
    FinalStats,
    ModifierRecord,
    average,
)

logger = logging.getLogger(__name__)


def phys_scale(mods: ModifierRecord) -> float:
    """Combined multiplier of increased physical damage and quality."""
    return (1 + mods.increased_phys_pct / 100) * (1 + mods.quality_pct / 100)


def attack_speed_scale(mods: ModifierRecord) -> float:
    return 1 + mods.increased_attack_speed_pct / 100


def crit_factor(crit_chance_pct: float, crit_multiplier: float) -> float:
    return 1 + (crit_chance_pct / 100) * (crit_multiplier - 1)


def calculate_dps(
    base: BaseStats,
    mods: ModifierRecord,
    crit_chance_pct: float = DEFAULT_CRIT_CHANCE_PCT,
    crit_multiplier: float = DEFAULT_CRIT_MULTIPLIER,
) -> DpsResult:
    """
    Forward formula: DPS of ``base`` with ``mods`` applied.

    ``total_dps`` is the figure the trade site displays (no crit);
    ``total_dps_with_crit`` folds in the expected crit bonus.
    """
    flat_min, flat_max = mods.flat_range("phys")
    scale = phys_scale(mods)
    phys_min = (base.phys_min + flat_min) * scale
    phys_max = (base.phys_max + flat_max) * scale

    elemental: Dict[str, float] = {}
    for element in ELEMENTS:
        base_min, base_max = base.element_range(element)
        add_min, add_max = mods.flat_range(element)
        elemental[f"{element}_min"] = base_min + add_min
        elemental[f"{element}_max"] = base_max + add_max

    aps = base.aps * attack_speed_scale(mods)

    physical_dps = average(phys_min, phys_max) * aps
    elemental_dps = sum(
        average(elemental[f"{e}_min"], elemental[f"{e}_max"]) for e in ELEMENTS
    ) * aps
    total_dps = physical_dps + elemental_dps

    return DpsResult(
        phys_min=phys_min,
        phys_max=phys_max,
        aps=aps,
        physical_dps=physical_dps,
        elemental_dps=elemental_dps,
        total_dps=total_dps,
        total_dps_with_crit=total_dps * crit_factor(crit_chance_pct, crit_multiplier),
        **elemental,
    )


def displayed_dps(
    final: FinalStats,
    crit_chance_pct: float = DEFAULT_CRIT_CHANCE_PCT,
    crit_multiplier: float = DEFAULT_CRIT_MULTIPLIER,
) -> DpsResult:
    """DPS of stats that are already fully modified."""
    as_base = BaseStats(**final.to_dict())
    return calculate_dps(as_base, ModifierRecord(), crit_chance_pct, crit_multiplier)


def reverse_engineer_base(
    final: FinalStats, mods: ModifierRecord
) -> Result[BaseStats, EvaluationFailure]:
    """
    Solve for the base weapon that produces ``final`` under ``mods``.

    Physical:  base = final / [(1 + inc%) x (1 + quality%)] - flat
    Elemental: base = final - flat
    APS:       base = final / (1 + inc attack speed%)

    Returns Err(INCONSISTENT_MODIFIERS) when a scale is not positive
    (e.g. -100% increased physical damage), since no base exists then.
    """
    scale = phys_scale(mods)
    if not scale > 0:
        return failure(
            FailureReason.INCONSISTENT_MODIFIERS,
            f"physical scale {scale:.4f} is not positive",
        )
    aps_scale = attack_speed_scale(mods)
    if not aps_scale > 0:
        return failure(
            FailureReason.INCONSISTENT_MODIFIERS,
            f"attack speed scale {aps_scale:.4f} is not positive",
        )

    flat_min, flat_max = mods.flat_range("phys")
    elemental: Dict[str, float] = {}
    for element in ELEMENTS:
        final_min, final_max = final.element_range(element)
        add_min, add_max = mods.flat_range(element)
        elemental[f"{element}_min"] = final_min - add_min
        elemental[f"{element}_max"] = final_max - add_max

    return Ok(BaseStats(
        phys_min=final.phys_min / scale - flat_min,
        phys_max=final.phys_max / scale - flat_max,
        aps=final.aps / aps_scale,
        **elemental,
    ))


@dataclass(frozen=True)
class RoundTripCheck:
    """Reverse-then-forward verification of a listing's stats."""
    base: BaseStats
    reconstructed: DpsResult
    matches: bool
    deviations: Dict[str, float] = field(default_factory=dict)


def reverse_and_verify(
    final: FinalStats,
    mods: ModifierRecord,
    tolerance: float = ROUND_TRIP_TOLERANCE,
) -> Result[RoundTripCheck, EvaluationFailure]:
    """Reverse-engineer the base, re-apply ``mods`` and compare to ``final``."""
    reversed_base = reverse_engineer_base(final, mods)
    if reversed_base.is_err():
        return reversed_base

    base = reversed_base.unwrap()
    reconstructed = calculate_dps(base, mods)
    rebuilt = reconstructed.final_stats.to_dict()
    deviations = {
        name: abs(rebuilt[name] - expected)
        for name, expected in final.to_dict().items()
    }
    matches = all(d < tolerance for d in deviations.values())
    if not matches:
        logger.debug("Round trip mismatch: %s", deviations)

    return Ok(RoundTripCheck(
        base=base,
        reconstructed=reconstructed,
        matches=matches,
        deviations=deviations,
    ))
