"""
Rune configuration optimizer.

Finds the rune assignment that maximizes total DPS for a weapon. The
search is exhaustive: capped runes (the single-use flat elemental runes in
the default catalog) are each tried at every allowed count, and whatever
sockets remain are split across the uncapped runes in every proportion.
For the default catalog that is 4 x S candidates at most, so no heuristic
search is needed.
"""
from __future__ import annotations

import logging
from itertools import product
from typing import Iterator, Optional, Tuple

from weapon_value.result import EvaluationFailure, FailureReason, Ok, Result, failure
from weapon_value.weapon_dps.constants import DEFAULT_CRIT_CHANCE_PCT, DEFAULT_CRIT_MULTIPLIER
from weapon_value.weapon_dps.formulas import calculate_dps
from weapon_value.weapon_dps.models import (
    BaseStats,
    DpsResult,
    ModifierRecord,
    RuneConfiguration,
    RuneOptimization,
)
from weapon_value.weapon_dps.rune_catalog import DEFAULT_RUNE_CATALOG, RuneCatalog

logger = logging.getLogger(__name__)


def _check_sockets(sockets: int) -> None:
    if isinstance(sockets, bool) or not isinstance(sockets, int):
        raise TypeError(f"socket count must be an int, got {type(sockets).__name__}")
    if sockets < 0:
        raise ValueError(f"socket count must be >= 0, got {sockets}")


def _splits(total: int, parts: int) -> Iterator[Tuple[int, ...]]:
    """Every way to distribute ``total`` units over ``parts`` slots."""
    if parts == 0:
        yield ()
        return
    if parts == 1:
        yield (total,)
        return
    for first in range(total, -1, -1):
        for rest in _splits(total - first, parts - 1):
            yield (first,) + rest


def enumerate_configurations(
    catalog: RuneCatalog, sockets: int
) -> Iterator[RuneConfiguration]:
    """
    Yield every legal configuration for ``sockets`` sockets.

    Yields nothing for zero sockets.

    Raises:
        ValueError: for a negative socket count.
    """
    _check_sockets(sockets)
    if sockets == 0:
        return

    capped = catalog.capped
    uncapped = catalog.uncapped
    for capped_units in product(*(range(rune.max_units + 1) for rune in capped)):
        used = sum(capped_units)
        if used > sockets:
            continue
        units = {rune.id: n for rune, n in zip(capped, capped_units)}
        for split in _splits(sockets - used, len(uncapped)):
            units.update({rune.id: n for rune, n in zip(uncapped, split)})
            yield RuneConfiguration(
                tuple((rune.id, units.get(rune.id, 0)) for rune in catalog)
            )


class RuneOptimizer:
    """
    Searches rune configurations for the highest total DPS.

    Usage:
        optimizer = RuneOptimizer(DEFAULT_RUNE_CATALOG)
        result = optimizer.optimize(base, stats.non_rune_mods, sockets=2)
        if result.is_ok():
            best = result.unwrap()
            print(best.configuration.describe(optimizer.catalog), best.dps.total_dps)
    """

    def __init__(
        self,
        catalog: Optional[RuneCatalog] = None,
        crit_chance_pct: float = DEFAULT_CRIT_CHANCE_PCT,
        crit_multiplier: float = DEFAULT_CRIT_MULTIPLIER,
    ):
        self.catalog = catalog if catalog is not None else DEFAULT_RUNE_CATALOG
        self.crit_chance_pct = crit_chance_pct
        self.crit_multiplier = crit_multiplier

    def apply(self, mods: ModifierRecord, configuration: RuneConfiguration) -> ModifierRecord:
        """Add each rune's per-unit effect times its unit count to ``mods``."""
        total = mods
        for rune_id, units in configuration.allocations:
            if units:
                total = total + self.catalog.get(rune_id).effect * units
        return total

    def evaluate(
        self, base: BaseStats, mods: ModifierRecord, configuration: RuneConfiguration
    ) -> DpsResult:
        return calculate_dps(
            base,
            self.apply(mods, configuration),
            self.crit_chance_pct,
            self.crit_multiplier,
        )

    def optimize(
        self, base: BaseStats, non_rune_mods: ModifierRecord, sockets: int
    ) -> Result[RuneOptimization, EvaluationFailure]:
        """
        Best configuration by non-crit total DPS.

        Ties keep the configuration enumerated first. Zero sockets returns
        Err(NO_RUNE_SOCKETS), which callers treat as "keep current DPS".
        """
        _check_sockets(sockets)
        if sockets == 0:
            return failure(FailureReason.NO_RUNE_SOCKETS, "weapon has no rune sockets")

        best: Optional[RuneOptimization] = None
        evaluated = 0
        for configuration in enumerate_configurations(self.catalog, sockets):
            evaluated += 1
            mods = self.apply(non_rune_mods, configuration)
            dps = calculate_dps(base, mods, self.crit_chance_pct, self.crit_multiplier)
            if best is None or dps.total_dps > best.dps.total_dps:
                best = RuneOptimization(
                    configuration=configuration,
                    modifiers=mods,
                    dps=dps,
                    candidates_evaluated=0,
                )

        if best is None:
            return failure(FailureReason.NO_RUNE_SOCKETS, "no rune configuration available")

        logger.debug(
            "Best of %d rune configurations for %d socket(s): %s (%.1f DPS)",
            evaluated, sockets, best.configuration.describe(self.catalog), best.dps.total_dps,
        )
        return Ok(RuneOptimization(
            configuration=best.configuration,
            modifiers=best.modifiers,
            dps=best.dps,
            candidates_evaluated=evaluated,
        ))
