"""
Weapon value evaluator.

Pipeline facade used by page adapters and the HTTP API:

    listing -> aggregate -> reverse-engineer base -> optimize runes
            -> DPS per unit of price

Each step returns a Result; a listing that fails any required step is
reported with the failure's reason instead of raising.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from weapon_value.result import EvaluationFailure, FailureReason, Ok, Result
from weapon_value.weapon_dps.constants import (
    DEFAULT_CRIT_CHANCE_PCT,
    DEFAULT_CRIT_MULTIPLIER,
    DEFAULT_TOP_N,
    FALLBACK_SOCKET_COUNT,
)
from weapon_value.weapon_dps.formulas import displayed_dps, reverse_engineer_base
from weapon_value.weapon_dps.models import WeaponEvaluation, WeaponListing
from weapon_value.weapon_dps.rune_catalog import DEFAULT_RUNE_CATALOG, RuneCatalog
from weapon_value.weapon_dps.rune_optimizer import RuneOptimizer
from weapon_value.weapon_dps.stat_aggregator import aggregate

if TYPE_CHECKING:
    from weapon_value.config import Config

logger = logging.getLogger(__name__)


def dps_per_price(dps: float, price_amount: Optional[float]) -> Optional[float]:
    """DPS bought per unit of currency; None without a positive price."""
    if price_amount is None or not price_amount > 0:
        return None
    return dps / price_amount


def rank_by_value(
    evaluations: Iterable[WeaponEvaluation], limit: int = DEFAULT_TOP_N
) -> List[WeaponEvaluation]:
    """Best DPS-per-price first; listings without a price are left out."""
    priced = [e for e in evaluations if e.value_ratio is not None]
    priced.sort(key=lambda e: e.value_ratio, reverse=True)
    return priced[:max(limit, 0)]


class WeaponEvaluator:
    """
    Evaluates weapon listings.

    Usage:
        evaluator = WeaponEvaluator()
        result = evaluator.evaluate(listing)
        if result.is_ok():
            evaluation = result.unwrap()
            print(evaluation.best_dps, evaluation.value_ratio)
    """

    def __init__(
        self,
        catalog: Optional[RuneCatalog] = None,
        fallback_socket_count: int = FALLBACK_SOCKET_COUNT,
        crit_chance_pct: float = DEFAULT_CRIT_CHANCE_PCT,
        crit_multiplier: float = DEFAULT_CRIT_MULTIPLIER,
    ):
        if isinstance(fallback_socket_count, bool) or not isinstance(fallback_socket_count, int):
            raise TypeError(
                f"fallback_socket_count must be an int, got {type(fallback_socket_count).__name__}"
            )
        if fallback_socket_count < 0:
            raise ValueError(f"fallback_socket_count must be >= 0, got {fallback_socket_count}")
        self.catalog = catalog if catalog is not None else DEFAULT_RUNE_CATALOG
        self.fallback_socket_count = fallback_socket_count
        self.crit_chance_pct = crit_chance_pct
        self.crit_multiplier = crit_multiplier

    @classmethod
    def from_config(cls, config: "Config") -> "WeaponEvaluator":
        return cls(
            catalog=config.rune_catalog(),
            fallback_socket_count=config.fallback_socket_count,
            crit_chance_pct=config.crit_chance_pct,
            crit_multiplier=config.crit_multiplier,
        )

    def optimizer_for(self, crit_chance_pct: Optional[float] = None) -> RuneOptimizer:
        return RuneOptimizer(
            self.catalog,
            crit_chance_pct=self.crit_chance_pct if crit_chance_pct is None else crit_chance_pct,
            crit_multiplier=self.crit_multiplier,
        )

    def evaluate(self, listing: WeaponListing) -> Result[WeaponEvaluation, EvaluationFailure]:
        """Evaluate one listing end to end."""
        aggregated = aggregate(listing, self.fallback_socket_count)
        if aggregated.is_err():
            return aggregated
        stats = aggregated.unwrap()

        reversed_base = reverse_engineer_base(stats.final, stats.mods)
        if reversed_base.is_err():
            logger.debug(
                "Inconsistent modifiers on %s: %s",
                listing.item_id or "listing", reversed_base.error.message,
            )
            return reversed_base
        base = reversed_base.unwrap()

        crit_chance = stats.crit_chance_pct
        if crit_chance is None:
            crit_chance = self.crit_chance_pct
        current = displayed_dps(stats.final, crit_chance, self.crit_multiplier)

        notes: List[str] = []
        best_runes = None
        rune_status = None
        optimized = self.optimizer_for(crit_chance).optimize(
            base, stats.non_rune_mods, stats.rune_slot_count
        )
        if optimized.is_ok():
            best_runes = optimized.unwrap()
            best_dps = best_runes.dps.total_dps
        else:
            rune_status = optimized.reason
            notes.append(optimized.error.message)
            best_dps = current.total_dps

        value_ratio = dps_per_price(best_dps, listing.price_amount)
        if value_ratio is None:
            notes.append("no positive price; value ratio unavailable")

        return Ok(WeaponEvaluation(
            item_id=listing.item_id,
            stats=stats,
            current=current,
            base=base,
            best_runes=best_runes,
            rune_status=rune_status,
            price_amount=listing.price_amount,
            price_currency=listing.price_currency,
            current_value_ratio=dps_per_price(current.total_dps, listing.price_amount),
            value_ratio=value_ratio,
            notes=tuple(notes),
        ))

    def evaluate_many(self, listings: Iterable[WeaponListing]) -> List[WeaponEvaluation]:
        """Evaluate listings, skipping those that are not evaluable."""
        evaluations: List[WeaponEvaluation] = []
        skipped = 0
        for listing in listings:
            result = self.evaluate(listing)
            if result.is_ok():
                evaluations.append(result.unwrap())
                continue
            skipped += 1
            if result.reason is FailureReason.INCONSISTENT_MODIFIERS:
                logger.warning(
                    "Data quality issue on %s: %s", listing.item_id or "listing", result.error
                )
        logger.debug("Evaluated %d listing(s), skipped %d", len(evaluations), skipped)
        return evaluations

    def rank(
        self, listings: Iterable[WeaponListing], limit: int = DEFAULT_TOP_N
    ) -> List[WeaponEvaluation]:
        return rank_by_value(self.evaluate_many(listings), limit)
