"""
weapon_api.routers.weapons - Weapon evaluation endpoints.

Endpoints take the text a page adapter read off a trade listing and return
DPS, the best rune configuration and DPS per unit of price.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from weapon_api.context import AppContext
from weapon_api.dependencies import get_app_context
from weapon_api.models import (
    DpsModel,
    FragmentSource,
    ModifiersModel,
    OptimizeRequest,
    OptimizeResponse,
    RankedWeapon,
    RankRequest,
    RankResponse,
    ReverseRequest,
    ReverseResponse,
    RuneConfigurationModel,
    WeaponEvaluationResponse,
    WeaponListingRequest,
    WeaponStatsModel,
)
from weapon_value.weapon_dps import (
    BaseStats,
    DpsResult,
    FinalStats,
    ModFragment,
    ModifierRecord,
    Provenance,
    RuneCatalog,
    RuneOptimization,
    WeaponEvaluation,
    WeaponListing,
    rank_by_value,
    reverse_and_verify,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/weapons")

CURRENCY_ABBREVIATIONS = {
    "divine": "div",
    "chaos": "chaos",
    "exalted": "ex",
    "mirror": "mirror",
}


def format_currency(currency: Optional[str]) -> str:
    """Short currency label for badges, e.g. 'divine' -> 'div'."""
    if not currency:
        return "?"
    key = currency.lower()
    return CURRENCY_ABBREVIATIONS.get(key, key[:3])


# ==============================================================================
# Conversions
# ==============================================================================


def listing_from_request(request: WeaponListingRequest) -> WeaponListing:
    return WeaponListing(
        physical_damage_text=request.physical_damage,
        attacks_per_second_text=request.attacks_per_second,
        quality_text=request.quality,
        critical_chance_text=request.critical_chance,
        elemental_damage_texts={k.lower(): v for k, v in request.elemental_damage.items()},
        fragments=tuple(
            ModFragment(
                text=mod.text,
                provenance=Provenance.RUNE if mod.source is FragmentSource.RUNE else Provenance.OTHER,
            )
            for mod in request.mods
        ),
        socket_count=request.socket_count,
        socket_text=request.socket_markup,
        price_amount=request.price_amount,
        price_currency=request.price_currency,
        item_id=request.item_id,
    )


def _stats_model(stats: FinalStats | BaseStats) -> WeaponStatsModel:
    return WeaponStatsModel(**stats.to_dict())


def _dps_model(dps: DpsResult) -> DpsModel:
    return DpsModel(
        physical_dps=dps.physical_dps,
        elemental_dps=dps.elemental_dps,
        total_dps=dps.total_dps,
        total_dps_with_crit=dps.total_dps_with_crit,
        phys_min=dps.phys_min,
        phys_max=dps.phys_max,
        aps=dps.aps,
    )


def _runes_model(best: RuneOptimization, catalog: RuneCatalog) -> RuneConfigurationModel:
    return RuneConfigurationModel(
        label=best.configuration.describe(catalog),
        units=best.configuration.as_dict(),
        dps=_dps_model(best.dps),
        modifiers=ModifiersModel(**best.modifiers.to_dict()),
        candidates_evaluated=best.candidates_evaluated,
    )


def evaluation_response(
    evaluation: WeaponEvaluation, catalog: RuneCatalog
) -> WeaponEvaluationResponse:
    best_runes = None
    if evaluation.best_runes is not None:
        best_runes = _runes_model(evaluation.best_runes, catalog)

    return WeaponEvaluationResponse(
        success=True,
        item_id=evaluation.item_id,
        final=_stats_model(evaluation.stats.final),
        base=_stats_model(evaluation.base),
        modifiers=ModifiersModel(**evaluation.stats.mods.to_dict()),
        current=_dps_model(evaluation.current),
        best_runes=best_runes,
        rune_status=evaluation.rune_status.value if evaluation.rune_status else None,
        socket_count=evaluation.stats.rune_slot_count,
        best_dps=evaluation.best_dps,
        price_amount=evaluation.price_amount,
        price_currency=evaluation.price_currency,
        currency_short=format_currency(evaluation.price_currency),
        current_value_ratio=evaluation.current_value_ratio,
        value_ratio=evaluation.value_ratio,
        notes=list(evaluation.notes),
    )


# ==============================================================================
# Endpoints
# ==============================================================================


@router.post("/evaluate", response_model=WeaponEvaluationResponse)
async def evaluate_weapon(
    request: WeaponListingRequest,
    ctx: AppContext = Depends(get_app_context),
) -> WeaponEvaluationResponse:
    """
    Evaluate one weapon listing.

    Listings that cannot be evaluated (no damage range, contradictory
    modifiers) return ``success=false`` with the failure reason.
    """
    evaluator = ctx.evaluator
    result = evaluator.evaluate(listing_from_request(request))
    if result.is_err():
        return WeaponEvaluationResponse(
            success=False,
            item_id=request.item_id,
            reason=result.reason.value if result.reason else None,
            error=result.error.message,
            price_amount=request.price_amount,
            price_currency=request.price_currency,
            currency_short=format_currency(request.price_currency),
        )
    return evaluation_response(result.unwrap(), evaluator.catalog)


@router.post("/rank", response_model=RankResponse)
async def rank_weapons(
    request: RankRequest,
    ctx: AppContext = Depends(get_app_context),
) -> RankResponse:
    """Best DPS per price first; unpriced and unevaluable listings are left out."""
    evaluator = ctx.evaluator
    evaluations = evaluator.evaluate_many(listing_from_request(r) for r in request.listings)
    limit = request.limit if request.limit is not None else ctx.config.top_n
    ranked = rank_by_value(evaluations, limit)

    entries = [
        RankedWeapon(
            rank=position,
            item_id=evaluation.item_id,
            value_ratio=evaluation.value_ratio,
            best_dps=evaluation.best_dps,
            current_dps=evaluation.current.total_dps,
            price_amount=evaluation.price_amount,
            price_currency=evaluation.price_currency,
            currency_short=format_currency(evaluation.price_currency),
            best_runes=(
                evaluation.best_runes.configuration.describe(evaluator.catalog)
                if evaluation.best_runes is not None else None
            ),
            socket_count=evaluation.stats.rune_slot_count,
        )
        for position, evaluation in enumerate(ranked, start=1)
    ]
    logger.info(f"Ranked {len(entries)} of {len(request.listings)} listing(s)")

    return RankResponse(
        entries=entries,
        evaluated=len(evaluations),
        skipped=len(request.listings) - len(evaluations),
    )


@router.post("/optimize", response_model=OptimizeResponse)
async def optimize_runes(
    request: OptimizeRequest,
    ctx: AppContext = Depends(get_app_context),
) -> OptimizeResponse:
    """Best rune configuration for known base stats and non-rune modifiers."""
    optimizer = ctx.evaluator.optimizer_for()
    result = optimizer.optimize(
        BaseStats(**request.base.model_dump()),
        ModifierRecord(**request.modifiers.model_dump()),
        request.socket_count,
    )
    if result.is_err():
        return OptimizeResponse(
            success=False,
            reason=result.reason.value if result.reason else None,
            error=result.error.message,
        )
    return OptimizeResponse(
        success=True,
        best_runes=_runes_model(result.unwrap(), optimizer.catalog),
    )


@router.post("/reverse", response_model=ReverseResponse)
async def reverse_base(
    request: ReverseRequest,
    ctx: AppContext = Depends(get_app_context),
) -> ReverseResponse:
    """Base stats behind displayed stats, checked by re-applying the modifiers."""
    result = reverse_and_verify(
        FinalStats(**request.final.model_dump()),
        ModifierRecord(**request.modifiers.model_dump()),
        tolerance=ctx.config.round_trip_tolerance,
    )
    if result.is_err():
        return ReverseResponse(
            success=False,
            reason=result.reason.value if result.reason else None,
            error=result.error.message,
        )

    check = result.unwrap()
    return ReverseResponse(
        success=True,
        base=_stats_model(check.base),
        matches=check.matches,
        deviations=check.deviations,
    )
