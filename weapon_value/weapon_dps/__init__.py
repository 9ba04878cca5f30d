"""
Weapon DPS Package.

Derives weapon DPS from trade listing text, reverse-engineers base stats and
finds the best rune configuration.

Public API:
- WeaponEvaluator: listing -> WeaponEvaluation pipeline
- extract_modifiers / extract_all: modifier text -> ModifierRecord
- aggregate: listing -> ItemStats
- calculate_dps / reverse_engineer_base / reverse_and_verify: formulas
- RuneOptimizer / enumerate_configurations: rune search
- RuneCatalog / DEFAULT_RUNE_CATALOG: socketable runes

Example:
    from weapon_value.weapon_dps import WeaponEvaluator, WeaponListing
    evaluator = WeaponEvaluator()
    result = evaluator.evaluate(listing)
"""
from weapon_value.weapon_dps.models import (
    BaseStats,
    DpsResult,
    FinalStats,
    ItemStats,
    ModFragment,
    ModifierRecord,
    Provenance,
    RuneConfiguration,
    RuneDefinition,
    RuneKind,
    RuneOptimization,
    WeaponEvaluation,
    WeaponListing,
)
from weapon_value.weapon_dps.mod_extractor import (
    extract_all,
    extract_modifiers,
    parse_number,
    parse_range,
)
from weapon_value.weapon_dps.stat_aggregator import aggregate, parse_socket_count
from weapon_value.weapon_dps.formulas import (
    RoundTripCheck,
    calculate_dps,
    displayed_dps,
    reverse_and_verify,
    reverse_engineer_base,
)
from weapon_value.weapon_dps.rune_catalog import DEFAULT_RUNE_CATALOG, RuneCatalog
from weapon_value.weapon_dps.rune_optimizer import RuneOptimizer, enumerate_configurations
from weapon_value.weapon_dps.evaluator import WeaponEvaluator, dps_per_price, rank_by_value

__all__ = [
    "BaseStats",
    "DpsResult",
    "FinalStats",
    "ItemStats",
    "ModFragment",
    "ModifierRecord",
    "Provenance",
    "RuneConfiguration",
    "RuneDefinition",
    "RuneKind",
    "RuneOptimization",
    "WeaponEvaluation",
    "WeaponListing",
    "extract_all",
    "extract_modifiers",
    "parse_number",
    "parse_range",
    "aggregate",
    "parse_socket_count",
    "RoundTripCheck",
    "calculate_dps",
    "displayed_dps",
    "reverse_and_verify",
    "reverse_engineer_base",
    "DEFAULT_RUNE_CATALOG",
    "RuneCatalog",
    "RuneOptimizer",
    "enumerate_configurations",
    "WeaponEvaluator",
    "dps_per_price",
    "rank_by_value",
]
