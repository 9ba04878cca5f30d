"""
weapon_api.models - Pydantic models for API request/response schemas.

Requests carry the raw text a page adapter scraped from a trade listing;
responses carry the evaluation in plain numbers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ==============================================================================
# Enums
# ==============================================================================


class FragmentSource(str, Enum):
    """Where a modifier line came from on the listing."""

    RUNE = "rune"
    OTHER = "other"


# ==============================================================================
# Shared Stat Models
# ==============================================================================


class WeaponStatsModel(BaseModel):
    """Physical/elemental damage ranges and attack rate."""

    phys_min: float = Field(..., description="Physical damage minimum", examples=[200.0])
    phys_max: float = Field(..., description="Physical damage maximum", examples=[300.0])
    aps: float = Field(..., description="Attacks per second", examples=[1.2])
    fire_min: float = 0.0
    fire_max: float = 0.0
    cold_min: float = 0.0
    cold_max: float = 0.0
    lightning_min: float = 0.0
    lightning_max: float = 0.0
    chaos_min: float = 0.0
    chaos_max: float = 0.0


class ModifiersModel(BaseModel):
    """Modifier totals; percentages as whole numbers (18 = 18%)."""

    flat_phys_min: float = 0.0
    flat_phys_max: float = 0.0
    flat_fire_min: float = 0.0
    flat_fire_max: float = 0.0
    flat_cold_min: float = 0.0
    flat_cold_max: float = 0.0
    flat_lightning_min: float = 0.0
    flat_lightning_max: float = 0.0
    flat_chaos_min: float = 0.0
    flat_chaos_max: float = 0.0
    increased_phys_pct: float = Field(0.0, examples=[50.0])
    increased_attack_speed_pct: float = 0.0
    quality_pct: float = Field(0.0, examples=[20.0])


class DpsModel(BaseModel):
    """DPS breakdown for one set of stats."""

    physical_dps: float
    elemental_dps: float
    total_dps: float = Field(..., description="DPS as shown on the trade site")
    total_dps_with_crit: float = Field(..., description="DPS including expected crits")
    phys_min: float
    phys_max: float
    aps: float


class RuneConfigurationModel(BaseModel):
    """Best rune assignment for a weapon."""

    label: str = Field(..., examples=["2x Greater Iron Rune"])
    units: dict[str, int] = Field(
        default_factory=dict, description="Units per rune id", examples=[{"greater-iron": 2}]
    )
    dps: DpsModel
    modifiers: ModifiersModel
    candidates_evaluated: int = Field(..., ge=0)


# ==============================================================================
# Evaluate Models
# ==============================================================================


class ModFragmentModel(BaseModel):
    """One modifier line from the listing."""

    text: str = Field(..., examples=["Adds 24 to 40 Physical Damage"])
    source: FragmentSource = Field(default=FragmentSource.OTHER)


class WeaponListingRequest(BaseModel):
    """Raw listing text for one weapon."""

    item_id: Optional[str] = Field(None, description="Listing identifier for re-identification")
    physical_damage: Optional[str] = Field(
        None, description="Displayed physical damage", examples=["289-521"]
    )
    attacks_per_second: Optional[str] = Field(None, examples=["1.20"])
    quality: Optional[str] = Field(None, examples=["+20%"])
    critical_chance: Optional[str] = Field(None, examples=["5.00%"])
    elemental_damage: dict[str, str] = Field(
        default_factory=dict,
        description="Displayed elemental ranges keyed by element",
        examples=[{"fire": "23-34"}],
    )
    mods: list[ModFragmentModel] = Field(default_factory=list)
    socket_count: Optional[int] = Field(None, ge=0, le=12)
    socket_markup: Optional[str] = Field(
        None, description="Raw socket markup", examples=["sockets numSockets2"]
    )
    price_amount: Optional[float] = Field(None, examples=[200.0])
    price_currency: Optional[str] = Field(None, examples=["divine"])


class WeaponEvaluationResponse(BaseModel):
    """Evaluation of one listing."""

    success: bool
    item_id: Optional[str] = None
    reason: Optional[str] = Field(None, description="Failure reason tag")
    error: Optional[str] = None
    final: Optional[WeaponStatsModel] = None
    base: Optional[WeaponStatsModel] = None
    modifiers: Optional[ModifiersModel] = None
    current: Optional[DpsModel] = None
    best_runes: Optional[RuneConfigurationModel] = None
    rune_status: Optional[str] = None
    socket_count: Optional[int] = None
    best_dps: Optional[float] = None
    price_amount: Optional[float] = None
    price_currency: Optional[str] = None
    currency_short: Optional[str] = Field(None, examples=["div"])
    current_value_ratio: Optional[float] = None
    value_ratio: Optional[float] = Field(None, description="Best DPS per unit of price")
    notes: list[str] = Field(default_factory=list)
    evaluated_at: datetime = Field(default_factory=_now)


# ==============================================================================
# Rank Models
# ==============================================================================


class RankRequest(BaseModel):
    """Listings to rank by DPS per price."""

    listings: list[WeaponListingRequest] = Field(..., min_length=1)
    limit: Optional[int] = Field(None, ge=1, le=50, description="Defaults to configured top_n")


class RankedWeapon(BaseModel):
    """One entry of the best-value list."""

    rank: int = Field(..., ge=1)
    item_id: Optional[str] = None
    value_ratio: float
    best_dps: float
    current_dps: float
    price_amount: float
    price_currency: Optional[str] = None
    currency_short: str
    best_runes: Optional[str] = None
    socket_count: int


class RankResponse(BaseModel):
    """Best-value list."""

    entries: list[RankedWeapon] = Field(default_factory=list)
    evaluated: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)


# ==============================================================================
# Optimize / Reverse Models
# ==============================================================================


class OptimizeRequest(BaseModel):
    """Base stats and non-rune modifiers to search runes for."""

    base: WeaponStatsModel
    modifiers: ModifiersModel = Field(default_factory=ModifiersModel)
    socket_count: int = Field(..., ge=0, le=12)


class OptimizeResponse(BaseModel):
    success: bool
    reason: Optional[str] = None
    error: Optional[str] = None
    best_runes: Optional[RuneConfigurationModel] = None


class ReverseRequest(BaseModel):
    """Displayed stats and known modifiers."""

    final: WeaponStatsModel
    modifiers: ModifiersModel = Field(default_factory=ModifiersModel)


class ReverseResponse(BaseModel):
    success: bool
    reason: Optional[str] = None
    error: Optional[str] = None
    base: Optional[WeaponStatsModel] = None
    matches: Optional[bool] = Field(None, description="Round trip within tolerance")
    deviations: dict[str, float] = Field(default_factory=dict)


# ==============================================================================
# Health / Config Models
# ==============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., examples=["healthy"])
    version: str = Field(..., examples=["0.1.0"])
    services: dict[str, str] = Field(default_factory=dict)


class ConfigResponse(BaseModel):
    """Non-sensitive configuration values."""

    fallback_socket_count: int
    crit_chance_pct: float
    crit_multiplier: float
    round_trip_tolerance: float
    top_n: int
    runes: list[dict] = Field(default_factory=list)
