"""
Weapon DPS Models.

Value objects shared by the extractor, aggregator, formula engine and rune
optimizer. All of them are immutable; records are combined by building new
instances rather than mutating shared ones.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from weapon_value.result import FailureReason

if TYPE_CHECKING:
    from weapon_value.weapon_dps.rune_catalog import RuneCatalog


ELEMENTS: Tuple[str, ...] = ("fire", "cold", "lightning", "chaos")


def _check_numeric(instance: object) -> None:
    """Reject non-numeric field values; NaN and infinities are allowed."""
    for f in fields(instance):
        value = getattr(instance, f.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(
                f"{type(instance).__name__}.{f.name} must be a number, "
                f"got {type(value).__name__}"
            )


def average(low: float, high: float) -> float:
    return (low + high) / 2


@dataclass(frozen=True)
class ModifierRecord:
    """Additive totals of every modifier effect on a weapon.

    Percentages are stored as whole numbers (18 means 18%).
    """
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
    increased_phys_pct: float = 0.0
    increased_attack_speed_pct: float = 0.0
    quality_pct: float = 0.0

    def __post_init__(self) -> None:
        _check_numeric(self)

    def __add__(self, other: "ModifierRecord") -> "ModifierRecord":
        if not isinstance(other, ModifierRecord):
            return NotImplemented
        return ModifierRecord(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        })

    def __sub__(self, other: "ModifierRecord") -> "ModifierRecord":
        if not isinstance(other, ModifierRecord):
            return NotImplemented
        return ModifierRecord(**{
            f.name: getattr(self, f.name) - getattr(other, f.name)
            for f in fields(self)
        })

    def __mul__(self, units: int) -> "ModifierRecord":
        """Scale every effect by a unit count (e.g. runes per socket)."""
        if isinstance(units, bool) or not isinstance(units, int):
            return NotImplemented
        return ModifierRecord(**{
            f.name: getattr(self, f.name) * units for f in fields(self)
        })

    __rmul__ = __mul__

    def flat_range(self, damage_type: str) -> Tuple[float, float]:
        """(min, max) flat damage added for 'phys' or an element name."""
        return (
            getattr(self, f"flat_{damage_type}_min"),
            getattr(self, f"flat_{damage_type}_max"),
        )

    def with_quality(self, quality_pct: float) -> "ModifierRecord":
        return replace(self, quality_pct=quality_pct)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "ModifierRecord":
        """Build from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class FinalStats:
    """Displayed, fully modified weapon stats."""
    phys_min: float
    phys_max: float
    aps: float
    fire_min: float = 0.0
    fire_max: float = 0.0
    cold_min: float = 0.0
    cold_max: float = 0.0
    lightning_min: float = 0.0
    lightning_max: float = 0.0
    chaos_min: float = 0.0
    chaos_max: float = 0.0

    def __post_init__(self) -> None:
        _check_numeric(self)

    def element_range(self, element: str) -> Tuple[float, float]:
        return getattr(self, f"{element}_min"), getattr(self, f"{element}_max")

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class BaseStats:
    """Unmodified stats of the weapon's base type (derived, never observed)."""
    phys_min: float
    phys_max: float
    aps: float
    fire_min: float = 0.0
    fire_max: float = 0.0
    cold_min: float = 0.0
    cold_max: float = 0.0
    lightning_min: float = 0.0
    lightning_max: float = 0.0
    chaos_min: float = 0.0
    chaos_max: float = 0.0

    def __post_init__(self) -> None:
        _check_numeric(self)

    def element_range(self, element: str) -> Tuple[float, float]:
        return getattr(self, f"{element}_min"), getattr(self, f"{element}_max")

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class DpsResult:
    """Output of the forward formula for one base + modifier combination."""
    phys_min: float
    phys_max: float
    aps: float
    fire_min: float
    fire_max: float
    cold_min: float
    cold_max: float
    lightning_min: float
    lightning_max: float
    chaos_min: float
    chaos_max: float
    physical_dps: float
    elemental_dps: float
    total_dps: float
    total_dps_with_crit: float

    @property
    def final_stats(self) -> FinalStats:
        """The displayed stats this result corresponds to."""
        return FinalStats(
            phys_min=self.phys_min,
            phys_max=self.phys_max,
            aps=self.aps,
            fire_min=self.fire_min,
            fire_max=self.fire_max,
            cold_min=self.cold_min,
            cold_max=self.cold_max,
            lightning_min=self.lightning_min,
            lightning_max=self.lightning_max,
            chaos_min=self.chaos_min,
            chaos_max=self.chaos_max,
        )

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.total_dps)


class RuneKind(Enum):
    """How a rune contributes damage."""
    MULTIPLICATIVE_PHYSICAL = "multiplicative_physical"
    FLAT_ELEMENTAL = "flat_elemental"
    ATTACK_SPEED = "attack_speed"


@dataclass(frozen=True)
class RuneDefinition:
    """A socketable insert with a fixed per-unit effect."""
    id: str
    name: str
    kind: RuneKind
    effect: ModifierRecord
    max_units: Optional[int] = None  # None = limited only by sockets

    def __post_init__(self) -> None:
        if self.max_units is not None and self.max_units < 0:
            raise ValueError(f"Rune {self.id!r} has negative max_units")


@dataclass(frozen=True)
class RuneConfiguration:
    """Units of each rune placed in a weapon's sockets.

    Stored as ``(rune_id, units)`` pairs in catalog order.
    """
    allocations: Tuple[Tuple[str, int], ...]

    @property
    def total_units(self) -> int:
        return sum(units for _, units in self.allocations)

    def units_of(self, rune_id: str) -> int:
        for allocated_id, units in self.allocations:
            if allocated_id == rune_id:
                return units
        return 0

    def as_dict(self) -> Dict[str, int]:
        return {rune_id: units for rune_id, units in self.allocations if units}

    def describe(self, catalog: "RuneCatalog") -> str:
        """Human readable label, e.g. '2x Greater Iron Rune'."""
        parts = [
            f"{units}x {catalog.get(rune_id).name}"
            for rune_id, units in self.allocations
            if units
        ]
        return ", ".join(parts) if parts else "No runes"


@dataclass(frozen=True)
class RuneOptimization:
    """Best rune configuration found for a weapon."""
    configuration: RuneConfiguration
    modifiers: ModifierRecord
    dps: DpsResult
    candidates_evaluated: int


class Provenance(Enum):
    """Where a modifier line came from."""
    RUNE = "rune"
    OTHER = "other"


@dataclass(frozen=True)
class ModFragment:
    """One modifier text line tagged with its source."""
    text: str
    provenance: Provenance = Provenance.OTHER

    @property
    def is_rune(self) -> bool:
        return self.provenance is Provenance.RUNE


@dataclass(frozen=True)
class WeaponListing:
    """Raw text supplied by the page adapter for one listed item."""
    physical_damage_text: Optional[str]
    attacks_per_second_text: Optional[str]
    quality_text: Optional[str] = None
    critical_chance_text: Optional[str] = None
    # Displayed elemental ranges keyed by element name ("fire", "cold", ...)
    elemental_damage_texts: Dict[str, str] = field(default_factory=dict)
    fragments: Tuple[ModFragment, ...] = ()
    socket_count: Optional[int] = None
    socket_text: Optional[str] = None
    price_amount: Optional[float] = None
    price_currency: Optional[str] = None
    item_id: Optional[str] = None


@dataclass(frozen=True)
class ItemStats:
    """Aggregated stats for one weapon listing."""
    final: FinalStats
    mods: ModifierRecord
    rune_mods: ModifierRecord
    rune_slot_count: int
    crit_chance_pct: Optional[float] = None

    @property
    def non_rune_mods(self) -> ModifierRecord:
        """Every modifier that does not come from a socketed rune."""
        return self.mods - self.rune_mods


@dataclass(frozen=True)
class WeaponEvaluation:
    """Complete evaluation of one listing."""
    item_id: Optional[str]
    stats: ItemStats
    current: DpsResult
    base: BaseStats
    best_runes: Optional[RuneOptimization] = None
    rune_status: Optional[FailureReason] = None
    price_amount: Optional[float] = None
    price_currency: Optional[str] = None
    current_value_ratio: Optional[float] = None
    value_ratio: Optional[float] = None
    notes: Tuple[str, ...] = ()

    @property
    def best_dps(self) -> float:
        """Best-variant DPS when runes were optimised, else the current DPS."""
        if self.best_runes is not None:
            return self.best_runes.dps.total_dps
        return self.current.total_dps
