"""
Rune catalogs.

A catalog is the closed set of runes the optimizer may place in a weapon's
sockets. It is passed to the optimizer explicitly so alternative game
balance versions can be swapped in.

Default catalog (martial weapons, PoE2 wiki / poe2db values per socket):
- Greater Iron Rune: 18% increased Physical Damage
- Thane Myrk's Rune of Summer: Adds 23 to 34 Fire Damage (one per weapon)
- Thane Leld's Rune of Spring: Adds 1 to 60 Lightning Damage (one per weapon)
- Soul Core of Quipolatl: 5% increased Attack Speed
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from weapon_value.weapon_dps.models import ModifierRecord, RuneDefinition, RuneKind


class RuneCatalog:
    """Ordered, id-addressable collection of rune definitions."""

    def __init__(self, runes: Iterable[RuneDefinition]):
        self._runes: Tuple[RuneDefinition, ...] = tuple(runes)
        self._by_id: Dict[str, RuneDefinition] = {}
        for rune in self._runes:
            if rune.id in self._by_id:
                raise ValueError(f"Duplicate rune id: {rune.id!r}")
            self._by_id[rune.id] = rune

    def __iter__(self) -> Iterator[RuneDefinition]:
        return iter(self._runes)

    def __len__(self) -> int:
        return len(self._runes)

    def __contains__(self, rune_id: object) -> bool:
        return rune_id in self._by_id

    def get(self, rune_id: str) -> RuneDefinition:
        try:
            return self._by_id[rune_id]
        except KeyError:
            raise KeyError(f"Unknown rune id: {rune_id!r}") from None

    @property
    def capped(self) -> List[RuneDefinition]:
        """Runes limited to a fixed number of units per weapon."""
        return [rune for rune in self._runes if rune.max_units is not None]

    @property
    def uncapped(self) -> List[RuneDefinition]:
        """Runes that may fill any number of sockets."""
        return [rune for rune in self._runes if rune.max_units is None]

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialize for the JSON config file."""
        out = []
        for rune in self._runes:
            entry: Dict[str, Any] = {
                "id": rune.id,
                "name": rune.name,
                "kind": rune.kind.value,
                "effect": {k: v for k, v in rune.effect.to_dict().items() if v},
            }
            if rune.max_units is not None:
                entry["max_units"] = rune.max_units
            out.append(entry)
        return out

    @classmethod
    def from_dicts(cls, entries: Iterable[Dict[str, Any]]) -> "RuneCatalog":
        """
        Build a catalog from config entries.

        Example entry:
            {"id": "greater-iron", "name": "Greater Iron Rune",
             "kind": "multiplicative_physical",
             "effect": {"increased_phys_pct": 18}}

        Raises:
            ValueError: on missing keys, unknown kinds, unknown effect fields
                or a max_units that is not a non-negative int.
        """
        runes = []
        for entry in entries:
            try:
                rune_id = entry["id"]
                kind = RuneKind(entry["kind"])
                effect_data = entry.get("effect", {})
            except (KeyError, ValueError) as e:
                raise ValueError(f"Invalid rune definition {entry!r}: {e}") from e

            unknown = set(effect_data) - set(ModifierRecord().to_dict())
            if unknown:
                raise ValueError(f"Rune {rune_id!r} has unknown effects: {sorted(unknown)}")

            max_units: Optional[int] = entry.get("max_units")
            if max_units is not None and (
                isinstance(max_units, bool) or not isinstance(max_units, int) or max_units < 0
            ):
                raise ValueError(
                    f"Rune {rune_id!r} max_units must be a non-negative int, got {max_units!r}"
                )
            runes.append(RuneDefinition(
                id=rune_id,
                name=entry.get("name", rune_id),
                kind=kind,
                effect=ModifierRecord.from_dict(effect_data),
                max_units=max_units,
            ))
        return cls(runes)


DEFAULT_RUNES: Tuple[RuneDefinition, ...] = (
    RuneDefinition(
        id="greater-iron",
        name="Greater Iron Rune",
        kind=RuneKind.MULTIPLICATIVE_PHYSICAL,
        effect=ModifierRecord(increased_phys_pct=18),
    ),
    RuneDefinition(
        id="thane-summer",
        name="Thane Myrk's Rune of Summer",
        kind=RuneKind.FLAT_ELEMENTAL,
        effect=ModifierRecord(flat_fire_min=23, flat_fire_max=34),
        max_units=1,
    ),
    RuneDefinition(
        id="thane-spring",
        name="Thane Leld's Rune of Spring",
        kind=RuneKind.FLAT_ELEMENTAL,
        effect=ModifierRecord(flat_lightning_min=1, flat_lightning_max=60),
        max_units=1,
    ),
    RuneDefinition(
        id="quipolatl",
        name="Soul Core of Quipolatl",
        kind=RuneKind.ATTACK_SPEED,
        effect=ModifierRecord(increased_attack_speed_pct=5),
    ),
)

DEFAULT_RUNE_CATALOG = RuneCatalog(DEFAULT_RUNES)
