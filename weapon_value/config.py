"""
Configuration management for the weapon value evaluator.
Handles evaluation settings and the rune catalog, persisted as JSON.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from weapon_value.weapon_dps.constants import (
    DEFAULT_CRIT_CHANCE_PCT,
    DEFAULT_CRIT_MULTIPLIER,
    DEFAULT_TOP_N,
    FALLBACK_SOCKET_COUNT,
    ROUND_TRIP_TOLERANCE,
)
from weapon_value.weapon_dps.rune_catalog import DEFAULT_RUNE_CATALOG, RuneCatalog

logger = logging.getLogger(__name__)

# Weapons in PoE2 carry at most 6 rune sockets (with corruption)
MAX_SOCKETS = 6


def get_config_dir() -> Path:
    """
    Get the application config directory.

    Returns:
        Path to the config directory (~/.poe_weapon_value/)
    """
    config_dir = Path.home() / ".poe_weapon_value"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


class Config:
    """
    Evaluator configuration with JSON persistence.

    - "evaluation" holds formula defaults and policy values.
    - "runes" optionally replaces the built-in rune catalog; None keeps it.
    - "api" holds the HTTP service bind address.
    """

    # NOTE: treated as immutable. Use _default_config_deepcopy() for a
    # fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "evaluation": {
            # Rune sockets assumed when a listing has no socket markup
            "fallback_socket_count": FALLBACK_SOCKET_COUNT,
            "crit_chance_pct": DEFAULT_CRIT_CHANCE_PCT,
            "crit_multiplier": DEFAULT_CRIT_MULTIPLIER,
            "round_trip_tolerance": ROUND_TRIP_TOLERANCE,
            # Size of the "best value" list
            "top_n": DEFAULT_TOP_N,
        },
        "runes": None,
        "api": {
            "host": "127.0.0.1",
            "port": 8000,
        },
    }

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """
        Args:
            config_file: Optional path to the config JSON file. Defaults to
                         ~/.poe_weapon_value/config.json.
        """
        self.config_file: Path = self._resolve_config_path(config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.data: Dict[str, Any] = self._load()
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Path]) -> Path:
        if config_file is not None:
            return Path(config_file)
        return get_config_dir() / "config.json"

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if not self.config_file.exists():
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error(f"Failed to load config: {exc}. Using defaults.")
            return self._default_config_deepcopy()

        if not isinstance(raw, dict):
            logger.error("Config root is not an object. Using defaults.")
            return self._default_config_deepcopy()
        return self._merge_with_defaults(raw)

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge user config with defaults so new keys appear without
        discarding user-provided values in nested sections.
        """
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    def _evaluation(self) -> Dict[str, Any]:
        return self.data.setdefault("evaluation", {})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    # ------------------------------------------------------------------
    # Evaluation Settings
    # ------------------------------------------------------------------

    @property
    def fallback_socket_count(self) -> int:
        """
        Rune sockets assumed when a listing's socket count is unknown.

        Guardrails: 0 to MAX_SOCKETS, applied to hand-edited files as well.
        This is a policy value, not something read from the listing.
        """
        value = self._evaluation().get("fallback_socket_count", FALLBACK_SOCKET_COUNT)
        try:
            count = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid fallback_socket_count {value!r}, using {FALLBACK_SOCKET_COUNT}")
            return FALLBACK_SOCKET_COUNT
        return max(0, min(MAX_SOCKETS, count))

    @fallback_socket_count.setter
    def fallback_socket_count(self, value: int) -> None:
        self._evaluation()["fallback_socket_count"] = max(0, min(MAX_SOCKETS, int(value)))
        self.save()

    @property
    def crit_chance_pct(self) -> float:
        """Critical hit chance (percent) used when a listing shows none."""
        return float(self._evaluation().get("crit_chance_pct", DEFAULT_CRIT_CHANCE_PCT))

    @crit_chance_pct.setter
    def crit_chance_pct(self, value: float) -> None:
        """Set crit chance with guardrails (0 to 100)."""
        self._evaluation()["crit_chance_pct"] = max(0.0, min(100.0, float(value)))
        self.save()

    @property
    def crit_multiplier(self) -> float:
        """Critical damage multiplier (1.5 = 150%)."""
        return float(self._evaluation().get("crit_multiplier", DEFAULT_CRIT_MULTIPLIER))

    @crit_multiplier.setter
    def crit_multiplier(self, value: float) -> None:
        """Set crit multiplier; values below 1.0 are clamped to 1.0."""
        self._evaluation()["crit_multiplier"] = max(1.0, float(value))
        self.save()

    @property
    def round_trip_tolerance(self) -> float:
        return float(self._evaluation().get("round_trip_tolerance", ROUND_TRIP_TOLERANCE))

    @property
    def top_n(self) -> int:
        """Entries in the best-value list (1 to 50)."""
        return int(self._evaluation().get("top_n", DEFAULT_TOP_N))

    @top_n.setter
    def top_n(self, value: int) -> None:
        self._evaluation()["top_n"] = max(1, min(50, int(value)))
        self.save()

    # ------------------------------------------------------------------
    # Rune Catalog
    # ------------------------------------------------------------------

    def rune_catalog(self) -> RuneCatalog:
        """
        Rune catalog from config, or the built-in catalog.

        A malformed "runes" section is logged and ignored.
        """
        entries = self.data.get("runes")
        if not entries:
            return DEFAULT_RUNE_CATALOG
        try:
            return RuneCatalog.from_dicts(entries)
        except (TypeError, ValueError) as exc:
            logger.error(f"Invalid rune catalog in config: {exc}. Using defaults.")
            return DEFAULT_RUNE_CATALOG

    def set_rune_catalog(self, catalog: Optional[RuneCatalog]) -> None:
        """Store a custom catalog; None restores the built-in one."""
        entries: Optional[List[Dict[str, Any]]] = catalog.to_dicts() if catalog is not None else None
        self.data["runes"] = entries
        self.save()

    # ------------------------------------------------------------------
    # API Settings
    # ------------------------------------------------------------------

    @property
    def api_host(self) -> str:
        return self.data.get("api", {}).get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.data.get("api", {}).get("port", 8000))
