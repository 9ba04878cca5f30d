"""
weapon_api.context - Services shared by all API requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from weapon_value.config import Config
from weapon_value.weapon_dps import WeaponEvaluator

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Configuration plus the evaluator built from it."""

    config: Config
    evaluator: WeaponEvaluator

    def reload(self) -> None:
        """Rebuild the evaluator after the config changed."""
        self.evaluator = WeaponEvaluator.from_config(self.config)
        logger.info("Evaluator rebuilt from config")

    def close(self) -> None:
        logger.debug("App context closed")


def create_app_context(config_file: Optional[Path] = None) -> AppContext:
    config = Config(config_file)
    evaluator = WeaponEvaluator.from_config(config)
    logger.info(
        "Evaluator ready: %d rune(s), fallback sockets %d",
        len(evaluator.catalog), evaluator.fallback_socket_count,
    )
    return AppContext(config=config, evaluator=evaluator)
