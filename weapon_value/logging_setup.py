# weapon_value/logging_setup.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_DIR_NAME = ".poe_weapon_value"


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> Path:
    """
    Configure application-wide logging.

    - Logs to ~/.poe_weapon_value/app.log (rotating, max ~1 MB, 3 backups)
    - Also logs to console (stderr) for interactive runs

    Returns the log file path.
    """
    log_dir = log_dir or Path.home() / APP_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "app.log"

    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers from a previous call
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    )
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s - %(message)s"))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialized (debug=%s)", debug)
    root_logger.info("Log file: %s", log_file)
    return log_file
