from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

import config_paths


def configure_logging(
        level: int | str = logging.INFO,
        log_format: str = "json",
        log_path: Optional[str] = None,
) -> None:
    """
    Configure root logger for the app

    Modes:
    - JSON (default)
    - plain text

    Records go to ``log_path`` (default: tablr.log in the config dir)
    because the terminal belongs to curses while the viewer runs.
    """

    if log_path is None:
        config_paths.ensure_config_dirs()
        log_path = config_paths.LOG_PATH

    logger = logging.getLogger()
    logger.setLevel(level)

    handler = logging.FileHandler(log_path, encoding="utf-8")

    if log_format == "plain":
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )

    handler.setFormatter(formatter)

    # Replace any existing handlers to avoid duplicate logs
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
