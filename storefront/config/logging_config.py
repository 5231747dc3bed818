# storefront/config/logging_config.py

"""Logging for one storefront run.

A run writes everything to ``logs/run_YYYYmmdd_HHMMSS.log`` and echoes
warnings to stderr, keeping stdout free for JSON output.  Each area of
the engine logs under its own child of ``storefront`` so its verbosity
can be tuned on its own, e.g.::

    STOREFRONT_LOG_LEVELS="cart=INFO,catalog=WARNING"
    STOREFRONT_LOG_LEVEL=INFO   # stderr threshold
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings

ROOT_LOGGER = "storefront"

# Child loggers, one per area of the engine
LOG_AREAS: tuple[str, ...] = (
    "catalog",
    "filters",
    "search",
    "storage",
    "cache",
    "cart",
    "service",
    "health",
    "cli",
    "main",
)

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its numeric value.

    Raises ``ValueError`` for names :mod:`logging` does not define.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {name!r}")
    return level


def parse_area_levels(spec: str) -> dict[str, int]:
    """Parse ``"cart=INFO,catalog=WARNING"`` into per-area levels.

    Unknown areas and malformed entries are skipped with a warning.
    """
    levels: dict[str, int] = {}
    for entry in spec.split(","):
        if not entry.strip():
            continue
        area, sep, level_name = entry.partition("=")
        area = area.strip()
        if not sep or area not in LOG_AREAS:
            logging.getLogger(ROOT_LOGGER).warning(
                "Ignoring log level entry %r", entry
            )
            continue
        try:
            levels[area] = parse_level(level_name)
        except ValueError:
            logging.getLogger(ROOT_LOGGER).warning(
                "Ignoring log level entry %r", entry
            )
    return levels


def _apply_area_levels(levels: dict[str, int]) -> None:
    for area in LOG_AREAS:
        # NOTSET defers to the root project logger
        logging.getLogger(f"{ROOT_LOGGER}.{area}").setLevel(
            levels.get(area, logging.NOTSET)
        )


def setup_logging(
    logs_dir: Path | None = None,
    console_level: str | None = None,
    area_levels: dict[str, int] | None = None,
) -> Path:
    """Attach the run's file and stderr handlers to ``storefront``.

    Calling it again keeps the existing handlers and log file but
    re-applies the console and per-area levels.

    Returns:
        The path of this run's log file.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)

    console_threshold = parse_level(
        console_level or Settings.LOG_CONSOLE_LEVEL
    )
    _apply_area_levels(
        parse_area_levels(Settings.LOG_LEVELS)
        if area_levels is None
        else area_levels
    )

    log_file: Path | None = None
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            log_file = Path(handler.baseFilename)
        else:
            handler.setLevel(console_threshold)
    if log_file is not None:
        return log_file

    target_dir: Path = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_threshold)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.info("Run log: %s", log_file)
    return log_file
