"""
Structured logging configuration for comp_outlook.

Provides a centralized way to configure logging across the engine, with
separate output files for projection, analytics and enrichment concerns.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import List

# Logger names for different concerns
PROJECTION_LOGGER = "comp_outlook.projections"
ANALYTICS_LOGGER = "comp_outlook.analytics"
ENRICHMENT_LOGGER = "comp_outlook.projections.enrichment"

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILES = (
    "combined.log",
    "warnings_errors.log",
    "projection_events.log",
    "analytics_events.log",
    "debug_detail.log",
)

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

# Track if logging is already configured
_LOGGING_CONFIGURED = False
_installed_handlers: List[logging.Handler] = []


def clear_logs(log_dir: Path) -> None:
    """Delete the log files this module writes in ``log_dir``."""
    for name in LOG_FILES:
        log_file = log_dir / name
        if log_file.exists():
            try:
                log_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(f"Could not delete {log_file}: {e}")


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
        mode="a",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    _installed_handlers.append(handler)
    return handler


def _attach(logger_name: str, handler: logging.Handler, level: int) -> None:
    named = logging.getLogger(logger_name)
    for h in named.handlers[:]:
        named.removeHandler(h)
    named.setLevel(level)
    named.addHandler(handler)
    named.propagate = True  # Allow to bubble up to root


def setup_logging(log_dir: Path, debug: bool = False, clear_existing: bool = True) -> None:
    """
    Configure structured logging for the application.

    Creates separate log files for different concerns:
    - combined.log: all messages (INFO+)
    - warnings_errors.log: warnings and errors, including enrichment fallbacks
    - projection_events.log: projection and enrichment workflow (INFO+)
    - analytics_events.log: salary analytics workflow (INFO+)
    - debug_detail.log: everything at DEBUG, only if debug=True

    Calling it again after a successful setup is a no-op.
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    if clear_existing:
        clear_logs(log_dir)

    # Remove all handlers from the root logger before setup
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    file_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console_formatter = logging.Formatter("%(levelname)-8s %(message)s")

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(console_formatter)
    _installed_handlers.append(console)
    root_logger.addHandler(console)

    root_logger.addHandler(_file_handler(log_dir / "combined.log", logging.INFO, file_formatter))
    root_logger.addHandler(
        _file_handler(log_dir / "warnings_errors.log", logging.WARNING, file_formatter)
    )
    if debug:
        root_logger.addHandler(
            _file_handler(log_dir / "debug_detail.log", logging.DEBUG, file_formatter)
        )

    level = logging.DEBUG if debug else logging.INFO
    _attach(
        PROJECTION_LOGGER,
        _file_handler(log_dir / "projection_events.log", logging.INFO, file_formatter),
        level,
    )
    _attach(
        ANALYTICS_LOGGER,
        _file_handler(log_dir / "analytics_events.log", logging.INFO, file_formatter),
        level,
    )

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Close handlers installed by ``setup_logging`` and allow a fresh setup."""
    global _LOGGING_CONFIGURED

    for name in (None, PROJECTION_LOGGER, ANALYTICS_LOGGER):
        target = logging.getLogger(name)
        for handler in target.handlers[:]:
            if handler in _installed_handlers:
                target.removeHandler(handler)
    for handler in _installed_handlers:
        handler.close()
    _installed_handlers.clear()
    _LOGGING_CONFIGURED = False

