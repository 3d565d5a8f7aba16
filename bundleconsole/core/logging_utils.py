"""Logging setup shared by the server and the CLI.

Version: 0.3.0

Both entry points configure logging from the ``logging`` section of
``bundleconsole.yaml`` through :func:`apply_logging_config`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from bundleconsole.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Accepted aliases for config and CLI inputs
LEVEL_ALIASES = {
    "CRITIC": "CRITICAL",
    "CRITICAL": "CRITICAL",
    "ERROR": "ERROR",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "INFO": "INFO",
    "DEBUG": "DEBUG",
}

# uvicorn keeps its own loggers; they follow the console's level
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

LOG_RESTART_SEPARATOR = """

================================================================================
=== BUNDLECONSOLE RESTART - {timestamp} ===
================================================================================

"""


def normalize_log_level(level_name: str | None) -> str:
    """Return a normalized logging level name (defaults to INFO)."""
    if not level_name:
        return "INFO"
    return LEVEL_ALIASES.get(level_name.strip().upper(), "INFO")


def prepare_log_file(log_file: str | Path, reset_on_start: bool = True) -> None:
    """Delete the log file, or mark the restart in it when it is kept."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if not log_path.exists():
        return

    try:
        if reset_on_start:
            log_path.unlink()
        else:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(LOG_RESTART_SEPARATOR.format(timestamp=timestamp))
    except OSError as exc:
        # The file handler opens the file again anyway
        logging.getLogger(__name__).debug("Could not prepare log file %s: %s", log_path, exc)


def _file_handler_for(root_logger: logging.Logger, log_path: Path) -> Optional[logging.FileHandler]:
    target = str(log_path.resolve())
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler
    return None


def _attach_file_handler(root_logger: logging.Logger, log_file: str | Path, level: int, reset_on_start: bool) -> None:
    log_path = Path(log_file)
    existing = _file_handler_for(root_logger, log_path)
    if existing is not None:
        existing.setLevel(level)
        return

    prepare_log_file(log_path, reset_on_start)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def configure_logging(
    level_name: str | None,
    log_file: Optional[str | Path] = None,
    reset_on_start: bool = True,
) -> str:
    """Configure the root logger and the uvicorn loggers.

    Args:
        level_name: Log level name or alias; unknown names mean INFO.
        log_file: Also write to this file when given. A file already
            attached to the root logger is not attached twice.
        reset_on_start: Delete the file first, or append a restart separator.

    Returns:
        The normalized level name effectively applied.
    """
    normalized = normalize_log_level(level_name)
    level = getattr(logging, normalized)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)

    for name in SERVER_LOGGERS:
        logging.getLogger(name).setLevel(level)

    if log_file:
        try:
            _attach_file_handler(root_logger, log_file, level, reset_on_start)
        except OSError as exc:
            logging.getLogger(__name__).warning("Failed to attach file handler %s: %s", log_file, exc)

    return normalized


def apply_logging_config(logging_config: LoggingConfig) -> str:
    """Configure logging from a ``LoggingConfig`` section."""
    return configure_logging(
        logging_config.level,
        log_file=logging_config.path,
        reset_on_start=logging_config.reset_on_start,
    )
