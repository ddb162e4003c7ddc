"""Root logger setup for the fitclip CLI."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from fitclip.logging.context import JobContextFilter
from fitclip.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from fitclip.config.models import LoggingConfig

# job_tag is "[<job_id>] " inside a compression run and empty otherwise
TEXT_FORMAT = "%(asctime)s - %(job_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    """Formatter for the configured log format ("text" or "json")."""
    if config.format.lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    assert config.file is not None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not up yet, so report directly
        print(f"Warning: cannot open log file {path}: {e}", file=sys.stderr)
        return None


def configure_logging(config: LoggingConfig) -> list[logging.Handler]:
    """Replace the root logger's handlers according to config.

    Logs go to the configured file, to stderr, or both. If the file cannot be
    opened, stderr is used instead. Every handler tags records with the
    active compression job.

    Returns:
        The installed handlers.
    """
    level = logging.getLevelName(config.level.upper())
    formatter = build_formatter(config)

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    job_filter = JobContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(job_filter)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    # asyncio reports subprocess transport details at DEBUG
    logging.getLogger("asyncio").setLevel(max(level, logging.INFO))
    return handlers
