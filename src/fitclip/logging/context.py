"""Job context for structured logging.

Provides context propagation for compression runs using contextvars, so that
every log record emitted while a job runs carries its job_id and source path.
contextvars follow asyncio tasks, so concurrent tasks keep separate contexts.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_source_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_path", default=None
)


def get_job_context() -> tuple[str | None, str | None]:
    """Get current job context as (job_id, source_path)."""
    return _job_id.get(), _source_path.get()


@contextmanager
def job_context(
    job_id: str,
    source_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager that tags log records with a job.

    Example:
        with job_context("a1b2c3d4", "/videos/clip.mov"):
            logger.info("Starting encode")  # Includes [a1b2c3d4]
    """
    job_token = _job_id.set(job_id)
    path_token = _source_path.set(str(source_path) if source_path is not None else None)
    try:
        yield
    finally:
        _job_id.reset(job_token)
        _source_path.reset(path_token)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and source_path attributes, plus a job_tag such as
    "[a1b2c3d4] " for the text format (empty outside a job).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, source_path = get_job_context()
        record.job_id = job_id
        record.source_path = source_path
        record.job_tag = f"[{job_id}] " if job_id else ""
        return True
