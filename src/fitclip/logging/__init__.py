"""Structured logging module for fitclip.

Provides configurable logging with JSON format support and file rotation.
Includes job context support so records emitted during a run are tagged.
"""

from fitclip.logging.config import configure_logging
from fitclip.logging.context import JobContextFilter, get_job_context, job_context
from fitclip.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
]
