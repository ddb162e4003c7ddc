"""Compression job orchestration.

The controller lives in fitclip.jobs.controller; import it from there.
This package namespace only re-exports the exception types.
"""

from fitclip.jobs.exceptions import (
    CompressionError,
    ConcurrentCompressionError,
    EncodeCancelled,
    LaunchFailureError,
    MissingOutputError,
    NonZeroExitError,
    ToolUnavailableError,
)

__all__ = [
    "CompressionError",
    "ConcurrentCompressionError",
    "EncodeCancelled",
    "LaunchFailureError",
    "MissingOutputError",
    "NonZeroExitError",
    "ToolUnavailableError",
]
