"""Centralized exit codes for all CLI commands."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for fitclip CLI commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    TOOL_NOT_AVAILABLE = 2
    # Ctrl+C, following the shell convention of 128 + SIGINT
    INTERRUPTED = 130
