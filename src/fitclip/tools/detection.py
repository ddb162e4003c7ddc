"""External tool detection.

Locates the ffmpeg and ffprobe executables. Lookup order is: an explicitly
configured path, then a small set of well-known install locations, then PATH.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from fitclip.config.models import WELL_KNOWN_FFMPEG_PATHS
from fitclip.jobs.exceptions import ToolUnavailableError

logger = logging.getLogger(__name__)

INSTALL_HINTS: dict[str, str] = {
    "ffmpeg": (
        "Install it with your package manager (e.g. 'brew install ffmpeg' or "
        "'apt install ffmpeg') or set FITCLIP_FFMPEG_PATH"
    ),
    "ffprobe": (
        "ffprobe ships with ffmpeg; install ffmpeg or set FITCLIP_FFPROBE_PATH"
    ),
}


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_tool(
    name: str,
    configured_path: Path | None = None,
    search_paths: Iterable[Path] = (),
) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.
        search_paths: Well-known locations to try before PATH.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path is not None:
        if _is_executable(configured_path):
            return configured_path
        logger.warning(
            "Configured %s path is not an executable file: %s", name, configured_path
        )

    for candidate in search_paths:
        if _is_executable(candidate):
            return candidate

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def locate_ffmpeg(
    configured_path: Path | None = None,
    search_paths: Iterable[Path] = WELL_KNOWN_FFMPEG_PATHS,
) -> Path | None:
    """Locate ffmpeg, returning None when it is not installed."""
    path = find_tool("ffmpeg", configured_path, search_paths)
    if path is None:
        logger.debug("ffmpeg not found (configured=%s)", configured_path)
    return path


def locate_ffprobe(
    configured_path: Path | None = None,
    ffmpeg_path: Path | None = None,
) -> Path | None:
    """Locate ffprobe, preferring the directory ffmpeg was found in."""
    search_paths: list[Path] = []
    if ffmpeg_path is not None:
        search_paths.append(ffmpeg_path.with_name("ffprobe"))
    search_paths.extend(p.with_name("ffprobe") for p in WELL_KNOWN_FFMPEG_PATHS)
    return find_tool("ffprobe", configured_path, search_paths)


def require_ffmpeg(
    configured_path: Path | None = None,
    search_paths: Iterable[Path] = WELL_KNOWN_FFMPEG_PATHS,
) -> Path:
    """Get path to ffmpeg, raising an error if not available.

    Raises:
        ToolUnavailableError: If ffmpeg cannot be found.
    """
    path = locate_ffmpeg(configured_path, search_paths)
    if path is None:
        raise ToolUnavailableError("ffmpeg", INSTALL_HINTS["ffmpeg"])
    return path
