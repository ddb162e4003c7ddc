"""File and path utilities for compression output."""

from __future__ import annotations

import logging
from pathlib import Path

from fitclip.domain.models import PlatformProfile

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".mp4"

# Extensions accepted as compression input
SUPPORTED_VIDEO_EXTENSIONS = frozenset({"mov", "mp4", "m4v", "avi", "mkv", "webm"})


def is_supported_video(path: Path) -> bool:
    """Check whether a path has a supported video extension (case-insensitive)."""
    return path.suffix.lstrip(".").casefold() in SUPPORTED_VIDEO_EXTENSIONS


def build_output_path(source_path: Path, platform: PlatformProfile) -> Path:
    """Build the deterministic output path for a source and platform.

    The output sits next to the source, named <stem><suffix>.mp4, so running
    the same platform again overwrites the previous result.

    Example:
        /videos/clip.mov + twitter -> /videos/clip_twitter.mp4
    """
    return source_path.parent / f"{source_path.stem}{platform.output_suffix}{OUTPUT_EXTENSION}"


def remove_file_if_exists(path: Path) -> bool:
    """Remove a file, ignoring a missing one.

    Returns:
        True if a file was removed.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
    logger.debug("Removed %s", path)
    return True
