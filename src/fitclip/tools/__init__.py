"""External tool detection and output parsing."""

from fitclip.tools.detection import (
    find_tool,
    locate_ffmpeg,
    locate_ffprobe,
    require_ffmpeg,
)
from fitclip.tools.ffmpeg_progress import (
    find_last_timestamp,
    map_pass_progress,
    parse_progress_chunk,
    raw_progress,
)

__all__ = [
    "find_last_timestamp",
    "find_tool",
    "locate_ffmpeg",
    "locate_ffprobe",
    "map_pass_progress",
    "parse_progress_chunk",
    "raw_progress",
    "require_ffmpeg",
]
