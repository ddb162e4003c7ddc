"""FFmpeg progress parsing utilities.

FFmpeg writes progress to stderr in lines like:
    frame= 1234 fps= 30 q=28.0 size= 2048kB time=00:01:23.45 bitrate=...

All knowledge of that text layout lives in this module. Callers only see
elapsed seconds and 0-1 ratios.
"""

from __future__ import annotations

import re

from fitclip.domain.enums import PassKind

# time=HH:MM:SS.ff (hours may exceed two digits for very long inputs)
TIME_MARKER_PATTERN = re.compile(r"time=(\d+):(\d+):(\d+(?:\.\d+)?)")


def find_last_timestamp(text: str) -> float | None:
    """Find the most recent time= marker in a chunk of stderr text.

    Args:
        text: Chunk of FFmpeg stderr output (may contain several lines).

    Returns:
        Elapsed output time in seconds, or None if the chunk has no marker.
    """
    matches = TIME_MARKER_PATTERN.findall(text)
    if not matches:
        return None
    hours, minutes, seconds = matches[-1]
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def raw_progress(elapsed_seconds: float, duration_seconds: float) -> float:
    """Ratio of elapsed to total duration, clamped to [0, 1].

    The divisor is clamped to at least one second so that zero or tiny
    durations cannot divide by zero.
    """
    ratio = elapsed_seconds / max(duration_seconds, 1.0)
    return min(max(ratio, 0.0), 1.0)


def map_pass_progress(raw: float, pass_kind: PassKind) -> float:
    """Map one pass's raw progress onto overall job progress.

    Single-pass jobs use the full [0, 1] range. In two-pass jobs the analysis
    pass covers [0, 0.5] and the final pass covers [0.5, 1].
    """
    if pass_kind is PassKind.FIRST:
        return raw * 0.5
    if pass_kind is PassKind.SECOND:
        return 0.5 + raw * 0.5
    return raw


def parse_progress_chunk(
    text: str, duration_seconds: float, pass_kind: PassKind
) -> float | None:
    """Parse a stderr chunk into overall job progress.

    Returns:
        Job progress in [0, 1], or None if the chunk has no time marker.
    """
    elapsed = find_last_timestamp(text)
    if elapsed is None:
        return None
    return map_pass_progress(raw_progress(elapsed, duration_seconds), pass_kind)
