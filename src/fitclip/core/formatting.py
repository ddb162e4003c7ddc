"""Formatting utilities.

This module provides pure functions for formatting data for display.
"""


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes.

    Returns:
        Formatted string (e.g., "4.2 GB", "128.0 MB", "1.5 KB").
    """
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} B"


def format_duration(seconds: float) -> str:
    """Format a duration as M:SS (e.g., 140.0 -> "2:20")."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def format_resolution(width: int, height: int) -> str:
    """Format dimensions as WxH."""
    return f"{width}x{height}"


def format_bitrate(bits_per_second: int) -> str:
    """Format a bitrate in kbps or Mbps."""
    if bits_per_second >= 1_000_000:
        return f"{bits_per_second / 1_000_000:.2f} Mbps"
    return f"{bits_per_second / 1000:.0f} kbps"


def compression_ratio(output_size_bytes: int, source_size_bytes: int) -> int:
    """Output size as a whole percentage of the source size.

    Returns 0 when the source size is unknown (zero).
    """
    if source_size_bytes <= 0:
        return 0
    return int(output_size_bytes / source_size_bytes * 100)


def format_percent(ratio: float) -> str:
    """Format a 0-1 progress ratio as a whole percentage."""
    return f"{int(ratio * 100)}%"
