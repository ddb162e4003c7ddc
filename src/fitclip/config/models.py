"""Configuration data models.

This module defines dataclasses for fitclip configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

# Install locations checked before falling back to PATH lookup
WELL_KNOWN_FFMPEG_PATHS: tuple[Path, ...] = (
    Path("/opt/homebrew/bin/ffmpeg"),
    Path("/usr/local/bin/ffmpeg"),
    Path("/usr/bin/ffmpeg"),
)


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in the
    well-known install locations and then in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class EncoderConfig:
    """Configuration for running the encoder process."""

    # Seconds to wait after SIGTERM before killing a cancelled encoder
    terminate_grace_seconds: float = 5.0

    # Locations searched for ffmpeg when no explicit path is configured
    search_paths: tuple[Path, ...] = WELL_KNOWN_FFMPEG_PATHS

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.terminate_grace_seconds < 0:
            raise ValueError(
                "terminate_grace_seconds must not be negative, "
                f"got {self.terminate_grace_seconds}"
            )


@dataclass
class FitclipConfig:
    """Top-level fitclip configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)

    # Optional YAML file declaring extra platform profiles
    platforms_file: Path | None = None
