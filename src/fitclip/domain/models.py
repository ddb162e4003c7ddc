"""Core domain models for compression planning.

These are plain dataclasses with no I/O. PlatformProfile, SourceVideo and
EncodePlan are immutable; EncodeSessionState is the single mutable record
owned by a CompressionController during a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fitclip.domain.enums import SessionPhase


@dataclass(frozen=True)
class PlatformProfile:
    """Constraints a target platform puts on uploaded video."""

    name: str
    """Profile identifier, e.g. "twitter"."""

    max_file_size_bytes: int
    """Hard upper bound on the output file size."""

    max_duration_seconds: float | None = None
    """Maximum playback duration, or None when the platform has no limit."""

    output_suffix: str = ""
    """Appended to the source stem when naming the output file."""

    display_name: str | None = None
    """Human-readable name for listings (defaults to the capitalized name)."""

    def __post_init__(self) -> None:
        """Validate profile values."""
        if not self.name:
            raise ValueError("Platform name must not be empty")
        if self.max_file_size_bytes <= 0:
            raise ValueError(
                f"max_file_size_bytes must be positive, got {self.max_file_size_bytes}"
            )
        if self.max_duration_seconds is not None and self.max_duration_seconds <= 0:
            raise ValueError(
                "max_duration_seconds must be positive, "
                f"got {self.max_duration_seconds}"
            )

    @property
    def label(self) -> str:
        """Name used in user-facing output."""
        return self.display_name or self.name.capitalize()


@dataclass(frozen=True)
class SourceVideo:
    """Properties of an input video, as reported by the probing layer."""

    path: Path
    duration_seconds: float
    width: int
    height: int
    file_size_bytes: int = 0

    def __post_init__(self) -> None:
        """Validate probe values."""
        if self.duration_seconds <= 0:
            raise ValueError(
                f"duration_seconds must be positive, got {self.duration_seconds}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Resolution must be positive, got {self.width}x{self.height}"
            )
        if self.file_size_bytes < 0:
            raise ValueError(
                f"file_size_bytes must not be negative, got {self.file_size_bytes}"
            )

    @property
    def file_name(self) -> str:
        """Base name of the source file."""
        return self.path.name


@dataclass(frozen=True)
class EncodePlan:
    """Encoder parameters derived from a source video and a platform."""

    effective_duration_seconds: float
    """Duration the output is planned against, after any speed-up."""

    target_bitrate_bps: int
    """Video bitrate budget in bits per second (never below the floor)."""

    crf: int
    """Constant rate factor for single-pass encodes."""

    use_two_pass: bool
    """Whether the encode runs an analysis pass before the final pass."""

    speed_factor: float | None = None
    """Playback speed-up (>= 1), or None when no speed change is needed."""

    target_resolution: tuple[int, int] | None = None
    """(width, height) to scale and pad to, or None to keep the source size."""


@dataclass
class EncodeSessionState:
    """Observable state of a controller's current or last run."""

    progress: float = 0.0
    is_running: bool = False
    last_error: str | None = None
    output_path: Path | None = None
    output_size_bytes: int = 0
    phase: SessionPhase = field(default=SessionPhase.IDLE)
