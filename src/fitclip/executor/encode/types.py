"""Encode data types and result classes."""

import logging
from dataclasses import dataclass
from pathlib import Path

from fitclip.domain.enums import SessionPhase

logger = logging.getLogger(__name__)

# File names x264 writes into the working directory during a two-pass encode
# when no -passlogfile is given
PASS_LOG_FILES = ("ffmpeg2pass-0.log", "ffmpeg2pass-0.log.mbtree")


@dataclass
class TwoPassContext:
    """Context for two-pass encoding.

    Two-pass encoding requires running FFmpeg twice:
    - Pass 1: Analyze video, output to the null device, write the pass log
    - Pass 2: Encode video using the log for accurate bitrate targeting

    Both passes run with working_directory as their cwd, which is where
    ffmpeg leaves its pass log files.
    """

    working_directory: Path

    def log_files(self) -> list[Path]:
        """Pass log paths ffmpeg creates for this context."""
        return [self.working_directory / name for name in PASS_LOG_FILES]

    def cleanup(self) -> None:
        """Remove pass log files after encoding."""
        for log_file in self.log_files():
            if log_file.exists():
                try:
                    log_file.unlink()
                    logger.debug("Cleaned up pass log file: %s", log_file)
                except OSError as e:
                    logger.warning(
                        "Could not clean up pass log file %s: %s", log_file, e
                    )


@dataclass(frozen=True)
class CompressionOutcome:
    """Result of one compress() request."""

    phase: SessionPhase
    output_path: Path | None = None
    output_size_bytes: int = 0
    error_message: str | None = None

    @property
    def success(self) -> bool:
        """True when the run completed and produced an output file."""
        return self.phase is SessionPhase.COMPLETED

    @property
    def cancelled(self) -> bool:
        """True when the run was cancelled before it finished."""
        return self.phase is SessionPhase.CANCELLED
