"""FFprobe-based implementation of MediaIntrospector protocol."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path
from typing import Any

from fitclip.domain.models import SourceVideo
from fitclip.introspector.interface import MediaIntrospectionError
from fitclip.tools.detection import INSTALL_HINTS

logger = logging.getLogger(__name__)

# Resolution assumed when the file has no video stream
DEFAULT_RESOLUTION = (1920, 1080)

PROBE_TIMEOUT_SECONDS = 60


def _rotation(stream: dict[str, Any]) -> int:
    """Rotation in degrees from stream tags or the display matrix side data."""
    rotate = stream.get("tags", {}).get("rotate")
    if rotate is not None:
        try:
            return int(float(rotate))
        except ValueError:
            return 0
    for side_data in stream.get("side_data_list", []):
        if "rotation" in side_data:
            try:
                return int(float(side_data["rotation"]))
            except (TypeError, ValueError):
                return 0
    return 0


def _display_size(stream: dict[str, Any]) -> tuple[int, int]:
    """Width and height as displayed, with 90/270 degree rotation applied."""
    width = int(stream.get("width") or 0)
    height = int(stream.get("height") or 0)
    if _rotation(stream) % 180 != 0:
        return height, width
    return width, height


def _duration(data: dict[str, Any], video_stream: dict[str, Any] | None) -> float:
    """Duration from the container, falling back to the video stream."""
    candidates = [data.get("format", {}).get("duration")]
    if video_stream is not None:
        candidates.append(video_stream.get("duration"))
    for value in candidates:
        if value in (None, "N/A"):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return 0.0


def parse_probe_output(
    path: Path, data: dict[str, Any], file_size_bytes: int = 0
) -> SourceVideo:
    """Build a SourceVideo from ffprobe JSON output.

    Args:
        path: Path of the probed file.
        data: Parsed ffprobe output (-show_format -show_streams).
        file_size_bytes: Size of the file on disk.

    Raises:
        MediaIntrospectionError: If duration or resolution are unusable.
    """
    video_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type") == "video"),
        None,
    )

    if video_stream is None:
        logger.warning(
            "No video stream in %s, assuming %dx%d", path.name, *DEFAULT_RESOLUTION
        )
        width, height = DEFAULT_RESOLUTION
    else:
        width, height = _display_size(video_stream)

    duration = _duration(data, video_stream)
    if duration <= 0:
        raise MediaIntrospectionError(f"Could not determine duration of {path}")
    if width <= 0 or height <= 0:
        raise MediaIntrospectionError(f"Could not determine resolution of {path}")

    return SourceVideo(
        path=path,
        duration_seconds=duration,
        width=width,
        height=height,
        file_size_bytes=file_size_bytes,
    )


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector protocol.

    Reads the duration, display resolution and size of a source video.
    """

    def __init__(self, ffprobe_path: Path | None) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Path to ffprobe, usually from locate_ffprobe().

        Raises:
            MediaIntrospectionError: If ffprobe is not available.
        """
        if ffprobe_path is None:
            raise MediaIntrospectionError(
                f"ffprobe is not installed or not in PATH. {INSTALL_HINTS['ffprobe']}"
            )
        self._ffprobe_path = ffprobe_path

    def probe(self, path: Path) -> SourceVideo:
        """Read source video properties.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            data = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {e.stderr or e}"
            ) from e
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e
        except OSError as e:
            raise MediaIntrospectionError(f"Could not run ffprobe: {e}") from e

        try:
            file_size = path.stat().st_size
        except OSError:
            file_size = 0

        return parse_probe_output(path, data, file_size)

    def _run_ffprobe(self, path: Path) -> dict[str, Any]:
        """Run ffprobe and return parsed JSON output."""
        result = subprocess.run(  # nosec B603 - ffprobe path is validated
            [
                str(self._ffprobe_path),
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                str(path),
            ],
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            timeout=PROBE_TIMEOUT_SECONDS,
        )
        data = json.loads(result.stdout)

        if "streams" not in data or "format" not in data:
            raise MediaIntrospectionError(
                f"Incomplete ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )
        return data
