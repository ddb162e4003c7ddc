"""Unit tests for the ffprobe introspector."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fitclip.introspector.ffprobe import (
    DEFAULT_RESOLUTION,
    FFprobeIntrospector,
    parse_probe_output,
)
from fitclip.introspector.interface import MediaIntrospectionError

FFPROBE = Path("/usr/bin/ffprobe")


def probe_data(stream: dict | None = None, duration: str | None = "20.5") -> dict:
    streams = [{"codec_type": "audio"}]
    if stream is not None:
        streams.insert(0, {"codec_type": "video", **stream})
    fmt = {} if duration is None else {"duration": duration}
    return {"streams": streams, "format": fmt}


class TestParseProbeOutput:
    """Tests for parse_probe_output."""

    def test_basic_video(self) -> None:
        video = parse_probe_output(
            Path("/v/clip.mov"), probe_data({"width": 1920, "height": 1080}), 1000
        )
        assert video.duration_seconds == 20.5
        assert (video.width, video.height) == (1920, 1080)
        assert video.file_size_bytes == 1000

    @pytest.mark.parametrize("rotation", ["90", "-90", "270"])
    def test_rotation_tag_swaps_dimensions(self, rotation: str) -> None:
        stream = {"width": 1920, "height": 1080, "tags": {"rotate": rotation}}
        video = parse_probe_output(Path("/v/clip.mov"), probe_data(stream))
        assert (video.width, video.height) == (1080, 1920)

    def test_display_matrix_rotation(self) -> None:
        stream = {
            "width": 1920,
            "height": 1080,
            "side_data_list": [{"side_data_type": "Display Matrix", "rotation": -90}],
        }
        video = parse_probe_output(Path("/v/clip.mov"), probe_data(stream))
        assert (video.width, video.height) == (1080, 1920)

    def test_upside_down_keeps_dimensions(self) -> None:
        stream = {"width": 1920, "height": 1080, "tags": {"rotate": "180"}}
        video = parse_probe_output(Path("/v/clip.mov"), probe_data(stream))
        assert (video.width, video.height) == (1920, 1080)

    def test_stream_duration_fallback(self) -> None:
        stream = {"width": 640, "height": 480, "duration": "12.0"}
        video = parse_probe_output(Path("/v/clip.avi"), probe_data(stream, duration="N/A"))
        assert video.duration_seconds == 12.0

    def test_no_video_stream_assumes_1080p(self) -> None:
        video = parse_probe_output(Path("/v/clip.mov"), probe_data(None))
        assert (video.width, video.height) == DEFAULT_RESOLUTION

    def test_missing_duration_raises(self) -> None:
        with pytest.raises(MediaIntrospectionError, match="duration"):
            parse_probe_output(
                Path("/v/clip.mov"), probe_data({"width": 2, "height": 2}, None)
            )


class TestFFprobeIntrospector:
    """Tests for FFprobeIntrospector.probe."""

    def test_requires_ffprobe(self) -> None:
        with pytest.raises(MediaIntrospectionError, match="ffprobe is not installed"):
            FFprobeIntrospector(None)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MediaIntrospectionError, match="File not found"):
            FFprobeIntrospector(FFPROBE).probe(tmp_path / "missing.mov")

    @patch("fitclip.introspector.ffprobe.subprocess.run")
    def test_probe_runs_ffprobe(self, mock_run: MagicMock, source_file: Path) -> None:
        mock_run.return_value = MagicMock(
            stdout=json.dumps(probe_data({"width": 1280, "height": 720}))
        )

        video = FFprobeIntrospector(FFPROBE).probe(source_file)

        assert video.path == source_file
        assert video.file_size_bytes == 4096
        cmd = mock_run.call_args.args[0]
        assert cmd[0] == str(FFPROBE)
        assert cmd[-1] == str(source_file)
        assert "-show_format" in cmd

    @patch("fitclip.introspector.ffprobe.subprocess.run")
    def test_ffprobe_failure(self, mock_run: MagicMock, source_file: Path) -> None:
        mock_run.side_effect = subprocess.CalledProcessError(
            1, "ffprobe", stderr="Invalid data found when processing input"
        )
        with pytest.raises(MediaIntrospectionError, match="Invalid data found"):
            FFprobeIntrospector(FFPROBE).probe(source_file)

    @patch("fitclip.introspector.ffprobe.subprocess.run")
    def test_invalid_json(self, mock_run: MagicMock, source_file: Path) -> None:
        mock_run.return_value = MagicMock(stdout="not json")
        with pytest.raises(MediaIntrospectionError, match="Invalid ffprobe output"):
            FFprobeIntrospector(FFPROBE).probe(source_file)

    @patch("fitclip.introspector.ffprobe.subprocess.run")
    def test_timeout(self, mock_run: MagicMock, source_file: Path) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired("ffprobe", 60)
        with pytest.raises(MediaIntrospectionError, match="timed out"):
            FFprobeIntrospector(FFPROBE).probe(source_file)
