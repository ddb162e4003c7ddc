"""Unit tests for external tool detection."""

from pathlib import Path
from unittest.mock import patch

import pytest

from fitclip.jobs.exceptions import ToolUnavailableError
from fitclip.tools.detection import (
    find_tool,
    locate_ffmpeg,
    locate_ffprobe,
    require_ffmpeg,
)


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestFindTool:
    """Tests for find_tool lookup order."""

    def test_configured_path_wins(self, tmp_path: Path) -> None:
        configured = make_executable(tmp_path / "custom" / "ffmpeg")
        well_known = make_executable(tmp_path / "bin" / "ffmpeg")
        assert find_tool("ffmpeg", configured, [well_known]) == configured

    def test_non_executable_configured_path_falls_through(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        configured = tmp_path / "ffmpeg"
        configured.write_text("not executable")
        configured.chmod(0o644)
        well_known = make_executable(tmp_path / "bin" / "ffmpeg")

        assert find_tool("ffmpeg", configured, [well_known]) == well_known
        assert "not an executable file" in caplog.text

    def test_search_paths_before_path_lookup(self, tmp_path: Path) -> None:
        well_known = make_executable(tmp_path / "bin" / "ffmpeg")
        with patch("fitclip.tools.detection.shutil.which") as mock_which:
            assert find_tool("ffmpeg", None, [tmp_path / "missing", well_known]) == well_known
        mock_which.assert_not_called()

    def test_falls_back_to_path(self) -> None:
        with patch(
            "fitclip.tools.detection.shutil.which", return_value="/somewhere/ffmpeg"
        ):
            assert find_tool("ffmpeg", None, []) == Path("/somewhere/ffmpeg")

    def test_not_found(self) -> None:
        with patch("fitclip.tools.detection.shutil.which", return_value=None):
            assert find_tool("ffmpeg", None, []) is None


class TestLocateFfmpeg:
    """Tests for the ffmpeg and ffprobe helpers."""

    def test_locate_returns_none_when_missing(self, tmp_path: Path) -> None:
        with patch("fitclip.tools.detection.shutil.which", return_value=None):
            assert locate_ffmpeg(None, [tmp_path / "ffmpeg"]) is None

    def test_require_raises_with_hint(self, tmp_path: Path) -> None:
        with patch("fitclip.tools.detection.shutil.which", return_value=None):
            with pytest.raises(ToolUnavailableError, match="FFmpeg not found") as exc_info:
                require_ffmpeg(None, [tmp_path / "ffmpeg"])
        assert "FITCLIP_FFMPEG_PATH" in str(exc_info.value)

    def test_require_returns_path(self, tmp_path: Path) -> None:
        ffmpeg = make_executable(tmp_path / "ffmpeg")
        assert require_ffmpeg(ffmpeg) == ffmpeg

    def test_ffprobe_next_to_ffmpeg(self, tmp_path: Path) -> None:
        ffmpeg = make_executable(tmp_path / "bin" / "ffmpeg")
        ffprobe = make_executable(tmp_path / "bin" / "ffprobe")
        assert locate_ffprobe(None, ffmpeg) == ffprobe
