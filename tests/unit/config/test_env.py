"""Tests for FITCLIP_* environment overrides."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fitclip.config.env import EnvReader


class TestRaw:
    """Tests for EnvReader.raw."""

    def test_reads_prefixed_variable(self) -> None:
        reader = EnvReader(env={"FITCLIP_LOG_LEVEL": "debug"})
        assert reader.raw("LOG_LEVEL") == "debug"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_value_is_unset(self, value: str) -> None:
        assert EnvReader(env={"FITCLIP_LOG_FILE": value}).raw("LOG_FILE") is None

    def test_unprefixed_variable_is_ignored(self) -> None:
        assert EnvReader(env={"LOG_LEVEL": "debug"}).raw("LOG_LEVEL") is None


class TestToolPath:
    """Tests for EnvReader.tool_path."""

    def test_returns_existing_executable(self, tmp_path: Path) -> None:
        ffmpeg = tmp_path / "ffmpeg"
        ffmpeg.write_text("")
        reader = EnvReader(env={"FITCLIP_FFMPEG_PATH": str(ffmpeg)})
        assert reader.tool_path("ffmpeg") == ffmpeg

    def test_ignores_missing_executable(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        reader = EnvReader(env={"FITCLIP_FFPROBE_PATH": str(tmp_path / "ffprobe")})
        with caplog.at_level(logging.WARNING):
            assert reader.tool_path("ffprobe") is None
        assert "FITCLIP_FFPROBE_PATH points to a missing file" in caplog.text


class TestFilePath:
    """Tests for EnvReader.file_path."""

    def test_allows_missing_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "fitclip.log"
        reader = EnvReader(env={"FITCLIP_LOG_FILE": str(log_file)})
        assert reader.file_path("LOG_FILE") == log_file

    def test_expands_tilde(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        reader = EnvReader(env={"FITCLIP_PLATFORMS_FILE": "~/platforms.yaml"})
        assert reader.file_path("PLATFORMS_FILE") == tmp_path / "platforms.yaml"


class TestLogLevel:
    def test_normalizes_case(self) -> None:
        assert EnvReader(env={"FITCLIP_LOG_LEVEL": "WARNING"}).log_level() == "warning"

    def test_unset(self) -> None:
        assert EnvReader(env={}).log_level() is None


class TestTerminateGrace:
    """Tests for EnvReader.terminate_grace."""

    def test_parses_seconds(self) -> None:
        reader = EnvReader(env={"FITCLIP_TERMINATE_GRACE": "2.5"})
        assert reader.terminate_grace() == 2.5

    @pytest.mark.parametrize("value", ["soon", "-1"])
    def test_ignores_invalid_values(
        self, value: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        reader = EnvReader(env={"FITCLIP_TERMINATE_GRACE": value})
        with caplog.at_level(logging.WARNING):
            assert reader.terminate_grace() is None
        assert "Ignoring FITCLIP_TERMINATE_GRACE" in caplog.text
