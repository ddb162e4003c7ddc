"""Shared test fixtures for fitclip."""

from pathlib import Path

import pytest

from fitclip.config.loader import clear_config_cache
from fitclip.domain.models import PlatformProfile, SourceVideo


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Isolate tests from config files cached by earlier tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Create a placeholder source video file."""
    path = tmp_path / "clip.mov"
    path.write_bytes(b"\x00" * 4096)
    return path


@pytest.fixture
def short_source(source_file: Path) -> SourceVideo:
    """20 second 720p source."""
    return SourceVideo(
        path=source_file,
        duration_seconds=20.0,
        width=1280,
        height=720,
        file_size_bytes=4096,
    )


@pytest.fixture
def long_4k_source(source_file: Path) -> SourceVideo:
    """Five minute 4K source."""
    return SourceVideo(
        path=source_file,
        duration_seconds=300.0,
        width=3840,
        height=2160,
        file_size_bytes=4096,
    )


@pytest.fixture
def tiny_platform() -> PlatformProfile:
    """A 10 MiB platform with no duration limit, forcing low bitrates."""
    return PlatformProfile(
        name="tiny",
        max_file_size_bytes=10 * 1024 * 1024,
        output_suffix="_tiny",
    )
