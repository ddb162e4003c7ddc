"""Helpers shared by the plan and compress commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click

from fitclip.cli.exit_codes import ExitCode
from fitclip.config.models import FitclipConfig
from fitclip.config.platforms import PlatformError, get_platform
from fitclip.core.file_utils import SUPPORTED_VIDEO_EXTENSIONS, is_supported_video
from fitclip.domain.models import PlatformProfile, SourceVideo
from fitclip.introspector import FFprobeIntrospector, MediaIntrospectionError
from fitclip.tools.detection import locate_ffmpeg, locate_ffprobe


def fail(message: str, code: ExitCode = ExitCode.GENERAL_ERROR) -> NoReturn:
    """Print an error and exit."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def resolve_platform(config: FitclipConfig, name: str) -> PlatformProfile:
    """Look up a platform profile, exiting with an error if unknown."""
    try:
        return get_platform(name, config)
    except PlatformError as e:
        fail(str(e))


def probe_source(config: FitclipConfig, path: Path) -> SourceVideo:
    """Validate and probe an input video, exiting with an error on failure."""
    if not is_supported_video(path):
        supported = ", ".join(sorted(SUPPORTED_VIDEO_EXTENSIONS))
        fail(f"Unsupported file type '{path.suffix}'. Supported: {supported}")

    ffmpeg_path = locate_ffmpeg(config.tools.ffmpeg, config.encoder.search_paths)
    ffprobe_path = locate_ffprobe(config.tools.ffprobe, ffmpeg_path)
    try:
        introspector = FFprobeIntrospector(ffprobe_path)
        return introspector.probe(path)
    except MediaIntrospectionError as e:
        fail(f"Failed to load video: {e}")
