"""Encode package for platform-constrained video compression via FFmpeg.

Module organization:
- planner.py: Pure planning decisions (bitrate, CRF, scaling, speed, passes)
- filters.py: Video and audio filter chains
- command.py: FFmpeg argument construction for each pass
- types.py: Data classes (TwoPassContext, CompressionOutcome)
- session.py: EncodeSession, the encoder process runner

Usage:
    from fitclip.executor.encode import create_plan, build_pass_args, EncodeSession
"""

from .command import (
    build_pass1_args,
    build_pass2_args,
    build_pass_args,
    build_single_pass_args,
    command_as_string,
    passes_for_plan,
)
from .filters import build_audio_filters, build_video_filters, decompose_tempo
from .planner import create_plan
from .session import EncodeSession
from .types import CompressionOutcome, TwoPassContext

__all__ = [
    # Planning
    "create_plan",
    # Filters
    "build_audio_filters",
    "build_video_filters",
    "decompose_tempo",
    # Command building
    "build_pass1_args",
    "build_pass2_args",
    "build_pass_args",
    "build_single_pass_args",
    "command_as_string",
    "passes_for_plan",
    # Types
    "CompressionOutcome",
    "TwoPassContext",
    # Session
    "EncodeSession",
]
