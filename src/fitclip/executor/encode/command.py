"""FFmpeg argument building for platform-constrained encodes.

Builds argument lists as plain list[str], without the ffmpeg executable
itself. Keeping construction separate from execution means the exact
arguments can be logged, printed by `fitclip plan`, and unit-tested without
running any process.

Flag order is significant: every flag is immediately followed by its value,
and the three renderings (single pass, pass 1, pass 2) keep the same order
for the options they share.
"""

from __future__ import annotations

import platform
import shlex
from pathlib import Path

from fitclip.domain.enums import PassKind
from fitclip.domain.models import EncodePlan

from .filters import build_audio_filters, build_video_filters

VIDEO_ENCODER = "libx264"
VIDEO_PROFILE = "main"
PIXEL_FORMAT = "yuv420p"
AUDIO_ENCODER = "aac"
AUDIO_BITRATE = "128k"


def null_sink() -> str:
    """Null output device for the analysis pass."""
    return "NUL" if platform.system() == "Windows" else "/dev/null"


def _video_codec_args() -> list[str]:
    return (
        ["-c:v", VIDEO_ENCODER]
        + ["-profile:v", VIDEO_PROFILE]
        + ["-pix_fmt", PIXEL_FORMAT]
    )


def _rate_control_args(plan: EncodePlan) -> list[str]:
    """VBV limits: maxrate at the target, buffer of twice the target."""
    bitrate = plan.target_bitrate_bps
    return ["-maxrate", str(bitrate), "-bufsize", str(bitrate * 2)]


def _video_filter_args(plan: EncodePlan) -> list[str]:
    filters = build_video_filters(plan)
    return ["-vf", ",".join(filters)] if filters else []


def _audio_filter_args(plan: EncodePlan) -> list[str]:
    filters = build_audio_filters(plan)
    return ["-af", ",".join(filters)] if filters else []


def _audio_output_args(output_path: Path) -> list[str]:
    return (
        ["-c:a", AUDIO_ENCODER, "-b:a", AUDIO_BITRATE]
        + ["-movflags", "+faststart"]
        + [str(output_path)]
    )


def build_single_pass_args(
    plan: EncodePlan, input_path: Path, output_path: Path
) -> list[str]:
    """Build arguments for a CRF-guided single-pass encode.

    Args:
        plan: Encode plan.
        input_path: Source video.
        output_path: Final .mp4 output.

    Returns:
        Argument list (without the ffmpeg executable).
    """
    args = ["-y", "-i", str(input_path)]
    args.extend(_video_codec_args())
    args.extend(["-crf", str(plan.crf)])
    args.extend(_rate_control_args(plan))
    args.extend(_video_filter_args(plan))
    args.extend(_audio_filter_args(plan))
    args.extend(_audio_output_args(output_path))
    return args


def build_pass1_args(plan: EncodePlan, input_path: Path) -> list[str]:
    """Build arguments for the analysis pass of a two-pass encode.

    Targets the bitrate directly, drops audio and discards the encoded
    output; only the pass statistics written by ffmpeg are kept.
    """
    args = ["-y", "-i", str(input_path)]
    args.extend(_video_codec_args())
    args.extend(["-b:v", str(plan.target_bitrate_bps)])
    args.extend(_rate_control_args(plan))
    args.extend(_video_filter_args(plan))
    args.extend(["-pass", "1"])
    args.extend(["-an"])
    args.extend(["-f", "null", null_sink()])
    return args


def build_pass2_args(
    plan: EncodePlan, input_path: Path, output_path: Path
) -> list[str]:
    """Build arguments for the final pass of a two-pass encode.

    Uses the statistics from pass 1 and adds the audio track.
    """
    args = ["-y", "-i", str(input_path)]
    args.extend(_video_codec_args())
    args.extend(["-b:v", str(plan.target_bitrate_bps)])
    args.extend(_rate_control_args(plan))
    args.extend(_video_filter_args(plan))
    args.extend(["-pass", "2"])
    args.extend(_audio_filter_args(plan))
    args.extend(_audio_output_args(output_path))
    return args


def build_pass_args(
    plan: EncodePlan,
    input_path: Path,
    output_path: Path,
    pass_kind: PassKind,
) -> list[str]:
    """Build arguments for one invocation of a job."""
    if pass_kind is PassKind.FIRST:
        return build_pass1_args(plan, input_path)
    if pass_kind is PassKind.SECOND:
        return build_pass2_args(plan, input_path, output_path)
    return build_single_pass_args(plan, input_path, output_path)


def passes_for_plan(plan: EncodePlan) -> tuple[PassKind, ...]:
    """Invocations a plan needs, in execution order."""
    if plan.use_two_pass:
        return (PassKind.FIRST, PassKind.SECOND)
    return (PassKind.SINGLE,)


def command_as_string(cmd: list[str]) -> str:
    """Shell-quoted version of the command for logging and display."""
    return shlex.join(cmd)
