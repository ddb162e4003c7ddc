"""Encode planning decisions.

This module derives encoder parameters from a source video and a platform
profile. Every function here is pure: the same inputs always produce the
same plan, and nothing touches the filesystem or spawns processes.
"""

import logging

from fitclip.domain.models import EncodePlan, PlatformProfile, SourceVideo

logger = logging.getLogger(__name__)

# Fraction of the platform's size limit used as the byte budget
SIZE_SAFETY_MARGIN = 0.95

# Audio is always encoded as 128 kbps AAC
AUDIO_BITRATE_BPS = 128_000

# Lower bound on the video bitrate budget
MIN_VIDEO_BITRATE_BPS = 500_000

# Below this bitrate, sources larger than 720p are downscaled to 720p
LOW_BITRATE_THRESHOLD_BPS = 1_000_000

# Below this bitrate, two-pass encoding is used
TWO_PASS_THRESHOLD_BPS = 4_000_000

HD_720 = (1280, 720)
HD_1080 = (1920, 1080)


def effective_duration(source: SourceVideo, platform: PlatformProfile) -> float:
    """Duration the output is planned against.

    This is the platform's maximum duration when the source is longer than
    it, otherwise the source duration.
    """
    max_duration = platform.max_duration_seconds
    if max_duration is not None and source.duration_seconds > max_duration:
        return max_duration
    return source.duration_seconds


def speed_factor(source: SourceVideo, platform: PlatformProfile) -> float | None:
    """Playback speed-up needed to fit the platform's duration limit.

    Returns:
        source duration / effective duration when the source must be sped
        up, or None when it already fits.
    """
    effective = effective_duration(source, platform)
    if effective < source.duration_seconds:
        return source.duration_seconds / effective
    return None


def target_bitrate(source: SourceVideo, platform: PlatformProfile) -> int:
    """Video bitrate budget in bits per second.

    95% of the platform size limit is split between a fixed 128 kbps audio
    track and the video stream over the effective duration. The result is
    never below MIN_VIDEO_BITRATE_BPS.
    """
    duration = effective_duration(source, platform)
    target_bits = platform.max_file_size_bytes * SIZE_SAFETY_MARGIN * 8
    audio_bits = AUDIO_BITRATE_BPS * duration
    video_bits = target_bits - audio_bits
    return max(MIN_VIDEO_BITRATE_BPS, int(video_bits / duration))


def target_resolution(
    source: SourceVideo, bitrate_bps: int
) -> tuple[int, int] | None:
    """Output frame size, or None to keep the source resolution.

    Low-bitrate encodes larger than 720p go down to 720p. Anything else
    larger than 1080p is capped at 1080p.
    """
    width, height = source.width, source.height
    if bitrate_bps < LOW_BITRATE_THRESHOLD_BPS and (
        width > HD_720[0] or height > HD_720[1]
    ):
        return HD_720
    if width > HD_1080[0] or height > HD_1080[1]:
        return HD_1080
    return None


def crf_for_duration(duration_seconds: float) -> int:
    """Constant rate factor for a given output duration.

    Short clips get more bits per frame, so quality can be higher.
    """
    if duration_seconds < 30:
        return 20
    if duration_seconds < 120:
        return 23
    return 26


def use_two_pass(bitrate_bps: int) -> bool:
    """Whether the bitrate budget is tight enough to warrant two passes."""
    return bitrate_bps < TWO_PASS_THRESHOLD_BPS


def create_plan(source: SourceVideo, platform: PlatformProfile) -> EncodePlan:
    """Compute the encode plan for a source video and platform.

    Args:
        source: Probed source video properties.
        platform: Target platform constraints.

    Returns:
        EncodePlan with bitrate, CRF, scaling, speed and pass strategy.
    """
    duration = effective_duration(source, platform)
    bitrate = target_bitrate(source, platform)
    plan = EncodePlan(
        effective_duration_seconds=duration,
        target_bitrate_bps=bitrate,
        crf=crf_for_duration(duration),
        use_two_pass=use_two_pass(bitrate),
        speed_factor=speed_factor(source, platform),
        target_resolution=target_resolution(source, bitrate),
    )

    logger.debug(
        "Planned %s for %s: bitrate=%d crf=%d two_pass=%s speed=%s resolution=%s",
        source.file_name,
        platform.name,
        plan.target_bitrate_bps,
        plan.crf,
        plan.use_two_pass,
        f"{plan.speed_factor:.4f}" if plan.speed_factor else None,
        plan.target_resolution,
    )
    return plan
