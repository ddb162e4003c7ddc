"""Filter chain construction for FFmpeg encodes.

Builds the -vf and -af filter chains for speed changes and scaling. The same
video chain is used by every pass of a job so the analysis pass sees exactly
the frames the final pass encodes.
"""

from fitclip.domain.models import EncodePlan

# Largest tempo change applied by a single atempo stage
MAX_ATEMPO_STAGE = 2.0

# Remainders this close to 1.0 are treated as fully consumed
_TEMPO_EPSILON = 1e-9


def format_factor(value: float) -> str:
    """Render a filter factor with four decimal places."""
    return f"{value:.4f}"


def build_video_filters(plan: EncodePlan) -> list[str]:
    """Build the video filter chain for a plan.

    A speed-up rescales presentation timestamps (PTS / speed). A target
    resolution scales the picture to fit while keeping its aspect ratio, then
    pads it to exactly the target size with the content centered.

    Returns:
        Filter expressions in application order (possibly empty).
    """
    filters: list[str] = []

    if plan.speed_factor is not None:
        filters.append(f"setpts=PTS/{format_factor(plan.speed_factor)}")

    if plan.target_resolution is not None:
        width, height = plan.target_resolution
        filters.append(f"scale={width}:{height}:force_original_aspect_ratio=decrease")
        filters.append(f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2")

    return filters


def decompose_tempo(factor: float) -> list[float]:
    """Split a tempo change into stages of at most MAX_ATEMPO_STAGE.

    Each stage takes as much of the remaining factor as it can, and the
    remainder is divided by it. The stage factors multiply back to the
    original factor.

    Example:
        decompose_tempo(5.0) -> [2.0, 2.0, 1.25]
    """
    stages: list[float] = []
    remaining = factor
    while remaining > 1.0 + _TEMPO_EPSILON:
        stage = min(remaining, MAX_ATEMPO_STAGE)
        stages.append(stage)
        remaining /= stage
    return stages


def build_audio_filters(plan: EncodePlan) -> list[str]:
    """Build the audio filter chain for a plan.

    Returns:
        Chained atempo stages matching the plan's speed factor, or an empty
        list when playback speed is unchanged.
    """
    if plan.speed_factor is None:
        return []
    return [f"atempo={format_factor(stage)}" for stage in decompose_tempo(plan.speed_factor)]
