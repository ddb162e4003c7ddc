"""Platform profile registry.

Built-in profiles cover the platforms fitclip ships with. Additional
profiles (or overrides of the built-ins) can be declared in a YAML file:

    platforms:
      mastodon:
        max_file_size_mb: 40
        max_duration_seconds: 600
        output_suffix: _mastodon
        display_name: Mastodon

The file is validated with Pydantic before any profile is constructed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fitclip.domain.models import PlatformProfile

if TYPE_CHECKING:
    from fitclip.config.models import FitclipConfig

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

TWITTER = PlatformProfile(
    name="twitter",
    max_file_size_bytes=512 * MIB,
    max_duration_seconds=140.0,
    output_suffix="_twitter",
    display_name="Twitter",
)

DISCORD = PlatformProfile(
    name="discord",
    max_file_size_bytes=50 * MIB,
    max_duration_seconds=None,
    output_suffix="_discord",
    display_name="Discord",
)

BUILTIN_PLATFORMS: dict[str, PlatformProfile] = {
    TWITTER.name: TWITTER,
    DISCORD.name: DISCORD,
}


class PlatformError(Exception):
    """Error loading or validating platform profiles."""


class PlatformNotFoundError(PlatformError):
    """Requested platform does not exist."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown platform '{name}'. Available: {', '.join(available)}"
        )


class PlatformProfileModel(BaseModel):
    """Pydantic model for one platform entry in the profiles file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_file_size_mb: float | None = Field(default=None, gt=0)
    max_file_size_bytes: int | None = Field(default=None, gt=0)
    max_duration_seconds: float | None = Field(default=None, gt=0)
    output_suffix: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_.-]*$")
    display_name: str | None = None

    @model_validator(mode="after")
    def check_size(self) -> PlatformProfileModel:
        """Exactly one of the two size fields must be given."""
        if (self.max_file_size_mb is None) == (self.max_file_size_bytes is None):
            raise ValueError(
                "Specify exactly one of max_file_size_mb or max_file_size_bytes"
            )
        return self

    def to_profile(self, name: str) -> PlatformProfile:
        """Build the immutable domain profile."""
        if self.max_file_size_bytes is not None:
            size = self.max_file_size_bytes
        else:
            size = int(self.max_file_size_mb * MIB)
        return PlatformProfile(
            name=name,
            max_file_size_bytes=size,
            max_duration_seconds=self.max_duration_seconds,
            output_suffix=(
                self.output_suffix if self.output_suffix is not None else f"_{name}"
            ),
            display_name=self.display_name,
        )


class PlatformsFileModel(BaseModel):
    """Pydantic model for the whole profiles file."""

    model_config = ConfigDict(extra="forbid")

    platforms: dict[str, PlatformProfileModel] = Field(default_factory=dict)


def load_platforms_file(path: Path) -> dict[str, PlatformProfile]:
    """Load platform profiles from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Mapping of lower-cased platform name to profile.

    Raises:
        PlatformError: If the file is missing, not valid YAML, or fails
            validation.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise PlatformError(f"Cannot read platforms file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise PlatformError(f"Invalid YAML in platforms file {path}: {e}") from e

    if not isinstance(data, dict):
        raise PlatformError(f"Platforms file {path} must be a YAML mapping")

    try:
        parsed = PlatformsFileModel.model_validate(data)
    except ValidationError as e:
        raise PlatformError(f"Invalid platforms file {path}: {e}") from e

    profiles: dict[str, PlatformProfile] = {}
    for raw_name, entry in parsed.platforms.items():
        name = raw_name.casefold()
        profiles[name] = entry.to_profile(name)
    logger.debug("Loaded %d platform profile(s) from %s", len(profiles), path)
    return profiles


def get_platforms(config: FitclipConfig | None = None) -> dict[str, PlatformProfile]:
    """Get all platform profiles, built-ins first.

    Profiles from the configured platforms file override built-ins with the
    same name.
    """
    platforms = dict(BUILTIN_PLATFORMS)
    if config is not None and config.platforms_file is not None:
        platforms.update(load_platforms_file(config.platforms_file))
    return platforms


def get_platform(
    name: str, config: FitclipConfig | None = None
) -> PlatformProfile:
    """Look up a platform profile by case-insensitive name.

    Raises:
        PlatformNotFoundError: If no profile has that name.
    """
    platforms = get_platforms(config)
    profile = platforms.get(name.casefold())
    if profile is None:
        raise PlatformNotFoundError(name, sorted(platforms))
    return profile


def describe_limits(profile: PlatformProfile) -> str:
    """Summarize a profile's limits, e.g. "Max 512.0 MB, 2m20s"."""
    from fitclip.core.formatting import format_file_size

    label = f"Max {format_file_size(profile.max_file_size_bytes)}"
    if profile.max_duration_seconds is not None:
        total = int(profile.max_duration_seconds)
        minutes, seconds = divmod(total, 60)
        label += f", {minutes}m{seconds:02d}s" if minutes else f", {seconds}s"
    return label
