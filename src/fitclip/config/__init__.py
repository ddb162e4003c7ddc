"""Configuration package for fitclip."""

from fitclip.config.loader import (
    ConfigError,
    clear_config_cache,
    get_config,
    get_default_config_path,
)
from fitclip.config.models import (
    EncoderConfig,
    FitclipConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from fitclip.config.platforms import (
    BUILTIN_PLATFORMS,
    PlatformError,
    PlatformNotFoundError,
    get_platform,
    get_platforms,
)

__all__ = [
    "BUILTIN_PLATFORMS",
    "ConfigError",
    "EncoderConfig",
    "FitclipConfig",
    "LoggingConfig",
    "PlatformError",
    "PlatformNotFoundError",
    "ToolPathsConfig",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "get_platform",
    "get_platforms",
]
