"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (FITCLIP_*)
3. Config file (~/.fitclip/config.toml)
4. Default values

Environment variables:
- FITCLIP_CONFIG_PATH: Path to config file (overrides default location)
- FITCLIP_FFMPEG_PATH: Path to ffmpeg executable
- FITCLIP_FFPROBE_PATH: Path to ffprobe executable
- FITCLIP_LOG_LEVEL: Log level (debug, info, warning, error)
- FITCLIP_LOG_FILE: Log file path
- FITCLIP_TERMINATE_GRACE: Seconds to wait before killing a cancelled encoder
- FITCLIP_PLATFORMS_FILE: YAML file with extra platform profiles
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from fitclip.config.env import EnvReader
from fitclip.config.models import (
    EncoderConfig,
    FitclipConfig,
    LoggingConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".fitclip"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigError(Exception):
    """Raised when the config file cannot be parsed in strict mode."""


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by FITCLIP_CONFIG_PATH environment variable.
    """
    return EnvReader().file_path("CONFIG_PATH") or DEFAULT_CONFIG_FILE


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file.
        strict: If True, raise ConfigError when the file cannot be parsed.

    Returns:
        Parsed dictionary. Empty dict if the file doesn't exist, or if it
        cannot be parsed and strict is False.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Results are cached with mtime-based invalidation. Use clear_config_cache()
    to force a reload regardless of mtime.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        if path in _config_cache:
            cached_config, cached_mtime = _config_cache[path]
            if current_mtime == cached_mtime:
                return cached_config

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache.

    Primarily useful for testing.
    """
    with _config_cache_lock:
        _config_cache.clear()


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> FitclipConfig:
    """Get fitclip configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides FITCLIP_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        log_level: CLI override for log level.
        log_file: CLI override for log file.
        log_format: CLI override for log format ("text" or "json").
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigError on config file parse failures.

    Returns:
        FitclipConfig with merged configuration.

    Raises:
        ConfigError: When strict=True and the config file cannot be parsed.
        ValueError: When a configured value is out of range.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    tools_file = file_config.get("tools", {})
    logging_file = file_config.get("logging", {})
    encoder_file = file_config.get("encoder", {})

    tools = ToolPathsConfig(
        ffmpeg=ffmpeg_path
        or reader.tool_path("ffmpeg")
        or _optional_path(tools_file.get("ffmpeg")),
        ffprobe=ffprobe_path
        or reader.tool_path("ffprobe")
        or _optional_path(tools_file.get("ffprobe")),
    )

    logging_config = LoggingConfig(
        level=log_level
        or reader.log_level()
        or logging_file.get("level", "info"),
        file=log_file
        or reader.file_path("LOG_FILE")
        or _optional_path(logging_file.get("file")),
        format=log_format or logging_file.get("format", "text"),
        include_stderr=bool(logging_file.get("include_stderr", False)),
        max_bytes=int(logging_file.get("max_bytes", 10_485_760)),
        backup_count=int(logging_file.get("backup_count", 5)),
    )

    grace = reader.terminate_grace()
    if grace is None:
        grace = float(encoder_file.get("terminate_grace_seconds", 5.0))
    encoder_kwargs: dict[str, Any] = {"terminate_grace_seconds": grace}
    if encoder_file.get("search_paths"):
        encoder_kwargs["search_paths"] = tuple(
            Path(p).expanduser() for p in encoder_file["search_paths"]
        )
    encoder = EncoderConfig(**encoder_kwargs)

    platforms_file = reader.file_path("PLATFORMS_FILE") or _optional_path(
        file_config.get("platforms_file")
    )

    return FitclipConfig(
        tools=tools,
        logging=logging_config,
        encoder=encoder,
        platforms_file=platforms_file,
    )
