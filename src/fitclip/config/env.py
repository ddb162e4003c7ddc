"""FITCLIP_* environment overrides.

EnvReader knows the variables fitclip reads and how each one is parsed. It
takes an optional mapping in place of os.environ so tests can inject an
environment. Empty values count as unset.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "FITCLIP_"


class EnvReader:
    """Reads fitclip's environment overrides.

    Example:
        reader = EnvReader(env={"FITCLIP_LOG_LEVEL": "debug"})
        reader.log_level()        # "debug"
        reader.tool_path("ffmpeg")  # None unless FITCLIP_FFMPEG_PATH exists
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def raw(self, name: str) -> str | None:
        """Value of FITCLIP_<name>, or None when unset or empty."""
        value = self._env.get(ENV_PREFIX + name, "").strip()
        return value or None

    def tool_path(self, tool: str) -> Path | None:
        """Executable path from FITCLIP_<TOOL>_PATH.

        A path that does not exist is ignored with a warning, so detection
        falls through to the next source instead of failing on launch.
        """
        var = f"{tool.upper()}_PATH"
        path = self.file_path(var)
        if path is not None and not path.exists():
            logger.warning(
                "%s%s points to a missing file, ignoring: %s", ENV_PREFIX, var, path
            )
            return None
        return path

    def file_path(self, name: str) -> Path | None:
        """User-expanded path from FITCLIP_<name>; it need not exist yet."""
        value = self.raw(name)
        return Path(value).expanduser() if value is not None else None

    def log_level(self) -> str | None:
        level = self.raw("LOG_LEVEL")
        return level.lower() if level is not None else None

    def terminate_grace(self) -> float | None:
        """Grace period from FITCLIP_TERMINATE_GRACE.

        Unparseable or negative values are ignored with a warning.
        """
        value = self.raw("TERMINATE_GRACE")
        if value is None:
            return None
        try:
            seconds = float(value)
        except ValueError:
            seconds = -1.0
        if seconds < 0:
            logger.warning(
                "Ignoring %sTERMINATE_GRACE=%r: expected seconds >= 0",
                ENV_PREFIX,
                value,
            )
            return None
        return seconds
