"""MediaIntrospector interface for source video probing."""

from pathlib import Path
from typing import Protocol

from fitclip.domain.models import SourceVideo


class MediaIntrospectionError(Exception):
    """Raised when media introspection fails."""

    pass


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations.

    Implementations read the properties compression planning needs
    (duration, display resolution, file size) from a video file.
    """

    def probe(self, path: Path) -> SourceVideo:
        """Read source video properties.

        Args:
            path: Path to the video file.

        Returns:
            SourceVideo describing the file.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        ...
