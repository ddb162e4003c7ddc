"""Source video probing."""

from fitclip.introspector.ffprobe import FFprobeIntrospector, parse_probe_output
from fitclip.introspector.interface import MediaIntrospectionError, MediaIntrospector

__all__ = [
    "FFprobeIntrospector",
    "MediaIntrospectionError",
    "MediaIntrospector",
    "parse_probe_output",
]
