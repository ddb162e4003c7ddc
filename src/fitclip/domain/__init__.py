"""Domain types for fitclip."""

from fitclip.domain.enums import PassKind, SessionPhase
from fitclip.domain.models import (
    EncodePlan,
    EncodeSessionState,
    PlatformProfile,
    SourceVideo,
)

__all__ = [
    "EncodePlan",
    "EncodeSessionState",
    "PassKind",
    "PlatformProfile",
    "SessionPhase",
    "SourceVideo",
]
