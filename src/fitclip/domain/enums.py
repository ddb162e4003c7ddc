"""Enumerations shared across the encode pipeline."""

from enum import Enum


class PassKind(Enum):
    """Which encoder invocation of a job is running."""

    SINGLE = "single"
    FIRST = "first"
    SECOND = "second"


class SessionPhase(Enum):
    """Lifecycle phase of a compression run.

    Idle -> Running -> Completed for single-pass jobs, and
    Idle -> RunningPass1 -> RunningPass2 -> Completed for two-pass jobs.
    Cancelled and Failed are reachable from any running phase.
    """

    IDLE = "idle"
    RUNNING = "running"
    RUNNING_PASS1 = "running_pass1"
    RUNNING_PASS2 = "running_pass2"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_running(self) -> bool:
        """True for the three running phases."""
        return self in (
            SessionPhase.RUNNING,
            SessionPhase.RUNNING_PASS1,
            SessionPhase.RUNNING_PASS2,
        )

    @property
    def is_terminal(self) -> bool:
        """True once a run has reached completed, cancelled or failed."""
        return self in (
            SessionPhase.COMPLETED,
            SessionPhase.CANCELLED,
            SessionPhase.FAILED,
        )
