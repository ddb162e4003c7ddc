"""Terminal progress display for compression runs."""

from __future__ import annotations

import sys

from fitclip.core.formatting import format_percent
from fitclip.domain.enums import SessionPhase
from fitclip.jobs.controller import StateSnapshot

_PHASE_LABELS = {
    SessionPhase.RUNNING: "Compressing",
    SessionPhase.RUNNING_PASS1: "Analyzing (pass 1 of 2)",
    SessionPhase.RUNNING_PASS2: "Encoding (pass 2 of 2)",
}


class StderrProgressDisplay:
    """State observer that writes in-place progress to stderr.

    Subscribe an instance to a CompressionController; call finish() once
    the run is over to end the progress line.
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize the display.

        Args:
            enabled: If False, suppresses output (for JSON mode or tests).
        """
        self.enabled = enabled
        self._last_line = ""
        self._started = False

    def __call__(self, snapshot: StateSnapshot) -> None:
        if not self.enabled or not snapshot.is_running:
            return
        label = _PHASE_LABELS.get(snapshot.phase, "Compressing")
        line = f"\r{label}: {format_percent(snapshot.progress):>4}"
        if line == self._last_line:
            return
        self._last_line = line
        self._started = True
        sys.stderr.write(line)
        sys.stderr.flush()

    def finish(self) -> None:
        """End the progress line."""
        if self.enabled and self._started:
            sys.stderr.write("\n")
            sys.stderr.flush()
