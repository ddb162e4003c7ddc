"""Compression controller.

CompressionController sequences planning, argument building and encoder
execution for one compression request at a time, and owns the observable
run state. Observers subscribe to immutable snapshots of that state.

Every failure is recovered here and recorded as a single message in the
state record; cancellation is recorded as its own terminal phase and never
populates the error field. The only exception compress() raises is
ConcurrentCompressionError, which is a caller error.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from fitclip.config.models import FitclipConfig
from fitclip.core.file_utils import build_output_path, remove_file_if_exists
from fitclip.domain.enums import PassKind, SessionPhase
from fitclip.domain.models import (
    EncodeSessionState,
    PlatformProfile,
    SourceVideo,
)
from fitclip.executor.encode.command import build_pass_args, passes_for_plan
from fitclip.executor.encode.planner import create_plan
from fitclip.executor.encode.session import EncodeSession
from fitclip.executor.encode.types import CompressionOutcome, TwoPassContext
from fitclip.jobs.exceptions import (
    CompressionError,
    ConcurrentCompressionError,
    EncodeCancelled,
    MissingOutputError,
    ToolUnavailableError,
)
from fitclip.logging.context import job_context
from fitclip.tools.detection import INSTALL_HINTS, locate_ffmpeg

logger = logging.getLogger(__name__)

Locator = Callable[[Path | None, Iterable[Path]], Path | None]
SessionFactory = Callable[..., EncodeSession]

_PASS_PHASES = {
    PassKind.SINGLE: SessionPhase.RUNNING,
    PassKind.FIRST: SessionPhase.RUNNING_PASS1,
    PassKind.SECOND: SessionPhase.RUNNING_PASS2,
}


@dataclass(frozen=True)
class StateSnapshot:
    """Immutable copy of a controller's run state, as delivered to observers."""

    progress: float
    is_running: bool
    last_error: str | None
    output_path: Path | None
    output_size_bytes: int
    phase: SessionPhase

    @classmethod
    def from_state(cls, state: EncodeSessionState) -> StateSnapshot:
        return cls(
            progress=state.progress,
            is_running=state.is_running,
            last_error=state.last_error,
            output_path=state.output_path,
            output_size_bytes=state.output_size_bytes,
            phase=state.phase,
        )


class CompressionController:
    """Runs compression requests and exposes their state.

    Usage:
        controller = CompressionController(config=get_config())
        unsubscribe = controller.subscribe(lambda s: print(s.progress))
        outcome = await controller.compress(source, platform)

    cancel() may be called from the event loop at any time while compress()
    is awaiting; compress() then returns a CANCELLED outcome.
    """

    def __init__(
        self,
        *,
        config: FitclipConfig | None = None,
        ffmpeg_path: Path | None = None,
        locator: Locator | None = None,
        session_factory: SessionFactory = EncodeSession,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Configuration (tool paths, encoder settings). Defaults
                are used when omitted.
            ffmpeg_path: Explicit ffmpeg path, overriding the configured one.
            locator: Function used to find ffmpeg. Defaults to locate_ffmpeg.
            session_factory: Creates the EncodeSession for each request.
        """
        self._config = config or FitclipConfig()
        self._ffmpeg_path = ffmpeg_path
        self._locator = locator or locate_ffmpeg
        self._session_factory = session_factory
        self._state = EncodeSessionState()
        self._session: EncodeSession | None = None
        # True from the start of compress() until it returns, including
        # process teardown after cancel()
        self._active = False
        self._subscribers: list[Callable[[StateSnapshot], None]] = []

    @property
    def state(self) -> StateSnapshot:
        """Current run state."""
        return StateSnapshot.from_state(self._state)

    @property
    def is_active(self) -> bool:
        """True while a compress() call has not yet returned."""
        return self._active

    def subscribe(self, callback: Callable[[StateSnapshot], None]) -> Callable[[], None]:
        """Register a state observer.

        The callback receives a snapshot after every state transition and
        progress update.

        Returns:
            A function that removes the callback.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def resolve_ffmpeg(self) -> Path | None:
        """Locate the ffmpeg executable, or None when it is not installed."""
        configured = self._ffmpeg_path or self._config.tools.ffmpeg
        return self._locator(configured, self._config.encoder.search_paths)

    @property
    def tool_available(self) -> bool:
        return self.resolve_ffmpeg() is not None

    async def compress(
        self, source: SourceVideo, platform: PlatformProfile
    ) -> CompressionOutcome:
        """Compress a source video to fit a platform.

        Args:
            source: Probed source video.
            platform: Target platform constraints.

        Returns:
            The outcome of the run (COMPLETED, CANCELLED or FAILED).

        Raises:
            ConcurrentCompressionError: If another compress() is still active.
        """
        if self._active:
            raise ConcurrentCompressionError()
        self._active = True

        job_id = uuid.uuid4().hex[:8]
        try:
            with job_context(job_id, source.path):
                return await self._run(source, platform)
        finally:
            self._active = False
            self._session = None

    def cancel(self) -> None:
        """Cancel the active run, if any.

        The running flag and phase change immediately; the encoder process
        is stopped in the background and compress() returns once it has
        been reaped. Progress stays at its last reported value.
        """
        if not self._state.is_running:
            logger.debug("cancel() - no compression running")
            return

        logger.info("Cancelling compression")
        if self._session is not None:
            self._session.terminate()
        self._state.is_running = False
        self._state.phase = SessionPhase.CANCELLED
        self._notify()

    def reset(self) -> None:
        """Restore the initial state, e.g. when a new source is loaded.

        Raises:
            ConcurrentCompressionError: If a run is still active.
        """
        if self._active:
            raise ConcurrentCompressionError(
                "Cannot reset while a compression is running"
            )
        self._state = EncodeSessionState()
        self._notify()

    async def _run(
        self, source: SourceVideo, platform: PlatformProfile
    ) -> CompressionOutcome:
        ffmpeg_path = self.resolve_ffmpeg()
        if ffmpeg_path is None:
            self._state = EncodeSessionState()
            return self._fail(ToolUnavailableError("ffmpeg", INSTALL_HINTS["ffmpeg"]))

        plan = create_plan(source, platform)
        # Paths handed to ffmpeg are absolute; its cwd is the output directory
        source_path = source.path.resolve()
        output_path = build_output_path(source_path, platform)
        working_directory = output_path.parent
        two_pass = TwoPassContext(working_directory) if plan.use_two_pass else None

        session = self._session_factory(
            ffmpeg_path,
            working_directory=working_directory,
            progress_callback=self._on_progress,
            terminate_grace_seconds=self._config.encoder.terminate_grace_seconds,
        )
        self._session = session
        self._state = EncodeSessionState(is_running=True, phase=SessionPhase.RUNNING)
        self._notify()

        logger.info(
            "Compressing %s for %s",
            source.file_name,
            platform.label,
            extra={
                "platform": platform.name,
                "output_path": str(output_path),
                "two_pass": plan.use_two_pass,
            },
        )

        try:
            if remove_file_if_exists(output_path):
                logger.info("Removed previous output %s", output_path.name)

            for pass_kind in passes_for_plan(plan):
                if pass_kind is PassKind.SECOND:
                    # Pass 2 covers the upper half of the progress range
                    self._state.progress = max(self._state.progress, 0.5)
                self._set_phase(_PASS_PHASES[pass_kind])
                args = build_pass_args(plan, source_path, output_path, pass_kind)
                await session.run(args, plan.effective_duration_seconds, pass_kind)

            if not output_path.exists():
                raise MissingOutputError(output_path)
            size = output_path.stat().st_size
        except EncodeCancelled:
            remove_file_if_exists(output_path)
            return self._finish_cancelled()
        except asyncio.CancelledError:
            # The awaiting task was cancelled; the session has already reaped
            # the process
            remove_file_if_exists(output_path)
            self._finish_cancelled()
            raise
        except (CompressionError, OSError) as e:
            remove_file_if_exists(output_path)
            return self._fail(e)
        finally:
            if two_pass is not None:
                two_pass.cleanup()

        self._state.progress = 1.0
        self._state.is_running = False
        self._state.output_path = output_path
        self._state.output_size_bytes = size
        self._state.phase = SessionPhase.COMPLETED
        self._notify()

        logger.info(
            "Compression complete: %s (%d bytes)",
            output_path.name,
            size,
            extra={"output_path": str(output_path), "output_size_bytes": size},
        )
        return CompressionOutcome(
            phase=SessionPhase.COMPLETED,
            output_path=output_path,
            output_size_bytes=size,
        )

    def _fail(self, error: Exception) -> CompressionOutcome:
        message = (
            error.user_message if isinstance(error, CompressionError) else str(error)
        )
        logger.error("Compression failed: %s", message)
        self._state.is_running = False
        self._state.last_error = message
        self._state.phase = SessionPhase.FAILED
        self._notify()
        return CompressionOutcome(phase=SessionPhase.FAILED, error_message=message)

    def _finish_cancelled(self) -> CompressionOutcome:
        logger.info("Compression cancelled")
        if self._state.phase is not SessionPhase.CANCELLED or self._state.is_running:
            self._state.is_running = False
            self._state.phase = SessionPhase.CANCELLED
            self._notify()
        return CompressionOutcome(phase=SessionPhase.CANCELLED)

    def _set_phase(self, phase: SessionPhase) -> None:
        if self._state.phase is phase:
            return
        self._state.phase = phase
        self._notify()

    def _on_progress(self, progress: float) -> None:
        """Apply a progress update from the session.

        Updates after cancel are dropped, and progress never moves backwards
        within a run.
        """
        if not self._state.is_running:
            return
        if progress <= self._state.progress:
            return
        self._state.progress = min(progress, 1.0)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.state
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning("State observer error: %s", e)
