"""Encoder process session.

EncodeSession runs ffmpeg invocations as asyncio child processes, turns the
time= markers ffmpeg writes to stderr into job progress, and supports
cancellation. The child process is treated as a scoped resource: whatever
way run() exits (success, failure, cancel(), or cancellation of the awaiting
task), the process is stopped and reaped before run() returns.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from collections import deque
from collections.abc import Callable
from pathlib import Path

from fitclip.domain.enums import PassKind
from fitclip.jobs.exceptions import (
    EncodeCancelled,
    LaunchFailureError,
    NonZeroExitError,
)
from fitclip.tools.ffmpeg_progress import parse_progress_chunk

from .command import command_as_string

logger = logging.getLogger(__name__)

_PASS_DESCRIPTIONS = {
    PassKind.SINGLE: "encode",
    PassKind.FIRST: "pass 1",
    PassKind.SECOND: "pass 2",
}


class EncodeSession:
    """Runs the encoder for one compression job, one pass at a time.

    Usage:
        session = EncodeSession(ffmpeg_path, progress_callback=on_progress)
        await session.run(args, duration_seconds=140.0, pass_kind=PassKind.FIRST)
        await session.run(args2, duration_seconds=140.0, pass_kind=PassKind.SECOND)

    Calling terminate() from the event loop while run() is awaiting stops
    the process; run() then raises EncodeCancelled. Once terminated, the
    session refuses further passes.
    """

    STDERR_CHUNK_SIZE: int = 4096
    STDERR_TAIL_LINES: int = 20
    # Upper bound on unterminated stderr text carried between chunks
    MAX_PENDING_CHARS: int = 4096

    def __init__(
        self,
        ffmpeg_path: Path,
        *,
        working_directory: Path | None = None,
        progress_callback: Callable[[float], None] | None = None,
        terminate_grace_seconds: float = 5.0,
    ) -> None:
        """Initialize the session.

        Args:
            ffmpeg_path: Path to the ffmpeg executable.
            working_directory: cwd for the encoder (where two-pass logs land).
            progress_callback: Called with overall job progress in [0, 1].
            terminate_grace_seconds: Time allowed between SIGTERM and SIGKILL.
        """
        self.ffmpeg_path = ffmpeg_path
        self.working_directory = working_directory
        self.progress_callback = progress_callback
        self.terminate_grace_seconds = terminate_grace_seconds
        self._process: asyncio.subprocess.Process | None = None
        self._cancelled = False
        self._kill_handle: asyncio.TimerHandle | None = None
        self._stderr_tail: deque[str] = deque(maxlen=self.STDERR_TAIL_LINES)

    @property
    def is_running(self) -> bool:
        """True while an encoder process is alive."""
        return self._process is not None and self._process.returncode is None

    @property
    def cancelled(self) -> bool:
        """True once terminate() has been called."""
        return self._cancelled

    @property
    def stderr_tail(self) -> list[str]:
        """Last lines of encoder diagnostics from the most recent pass."""
        return list(self._stderr_tail)

    async def run(
        self,
        args: list[str],
        duration_seconds: float,
        pass_kind: PassKind = PassKind.SINGLE,
    ) -> None:
        """Run one encoder invocation to completion.

        Args:
            args: Encoder arguments (without the executable).
            duration_seconds: Planned output duration, for progress.
            pass_kind: Which invocation this is, for progress mapping.

        Raises:
            EncodeCancelled: If terminate() was called before or during the run.
            LaunchFailureError: If the process could not be started.
            NonZeroExitError: If the encoder exited with a non-zero status.
        """
        description = _PASS_DESCRIPTIONS[pass_kind]
        if self._cancelled:
            raise EncodeCancelled(description)

        cmd = [str(self.ffmpeg_path), *args]
        logger.info("Starting %s", description)
        logger.debug("Command: %s", command_as_string(cmd))
        self._stderr_tail.clear()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.working_directory,
            )
        except OSError as e:
            raise LaunchFailureError(str(self.ffmpeg_path), str(e)) from e

        self._process = process
        logger.debug("%s started with PID %s", description, process.pid)

        try:
            assert process.stderr is not None
            await self._read_progress(process.stderr, duration_seconds, pass_kind)
            returncode = await process.wait()
        finally:
            if process.returncode is None:
                await self._stop_process(process)
            self._cancel_kill_timer()
            self._process = None

        # Termination during cancel exits non-zero; report it as cancelled
        if self._cancelled:
            logger.info("%s cancelled (exit code %s)", description, returncode)
            raise EncodeCancelled(description)

        if returncode != 0:
            if self._stderr_tail:
                logger.debug(
                    "ffmpeg stderr (last %d lines):\n%s",
                    len(self._stderr_tail),
                    "\n".join(f"  {line}" for line in self._stderr_tail),
                )
            raise NonZeroExitError(returncode, self.stderr_tail)

        logger.info("Finished %s", description)

    def terminate(self) -> None:
        """Cancel the session and stop the running encoder, if any.

        Sends SIGTERM immediately and schedules SIGKILL if the process is
        still alive after terminate_grace_seconds. Safe to call repeatedly
        and when nothing is running.
        """
        self._cancelled = True
        process = self._process
        if process is None or process.returncode is not None:
            logger.debug("terminate() - no running process")
            return

        logger.info("Terminating encoder (PID %s)", process.pid)
        try:
            process.terminate()
        except ProcessLookupError:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._kill_handle is None:
            self._kill_handle = loop.call_later(
                self.terminate_grace_seconds, self._kill_if_alive, process
            )

    def _kill_if_alive(self, process: asyncio.subprocess.Process) -> None:
        self._kill_handle = None
        if process.returncode is None:
            logger.warning(
                "Encoder did not exit within %.1fs of SIGTERM, killing",
                self.terminate_grace_seconds,
            )
            try:
                process.kill()
            except ProcessLookupError:
                pass

    def _cancel_kill_timer(self) -> None:
        if self._kill_handle is not None:
            self._kill_handle.cancel()
            self._kill_handle = None

    async def _stop_process(self, process: asyncio.subprocess.Process) -> None:
        """Terminate and reap a process that outlived its run() call."""
        try:
            process.terminate()
        except ProcessLookupError:
            pass
        try:
            await asyncio.wait_for(process.wait(), timeout=self.terminate_grace_seconds)
        except asyncio.TimeoutError:
            logger.warning("Encoder ignored SIGTERM, killing PID %s", process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    async def _read_progress(
        self,
        stream: asyncio.StreamReader,
        duration_seconds: float,
        pass_kind: PassKind,
    ) -> None:
        """Consume stderr as it is produced and report progress.

        ffmpeg ends status lines with a carriage return and log lines with a
        newline. Only terminated text is parsed; an unterminated remainder is
        carried into the next chunk so a marker split across reads is not
        misparsed.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""

        while True:
            chunk = await stream.read(self.STDERR_CHUNK_SIZE)
            if not chunk:
                break
            text = pending + decoder.decode(chunk)
            cut = max(text.rfind("\r"), text.rfind("\n"))
            if cut == -1:
                pending = text[-self.MAX_PENDING_CHARS :]
                continue
            complete, pending = text[: cut + 1], text[cut + 1 :]
            self._handle_text(complete, duration_seconds, pass_kind)

        remainder = pending + decoder.decode(b"", final=True)
        if remainder:
            self._handle_text(remainder, duration_seconds, pass_kind)

    def _handle_text(
        self, text: str, duration_seconds: float, pass_kind: PassKind
    ) -> None:
        for line in text.replace("\r", "\n").split("\n"):
            stripped = line.strip()
            if stripped:
                self._stderr_tail.append(stripped)

        if self._cancelled:
            return

        progress = parse_progress_chunk(text, duration_seconds, pass_kind)
        if progress is None or self.progress_callback is None:
            return
        try:
            self.progress_callback(progress)
        except Exception as e:
            logger.warning("Progress callback error: %s", e)
