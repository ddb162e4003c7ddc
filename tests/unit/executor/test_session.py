"""Unit tests for EncodeSession."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from fitclip.domain.enums import PassKind
from fitclip.executor.encode.session import EncodeSession
from fitclip.jobs.exceptions import (
    EncodeCancelled,
    LaunchFailureError,
    NonZeroExitError,
)

FFMPEG = Path("/usr/bin/ffmpeg")


class FakeProcess:
    """Minimal stand-in for asyncio.subprocess.Process.

    stderr is fed with the given chunks. With hold_open, the stream stays
    open until terminate() or kill() is called, like a running encoder.
    """

    def __init__(
        self,
        chunks: list[bytes],
        returncode: int = 0,
        hold_open: bool = False,
        ignore_terminate: bool = False,
    ) -> None:
        self.pid = 4242
        self.returncode: int | None = None
        self.stderr = asyncio.StreamReader()
        self._final_returncode = returncode
        self._ignore_terminate = ignore_terminate
        self._exited = asyncio.Event()
        for chunk in chunks:
            self.stderr.feed_data(chunk)
        if not hold_open:
            self.stderr.feed_eof()
            self._exited.set()
        self.terminate = MagicMock(side_effect=self._on_terminate)
        self.kill = MagicMock(side_effect=self._on_kill)

    def _on_terminate(self) -> None:
        if self._ignore_terminate:
            return
        self._stop(-15)

    def _on_kill(self) -> None:
        self._stop(-9)

    def _stop(self, code: int) -> None:
        self._final_returncode = code
        if not self.stderr.at_eof():
            self.stderr.feed_eof()
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        self.returncode = self._final_returncode
        return self.returncode


def patch_spawn(process: FakeProcess | None = None, side_effect=None):
    return patch(
        "fitclip.executor.encode.session.asyncio.create_subprocess_exec",
        new=AsyncMock(return_value=process, side_effect=side_effect),
    )


class TestEncodeSessionRun:
    """Tests for running a single invocation."""

    @pytest.mark.asyncio
    async def test_successful_run_reports_progress(self) -> None:
        """Text already buffered is read together; the latest marker wins."""
        updates: list[float] = []
        process = FakeProcess(
            [
                b"Input #0, mov,mp4\n",
                b"frame=  10 time=00:00:05.00 bitrate=1k\r",
                b"frame=  20 time=00:00:10.00 bitrate=1k\r",
            ]
        )
        session = EncodeSession(FFMPEG, progress_callback=updates.append)

        with patch_spawn(process) as spawn:
            await session.run(["-i", "in.mov", "out.mp4"], duration_seconds=20.0)

        assert updates == [0.5]
        assert spawn.call_args.args == (str(FFMPEG), "-i", "in.mov", "out.mp4")
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_uses_working_directory_as_cwd(self, tmp_path: Path) -> None:
        session = EncodeSession(FFMPEG, working_directory=tmp_path)
        with patch_spawn(FakeProcess([])) as spawn:
            await session.run([], duration_seconds=10.0)
        assert spawn.call_args.kwargs["cwd"] == tmp_path

    @pytest.mark.asyncio
    async def test_second_pass_progress_is_in_upper_half(self) -> None:
        updates: list[float] = []
        process = FakeProcess([b"time=00:00:30.00\r"])
        session = EncodeSession(FFMPEG, progress_callback=updates.append)

        with patch_spawn(process):
            await session.run([], duration_seconds=60.0, pass_kind=PassKind.SECOND)

        assert updates == [0.75]

    @pytest.mark.asyncio
    async def test_marker_split_across_chunks(self) -> None:
        """A marker cut between two reads is parsed once it is complete."""
        updates: list[float] = []
        process = FakeProcess([b"frame=1 time=00:00:0", b"8.00 bitrate=1k\r"])
        session = EncodeSession(FFMPEG, progress_callback=updates.append)
        session.STDERR_CHUNK_SIZE = 8

        with patch_spawn(process):
            await session.run([], duration_seconds=16.0, pass_kind=PassKind.FIRST)

        assert updates == [0.25]

    @pytest.mark.asyncio
    async def test_zero_duration_does_not_divide_by_zero(self) -> None:
        updates: list[float] = []
        process = FakeProcess([b"time=00:00:00.50\r"])
        session = EncodeSession(FFMPEG, progress_callback=updates.append)

        with patch_spawn(process):
            await session.run([], duration_seconds=0.0)

        assert updates == [0.5]

    @pytest.mark.asyncio
    async def test_callback_error_does_not_abort_run(self) -> None:
        process = FakeProcess([b"time=00:00:01.00\r"])
        session = EncodeSession(
            FFMPEG, progress_callback=MagicMock(side_effect=RuntimeError("ui gone"))
        )
        with patch_spawn(process):
            await session.run([], duration_seconds=10.0)

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_with_code_and_tail(self) -> None:
        process = FakeProcess([b"Unknown encoder 'libx264'\n"], returncode=1)
        session = EncodeSession(FFMPEG)

        with patch_spawn(process), pytest.raises(NonZeroExitError) as exc_info:
            await session.run([], duration_seconds=10.0)

        assert exc_info.value.exit_code == 1
        assert str(exc_info.value) == "FFmpeg exited with code 1"
        assert exc_info.value.stderr_tail == ["Unknown encoder 'libx264'"]

    @pytest.mark.asyncio
    async def test_launch_failure(self) -> None:
        session = EncodeSession(FFMPEG)
        with patch_spawn(side_effect=PermissionError("denied")):
            with pytest.raises(LaunchFailureError, match="denied"):
                await session.run([], duration_seconds=10.0)


class TestEncodeSessionCancel:
    """Tests for terminate() and cancellation."""

    @pytest.mark.asyncio
    async def test_terminate_mid_run_raises_cancelled(self) -> None:
        reported = asyncio.Event()
        updates: list[float] = []

        def on_progress(value: float) -> None:
            updates.append(value)
            reported.set()

        process = FakeProcess([b"time=00:00:05.00\r"], hold_open=True)
        session = EncodeSession(FFMPEG, progress_callback=on_progress)

        with patch_spawn(process):
            task = asyncio.create_task(session.run([], duration_seconds=10.0))
            await asyncio.wait_for(reported.wait(), timeout=1)
            assert session.is_running

            session.terminate()
            with pytest.raises(EncodeCancelled):
                await task

        process.terminate.assert_called_once()
        process.kill.assert_not_called()
        assert session.cancelled
        assert not session.is_running
        assert updates == [0.5]

    @pytest.mark.asyncio
    async def test_progress_after_terminate_is_ignored(self) -> None:
        reported = asyncio.Event()
        updates: list[float] = []

        def on_progress(value: float) -> None:
            updates.append(value)
            reported.set()

        process = FakeProcess([b"time=00:00:01.00\r"], hold_open=True)
        session = EncodeSession(FFMPEG, progress_callback=on_progress)

        with patch_spawn(process):
            task = asyncio.create_task(session.run([], duration_seconds=10.0))
            await asyncio.wait_for(reported.wait(), timeout=1)
            process.terminate.side_effect = None
            session.terminate()
            process.stderr.feed_data(b"time=00:00:09.00\r")
            process._stop(-15)
            with pytest.raises(EncodeCancelled):
                await task

        assert updates == [0.1]

    @pytest.mark.asyncio
    async def test_kill_after_grace_period(self) -> None:
        reported = asyncio.Event()
        process = FakeProcess(
            [b"time=00:00:01.00\r"], hold_open=True, ignore_terminate=True
        )
        session = EncodeSession(
            FFMPEG,
            progress_callback=lambda _: reported.set(),
            terminate_grace_seconds=0.01,
        )

        with patch_spawn(process):
            task = asyncio.create_task(session.run([], duration_seconds=10.0))
            await asyncio.wait_for(reported.wait(), timeout=1)
            session.terminate()
            with pytest.raises(EncodeCancelled):
                await asyncio.wait_for(task, timeout=1)

        process.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_run_after_terminate_is_refused(self) -> None:
        session = EncodeSession(FFMPEG)
        session.terminate()

        with patch_spawn(FakeProcess([])) as spawn:
            with pytest.raises(EncodeCancelled):
                await session.run([], duration_seconds=10.0)

        spawn.assert_not_called()

    def test_terminate_without_process_is_safe(self) -> None:
        session = EncodeSession(FFMPEG)
        session.terminate()
        session.terminate()
        assert session.cancelled

    @pytest.mark.asyncio
    async def test_task_cancellation_reaps_process(self) -> None:
        reported = asyncio.Event()
        process = FakeProcess([b"time=00:00:01.00\r"], hold_open=True)
        session = EncodeSession(FFMPEG, progress_callback=lambda _: reported.set())

        with patch_spawn(process):
            task = asyncio.create_task(session.run([], duration_seconds=10.0))
            await asyncio.wait_for(reported.wait(), timeout=1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        process.terminate.assert_called_once()
        assert process.returncode == -15
        assert not session.is_running
