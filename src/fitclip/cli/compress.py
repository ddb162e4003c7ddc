"""fitclip compress command."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

import click

from fitclip.cli.common import probe_source, resolve_platform
from fitclip.cli.exit_codes import ExitCode
from fitclip.cli.progress import StderrProgressDisplay
from fitclip.core.formatting import compression_ratio, format_file_size
from fitclip.domain.models import PlatformProfile, SourceVideo
from fitclip.executor.encode.types import CompressionOutcome
from fitclip.jobs.controller import CompressionController

logger = logging.getLogger(__name__)


async def run_compression(
    controller: CompressionController,
    source: SourceVideo,
    platform: PlatformProfile,
) -> CompressionOutcome:
    """Run one compression, cancelling it on SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    registered: list[signal.Signals] = []

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("Received %s, cancelling compression", sig.name)
        controller.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handle_signal, sig)
            registered.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform / not the main thread
            logger.debug("Could not install handler for %s", sig.name)

    try:
        return await controller.compress(source, platform)
    finally:
        for sig in registered:
            loop.remove_signal_handler(sig)


@click.command("compress")
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path),
)
@click.option(
    "--platform",
    "-p",
    "platform_name",
    required=True,
    help="Target platform (see 'fitclip platforms').",
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Do not show progress on stderr.",
)
@click.pass_context
def compress_command(
    ctx: click.Context, source: Path, platform_name: str, no_progress: bool
) -> None:
    """Compress SOURCE to fit a platform's upload limits.

    The output is written next to the source as <name>_<platform>.mp4,
    replacing any earlier output for the same platform. Press Ctrl+C to
    cancel.

    Examples:

        fitclip compress clip.mov --platform twitter
    """
    config = ctx.obj["config"]
    platform = resolve_platform(config, platform_name)
    video = probe_source(config, source)

    controller = CompressionController(config=config)
    display = StderrProgressDisplay(enabled=not no_progress)
    unsubscribe = controller.subscribe(display)
    try:
        outcome = asyncio.run(run_compression(controller, video, platform))
    except KeyboardInterrupt:
        display.finish()
        click.echo("Cancelled.", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    finally:
        unsubscribe()
    display.finish()

    if outcome.cancelled:
        click.echo("Cancelled.", err=True)
        sys.exit(ExitCode.INTERRUPTED)

    if not outcome.success:
        click.echo(f"Error: {outcome.error_message}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    ratio = compression_ratio(outcome.output_size_bytes, video.file_size_bytes)
    click.echo(f"Saved {outcome.output_path}")
    click.echo(
        f"New size: {format_file_size(outcome.output_size_bytes)} "
        f"({ratio}% of original)"
    )
