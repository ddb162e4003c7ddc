"""fitclip doctor command for checking external tool availability."""

import json

import click

from fitclip.cli.exit_codes import ExitCode
from fitclip.tools.detection import INSTALL_HINTS, locate_ffmpeg, locate_ffprobe


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


@click.command("doctor")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def doctor_command(ctx: click.Context, json_output: bool) -> None:
    """Check that ffmpeg and ffprobe can be found.

    Exit codes:
      0 - Both tools available
      2 - A required tool is missing
    """
    config = ctx.obj["config"]
    ffmpeg = locate_ffmpeg(config.tools.ffmpeg, config.encoder.search_paths)
    ffprobe = locate_ffprobe(config.tools.ffprobe, ffmpeg)
    tools = {"ffmpeg": ffmpeg, "ffprobe": ffprobe}

    if json_output:
        data = {
            name: {"available": path is not None, "path": str(path) if path else None}
            for name, path in tools.items()
        }
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo("fitclip Tool Check")
        click.echo("=" * 40)
        for name, path in tools.items():
            location = str(path) if path else "not found"
            click.echo(f"  {_format_status(path is not None)} {name:<8} {location}")
            if path is None:
                click.echo(f"    └─ {INSTALL_HINTS[name]}")

    if ffmpeg is None or ffprobe is None:
        ctx.exit(ExitCode.TOOL_NOT_AVAILABLE)
