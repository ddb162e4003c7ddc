"""fitclip plan command: show the encode plan without running it."""

import json
from pathlib import Path

import click

from fitclip.cli.common import probe_source, resolve_platform
from fitclip.core.file_utils import build_output_path
from fitclip.core.formatting import (
    format_bitrate,
    format_duration,
    format_file_size,
    format_resolution,
)
from fitclip.executor.encode import (
    build_pass_args,
    command_as_string,
    create_plan,
    passes_for_plan,
)
from fitclip.tools.detection import locate_ffmpeg


@click.command("plan")
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
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_context
def plan_command(
    ctx: click.Context, source: Path, platform_name: str, json_output: bool
) -> None:
    """Show how SOURCE would be compressed, without running ffmpeg.

    Examples:

        fitclip plan clip.mov --platform twitter

        fitclip plan clip.mov -p discord --json
    """
    config = ctx.obj["config"]
    platform = resolve_platform(config, platform_name)
    video = probe_source(config, source)

    plan = create_plan(video, platform)
    output_path = build_output_path(video.path, platform)
    ffmpeg = locate_ffmpeg(config.tools.ffmpeg, config.encoder.search_paths)
    executable = str(ffmpeg) if ffmpeg else "ffmpeg"
    commands = [
        [executable, *build_pass_args(plan, video.path, output_path, pass_kind)]
        for pass_kind in passes_for_plan(plan)
    ]

    if json_output:
        data = {
            "source": {
                "path": str(video.path),
                "duration_seconds": video.duration_seconds,
                "width": video.width,
                "height": video.height,
                "file_size_bytes": video.file_size_bytes,
            },
            "platform": platform.name,
            "plan": {
                "effective_duration_seconds": plan.effective_duration_seconds,
                "target_bitrate_bps": plan.target_bitrate_bps,
                "crf": plan.crf,
                "use_two_pass": plan.use_two_pass,
                "speed_factor": plan.speed_factor,
                "target_resolution": (
                    list(plan.target_resolution) if plan.target_resolution else None
                ),
            },
            "output_path": str(output_path),
            "commands": commands,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Source:     {video.file_name}")
    click.echo(
        f"            {format_duration(video.duration_seconds)}, "
        f"{format_resolution(video.width, video.height)}, "
        f"{format_file_size(video.file_size_bytes)}"
    )
    click.echo(f"Platform:   {platform.label}")
    click.echo(f"Duration:   {format_duration(plan.effective_duration_seconds)}")
    if plan.speed_factor is not None:
        click.echo(f"Speed-up:   {plan.speed_factor:.2f}x")
    click.echo(f"Bitrate:    {format_bitrate(plan.target_bitrate_bps)}")
    if plan.target_resolution is not None:
        click.echo(f"Resolution: {format_resolution(*plan.target_resolution)}")
    if plan.use_two_pass:
        click.echo("Strategy:   two-pass")
    else:
        click.echo(f"Strategy:   single pass (CRF {plan.crf})")
    click.echo(f"Output:     {output_path}")
    click.echo("")
    for cmd in commands:
        click.echo(command_as_string(cmd))
