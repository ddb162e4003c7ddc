"""CLI command for listing platform profiles."""

import json

import click

from fitclip.cli.common import fail
from fitclip.config.platforms import PlatformError, describe_limits, get_platforms


@click.command("platforms")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_context
def platforms_command(ctx: click.Context, json_output: bool) -> None:
    """List available platform profiles and their limits.

    Built-in profiles can be overridden, and new ones added, in the YAML
    file named by platforms_file in the config file or by
    FITCLIP_PLATFORMS_FILE.
    """
    try:
        platforms = get_platforms(ctx.obj["config"])
    except PlatformError as e:
        fail(str(e))

    if json_output:
        data = [
            {
                "name": profile.name,
                "display_name": profile.label,
                "max_file_size_bytes": profile.max_file_size_bytes,
                "max_duration_seconds": profile.max_duration_seconds,
                "output_suffix": profile.output_suffix,
            }
            for profile in platforms.values()
        ]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"{'NAME':<12} {'PLATFORM':<12} {'LIMITS':<30}")
    click.echo("-" * 56)
    for profile in platforms.values():
        click.echo(
            f"{profile.name:<12} {profile.label:<12} {describe_limits(profile):<30}"
        )
