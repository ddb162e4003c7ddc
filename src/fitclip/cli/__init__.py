"""CLI module for fitclip."""

import logging
from pathlib import Path

import click

from fitclip.config import ConfigError, FitclipConfig, get_config

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(config: FitclipConfig) -> None:
    """Configure logging once per process from the merged configuration."""
    global _logging_configured
    if _logging_configured:
        return

    from fitclip.logging import configure_logging

    configure_logging(config.logging)
    _logging_configured = True


@click.group()
@click.version_option(package_name="fitclip")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to config file (default: ~/.fitclip/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """fitclip - Compress videos to fit platform upload limits."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(
                config_path=config_path,
                log_level=log_level,
                log_file=log_file,
                log_format="json" if log_json else None,
                strict=True,
            )
        except (ConfigError, ValueError) as e:
            raise click.ClickException(f"Invalid configuration: {e}") from e

    _configure_logging(ctx.obj["config"])


# Defer import to avoid circular dependency
def _register_commands():
    from fitclip.cli.compress import compress_command
    from fitclip.cli.doctor import doctor_command
    from fitclip.cli.plan import plan_command
    from fitclip.cli.platforms import platforms_command

    main.add_command(compress_command)
    main.add_command(doctor_command)
    main.add_command(plan_command)
    main.add_command(platforms_command)


_register_commands()
