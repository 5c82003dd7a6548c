"""
pren CLI entry point.
"""

import click

from pren.config.app import load_config

from .prompts import add, delete, get_prompt_cmd, list_prompts_cmd, show
from .utils import setup_logging


@click.group()
@click.version_option(package_name="pren", prog_name="pren")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to custom configuration file",
)
@click.option(
    "--storage-path",
    "-p",
    type=click.Path(file_okay=False),
    help="Directory holding prompt files (overrides config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, storage_path: str | None, verbose: bool) -> None:
    """pren - A simple and ergonomic prompt engine."""
    try:
        app_config = load_config(config, cli_overrides={"storage_path": storage_path})
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(verbose, app_config.logging)

    # Store config in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config"] = app_config


# Register commands
cli.add_command(add)
cli.add_command(get_prompt_cmd)
cli.add_command(list_prompts_cmd)
cli.add_command(show)
cli.add_command(delete)
