"""
Shared utilities for CLI commands.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click

from pren.config.app import LoggingSettings, PrenConfig
from pren.storage.base import PromptStorage

logger = logging.getLogger(__name__)

# Tried in order; the first one installed wins
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, settings: LoggingSettings | None = None) -> None:
    """
    Configure logging for CLI.

    Args:
        verbose: If True, enable DEBUG level logging
        settings: Logging settings from the config file
    """
    settings = settings or LoggingSettings()
    log_level = logging.DEBUG if verbose else getattr(logging, settings.level.upper())
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if settings.file:
        log_file_path = Path(settings.file).expanduser()
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logging.getLogger("pren").addHandler(file_handler)

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)


def get_config(ctx: click.Context) -> PrenConfig:
    config: PrenConfig = ctx.obj["config"]
    return config


def get_prompt_storage(ctx: click.Context) -> PromptStorage:
    return get_config(ctx).get_storage()


def parse_key_value(pair: str) -> tuple[str, str]:
    """Split a KEY=value pair at the first '='.

    Raises:
        click.BadParameter: If no '=' is present or the key is empty
    """
    key, sep, value = pair.partition("=")
    if not sep:
        raise click.BadParameter(f"invalid KEY=value: no `=` found in `{pair}`")
    if not key:
        raise click.BadParameter(f"invalid KEY=value: empty key in `{pair}`")
    return key, value


def parse_arguments_option(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated/comma-delimited KEY=value options into a dict.

    Later pairs override earlier ones.
    """
    arguments: dict[str, str] = {}
    for value in values:
        for pair in value.split(","):
            if not pair:
                continue
            key, arg_value = parse_key_value(pair)
            arguments[key] = arg_value
    return arguments


def parse_tags_option(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[str]:
    """Click callback for repeated/comma-delimited tag options, order preserved."""
    return [tag.strip() for value in values for tag in value.split(",") if tag.strip()]


def copy_to_clipboard(text: str) -> bool:
    """Copy text to the system clipboard.

    Returns:
        True if one of the clipboard commands accepted the text
    """
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            subprocess.run(command, input=text.encode(), check=True, timeout=5)
            logger.debug(f"Copied {len(text)} characters with {command[0]}")
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Clipboard command {command[0]} failed: {e}")
    return False
