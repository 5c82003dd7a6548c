"""
Prompt management commands: add, get, list, show, delete.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click

from pren.cli.utils import (
    copy_to_clipboard,
    get_config,
    get_prompt_storage,
    parse_arguments_option,
    parse_tags_option,
)
from pren.llm import CompletionError, get_completion_content
from pren.prompts import (
    ParseTemplateError,
    Prompt,
    PromptMetadata,
    PromptTemplate,
    RenderTemplateError,
    is_valid_identifier,
    parse_template,
)
from pren.storage import (
    PromptNotFoundError,
    PromptSerializationError,
    PromptStorage,
    StorageError,
)

logger = logging.getLogger(__name__)


def _prompt_exists(storage: PromptStorage, name: str) -> bool:
    try:
        storage.get_prompt(name)
    except PromptNotFoundError:
        return False
    except PromptSerializationError:
        # The file is there even if it cannot be read back
        return True
    return True


@click.command()
@click.argument("name")
@click.option("--content", "-c", help="Prompt content (template source)")
@click.option(
    "--file",
    "-f",
    "content_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read prompt content from a file",
)
@click.option(
    "--tags", "-t", multiple=True, callback=parse_tags_option, help="Comma-separated tags"
)
@click.option("--description", "-d", help="Short description of the prompt")
@click.option("--overwrite", "-o", is_flag=True, help="Replace an existing prompt")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    content: str | None,
    content_file: Path | None,
    tags: list[str],
    description: str | None,
    overwrite: bool,
) -> None:
    """Add a new prompt."""
    if (content is None) == (content_file is None):
        raise click.UsageError("Provide exactly one of --content or --file")
    if content_file is not None:
        try:
            content = content_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise click.ClickException(f"{content_file} is not valid UTF-8: {e}") from e
    content = content or ""

    if not is_valid_identifier(name):
        raise click.ClickException(
            f"Invalid prompt name '{name}': use 1 to 64 letters, digits, '-' or '_'"
        )

    try:
        parse_template(content)
    except ParseTemplateError as e:
        raise click.ClickException(str(e)) from e

    storage = get_prompt_storage(ctx)
    try:
        if not overwrite and _prompt_exists(storage, name):
            raise click.ClickException(
                f"Prompt '{name}' already exists. Use --overwrite to replace it."
            )
        prompt = Prompt(
            metadata=PromptMetadata(name=name, description=description, tags=tuple(tags)),
            content=content,
        )
        storage.save_prompt(prompt)
    except StorageError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Saved prompt: {name}")


@click.command("get")
@click.argument("name")
@click.option(
    "--arg",
    "-a",
    "arguments",
    multiple=True,
    callback=parse_arguments_option,
    metavar="KEY=VALUE",
    help="Template argument; repeat or separate pairs with commas",
)
@click.option(
    "--copy/--no-copy",
    default=None,
    help="Copy the output to the clipboard (default from config)",
)
@click.option(
    "--complete",
    is_flag=True,
    help="Send the rendered prompt to the configured LLM and output the completion",
)
@click.option("--model", "-m", help="Model override for --complete")
@click.pass_context
def get_prompt_cmd(
    ctx: click.Context,
    name: str,
    arguments: dict[str, str],
    copy: bool | None,
    complete: bool,
    model: str | None,
) -> None:
    """Render a prompt with arguments."""
    config = get_config(ctx)
    storage = get_prompt_storage(ctx)

    try:
        template = PromptTemplate.from_prompt(storage.get_prompt(name))
        output = template.render(arguments, storage)
    except (StorageError, ParseTemplateError, RenderTemplateError) as e:
        raise click.ClickException(str(e)) from e

    if complete:
        try:
            output = asyncio.run(get_completion_content(output, config.llm, model=model))
        except CompletionError as e:
            raise click.ClickException(str(e)) from e

    click.echo(output)

    if copy is None:
        copy = config.copy_to_clipboard
    if copy and not copy_to_clipboard(output):
        click.echo("Warning: could not copy to clipboard", err=True)


@click.command("list")
@click.option(
    "--tag", "-t", "tags", multiple=True, callback=parse_tags_option, help="Filter by tag"
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_prompts_cmd(ctx: click.Context, tags: list[str], as_json: bool) -> None:
    """List stored prompts."""
    storage = get_prompt_storage(ctx)
    try:
        prompts = storage.get_prompts_by_tag(tags) if tags else storage.get_prompts()
    except StorageError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps([prompt.metadata.to_frontmatter() for prompt in prompts], indent=2)
        )
        return

    if not prompts:
        click.echo("No prompts found.")
        return

    for prompt in prompts:
        line = prompt.name
        if prompt.tags:
            line += f" [{', '.join(prompt.tags)}]"
        click.echo(line)
        if prompt.metadata.description:
            click.echo(f"  {prompt.metadata.description}")


@click.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str) -> None:
    """Show a prompt's metadata and raw content."""
    storage = get_prompt_storage(ctx)
    try:
        prompt = storage.get_prompt(name)
    except StorageError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Name: {prompt.name}")
    if prompt.metadata.description:
        click.echo(f"Description: {prompt.metadata.description}")
    if prompt.tags:
        click.echo(f"Tags: {', '.join(prompt.tags)}")

    try:
        template = PromptTemplate.from_prompt(prompt)
    except ParseTemplateError as e:
        click.echo(f"Template: invalid ({e})")
    else:
        if template.arguments():
            click.echo(f"Arguments: {', '.join(template.arguments())}")
        if template.prompt_references():
            click.echo(f"References: {', '.join(template.prompt_references())}")

    click.echo("")
    click.echo(prompt.content)


@click.command()
@click.argument("name")
@click.option("--force", "-f", is_flag=True, help="Delete without confirmation")
@click.pass_context
def delete(ctx: click.Context, name: str, force: bool) -> None:
    """Delete a prompt."""
    storage = get_prompt_storage(ctx)
    try:
        if not _prompt_exists(storage, name):
            raise click.ClickException(f"Prompt not found: {name}")

        if not force and not click.confirm(
            f"Are you sure you want to delete prompt '{name}'?", default=False
        ):
            click.echo("Delete operation cancelled.")
            return

        storage.delete_prompt(name)
    except StorageError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Prompt '{name}' deleted successfully.")
