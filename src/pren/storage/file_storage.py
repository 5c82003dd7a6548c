"""
Local file storage for prompts.

Each prompt is a markdown file named ``<name>.md`` inside the base
directory. Metadata lives in YAML frontmatter, the raw template source
follows it:

    ---
    name: greeting
    description: Friendly opener
    tags:
    - example
    ---

    Hello {{name}}!
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from pren.prompts.models import Prompt, PromptMetadata
from pren.prompts.parser import is_valid_identifier
from pren.storage.base import (
    InvalidBasePathError,
    InvalidPromptNameError,
    PromptNotFoundError,
    PromptSerializationError,
    StorageError,
)

logger = logging.getLogger(__name__)

PROMPT_FILE_SUFFIX = ".md"

_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*(?:\n|$)", re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str] | None:
    """Split YAML frontmatter from the body of a prompt file.

    Args:
        content: Raw file content

    Returns:
        Tuple of (frontmatter dict, body content), or None if the file has
        no frontmatter block

    Raises:
        ValueError: If the frontmatter is not valid YAML or not a mapping
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return None

    try:
        frontmatter = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML frontmatter: {e}") from e

    if not isinstance(frontmatter, dict):
        raise ValueError("frontmatter must be a mapping")

    return frontmatter, content[match.end() :]


def serialize_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render frontmatter and body as a markdown document."""
    header = yaml.safe_dump(
        frontmatter, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    return f"---\n{header}---\n\n{body}"


class FileStorage:
    """Stores prompts as markdown files with YAML frontmatter.

    Usage:
        storage = FileStorage(Path("~/pren/prompts").expanduser())
        storage.save_prompt(prompt)
        prompt = storage.get_prompt("greeting")
    """

    def __init__(self, base_path: str | Path):
        """Initialize the storage.

        Args:
            base_path: Directory holding the prompt files. Created on first save.
        """
        self.base_path = Path(base_path)

    def _prompt_path(self, name: str) -> Path:
        if not is_valid_identifier(name):
            raise InvalidPromptNameError(name)
        return self.base_path / f"{name}{PROMPT_FILE_SUFFIX}"

    def ensure_base_directory_exists(self) -> None:
        """Create the base directory if needed.

        Raises:
            InvalidBasePathError: If the base path exists but is not a directory
        """
        if not self.base_path.exists():
            self.base_path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created prompt directory {self.base_path}")
        elif not self.base_path.is_dir():
            raise InvalidBasePathError(str(self.base_path))

    def save_prompt(self, prompt: Prompt) -> None:
        """Write a prompt to disk, replacing any existing file of the same name.

        Template syntax is not validated here.

        Raises:
            InvalidPromptNameError: If the prompt name is not a valid identifier
            InvalidBasePathError: If the base path is not a directory
            StorageError: If the file cannot be written
        """
        file_path = self._prompt_path(prompt.name)
        self.ensure_base_directory_exists()

        document = serialize_frontmatter(prompt.metadata.to_frontmatter(), prompt.content)
        try:
            file_path.write_text(document, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {file_path}: {e}") from e

        logger.info(f"Saved prompt '{prompt.name}' to {file_path}")

    def get_prompt(self, name: str) -> Prompt:
        """Load a prompt by name.

        Raises:
            PromptNotFoundError: If no file exists for ``name``
            PromptSerializationError: If the file cannot be parsed
        """
        file_path = self._prompt_path(name)
        if not file_path.is_file():
            raise PromptNotFoundError(name, str(file_path))

        return self._read_prompt_file(file_path)

    def get_prompts(self) -> list[Prompt]:
        """Load every prompt under the base directory.

        Raises:
            PromptSerializationError: If any prompt file cannot be parsed
        """
        return [self._read_prompt_file(path) for path in self._prompt_files()]

    def get_prompts_by_tag(self, tags: Sequence[str]) -> list[Prompt]:
        """Load the prompts having at least one of ``tags``."""
        wanted = set(tags)
        return [
            prompt
            for prompt in self.get_prompts()
            if any(tag in wanted for tag in prompt.metadata.tags)
        ]

    def delete_prompt(self, name: str) -> None:
        """Delete a prompt.

        Raises:
            PromptNotFoundError: If no file exists for ``name``
        """
        file_path = self._prompt_path(name)
        if not file_path.is_file():
            raise PromptNotFoundError(name, str(file_path))

        try:
            file_path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete {file_path}: {e}") from e

        logger.info(f"Deleted prompt '{name}' ({file_path})")

    def _prompt_files(self) -> list[Path]:
        if not self.base_path.is_dir():
            return []
        return sorted(p for p in self.base_path.rglob(f"*{PROMPT_FILE_SUFFIX}") if p.is_file())

    def _read_prompt_file(self, file_path: Path) -> Prompt:
        try:
            raw = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Prompt file {file_path} is not valid UTF-8: {e}")
            raise PromptSerializationError(str(file_path), f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {file_path}: {e}") from e

        try:
            parsed = parse_frontmatter(raw)
            if parsed is None:
                raise ValueError("missing YAML frontmatter")
            frontmatter, body = parsed
            metadata = PromptMetadata.from_frontmatter(frontmatter)
        except ValueError as e:
            logger.warning(f"Could not parse prompt file {file_path}: {e}")
            raise PromptSerializationError(str(file_path), str(e)) from e

        if file_path != self.base_path / f"{metadata.name}{PROMPT_FILE_SUFFIX}":
            # get, delete and references only look at <base_path>/<name>.md
            logger.warning(
                f"Prompt '{metadata.name}' is stored in {file_path}; "
                f"it is listed but cannot be fetched by name"
            )

        return Prompt(metadata=metadata, content=body.lstrip())
