"""
Data models for stored prompts and their parsed templates.

A Prompt is what storage holds: metadata plus raw template source.
A PromptTemplate is the parsed, ephemeral view used for rendering. It is
rebuilt from a Prompt every time it is needed and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from pren.storage.base import PromptStorage


@dataclass(frozen=True)
class Literal:
    """Text emitted verbatim."""

    text: str


@dataclass(frozen=True)
class Argument:
    """Placeholder replaced by a caller-supplied argument."""

    name: str


@dataclass(frozen=True)
class PromptReference:
    """Reference to another stored prompt, resolved by name at render time."""

    name: str


@dataclass(frozen=True)
class VariablePromptReference:
    """Reference whose target prompt name is the value of argument ``name``."""

    name: str


PromptTemplatePart: TypeAlias = Literal | Argument | PromptReference | VariablePromptReference


@dataclass(frozen=True)
class PromptMetadata:
    """Metadata stored alongside a prompt's content."""

    name: str
    description: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Prompt name must not be empty")
        object.__setattr__(self, "tags", tuple(self.tags))

    @classmethod
    def from_frontmatter(cls, frontmatter: Mapping[str, Any]) -> PromptMetadata:
        """Build metadata from a parsed YAML frontmatter mapping.

        Args:
            frontmatter: Parsed frontmatter with ``name``, ``tags`` and an
                optional ``description``

        Returns:
            PromptMetadata instance

        Raises:
            ValueError: If required fields are missing or have the wrong type
        """
        name = frontmatter.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("frontmatter field 'name' is missing or not a string")

        if "tags" not in frontmatter:
            raise ValueError("frontmatter field 'tags' is missing")
        tags = frontmatter["tags"] or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValueError("frontmatter field 'tags' must be a list of strings")

        description = frontmatter.get("description")
        if description is not None and not isinstance(description, str):
            raise ValueError("frontmatter field 'description' must be a string")

        return cls(name=name, description=description, tags=tuple(tags))

    def to_frontmatter(self) -> dict[str, Any]:
        """Convert to a mapping suitable for YAML frontmatter."""
        data: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["tags"] = list(self.tags)
        return data


@dataclass(frozen=True)
class Prompt:
    """A stored prompt: metadata plus raw, unparsed template source."""

    metadata: PromptMetadata
    content: str

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt together with the parts parsed from its content."""

    prompt: Prompt
    parts: tuple[PromptTemplatePart, ...]

    @classmethod
    def from_prompt(cls, prompt: Prompt) -> PromptTemplate:
        """Parse a prompt's content into a template.

        Raises:
            ParseTemplateError: If the content is not a valid template
        """
        from pren.prompts.parser import parse_template

        return cls(prompt=prompt, parts=parse_template(prompt.content))

    @property
    def name(self) -> str:
        return self.prompt.name

    @property
    def is_simple(self) -> bool:
        """True when the template renders to its literal text unchanged."""
        return all(isinstance(part, Literal) for part in self.parts)

    def arguments(self) -> list[str]:
        """Argument names in order of first appearance.

        Includes the arguments consumed by variable prompt references.
        """
        names: list[str] = []
        for part in self.parts:
            if isinstance(part, Argument | VariablePromptReference) and part.name not in names:
                names.append(part.name)
        return names

    def prompt_references(self) -> list[str]:
        """Names of the prompts referenced directly, in order of first appearance."""
        names: list[str] = []
        for part in self.parts:
            if isinstance(part, PromptReference) and part.name not in names:
                names.append(part.name)
        return names

    def render(self, arguments: Mapping[str, str], storage: PromptStorage) -> str:
        """Render this template. See :func:`pren.prompts.renderer.render`."""
        from pren.prompts.renderer import render

        return render(self, arguments, storage)
