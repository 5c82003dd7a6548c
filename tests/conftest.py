"""Pytest configuration and shared fixtures for pren tests."""

import tempfile
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from pren.config.app import PrenConfig
from pren.prompts import Prompt, PromptMetadata
from pren.storage import FileStorage, PromptNotFoundError


def make_prompt(
    name: str,
    content: str,
    tags: Sequence[str] = (),
    description: str | None = None,
) -> Prompt:
    """Build a prompt without going through storage."""
    return Prompt(
        metadata=PromptMetadata(name=name, description=description, tags=tuple(tags)),
        content=content,
    )


class InMemoryPromptStorage:
    """PromptStorage backed by a dict, recording every lookup."""

    def __init__(self, prompts: dict[str, str] | None = None) -> None:
        self.prompts: dict[str, Prompt] = {}
        self.lookups: list[str] = []
        for name, content in (prompts or {}).items():
            self.add(name, content)

    def add(self, name: str, content: str, tags: Sequence[str] = ()) -> Prompt:
        prompt = make_prompt(name, content, tags)
        self.prompts[name] = prompt
        return prompt

    def save_prompt(self, prompt: Prompt) -> None:
        self.prompts[prompt.name] = prompt

    def get_prompt(self, name: str) -> Prompt:
        self.lookups.append(name)
        try:
            return self.prompts[name]
        except KeyError:
            raise PromptNotFoundError(name) from None

    def get_prompts(self) -> list[Prompt]:
        return [self.prompts[name] for name in sorted(self.prompts)]

    def get_prompts_by_tag(self, tags: Sequence[str]) -> list[Prompt]:
        return [p for p in self.get_prompts() if any(t in tags for t in p.tags)]

    def delete_prompt(self, name: str) -> None:
        if name not in self.prompts:
            raise PromptNotFoundError(name)
        del self.prompts[name]


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_storage() -> InMemoryPromptStorage:
    """Create an empty in-memory prompt storage."""
    return InMemoryPromptStorage()


@pytest.fixture
def prompt_factory():
    """Return the make_prompt helper."""
    return make_prompt


@pytest.fixture
def file_storage(temp_dir: Path) -> FileStorage:
    """Create a file storage rooted in a temporary directory."""
    return FileStorage(temp_dir / "prompts")


@pytest.fixture
def default_config() -> PrenConfig:
    """Create a default PrenConfig for testing."""
    return PrenConfig()
