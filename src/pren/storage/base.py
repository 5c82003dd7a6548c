"""Prompt storage interface and its exceptions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pren.prompts.models import Prompt


class StorageError(Exception):
    """Base exception for prompt storage errors."""

    pass


class PromptNotFoundError(StorageError):
    """Raised when no prompt exists with the requested name."""

    def __init__(self, name: str, path: str | None = None):
        self.name = name
        self.path = path
        super().__init__(f"Prompt not found: {path or name}")


class InvalidPromptNameError(StorageError):
    """Raised when a prompt name cannot be stored or referenced."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid prompt name '{name}': use 1 to 64 letters, digits, '-' or '_'"
        )


class InvalidBasePathError(StorageError):
    """Raised when the storage base path exists but is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid base path: {path}")


class PromptSerializationError(StorageError):
    """Raised when a stored prompt file cannot be read back."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Serialization error in {path}: {reason}")


class PromptStorage(Protocol):
    """Interface for storing and retrieving prompts.

    Rendering only needs ``get_prompt``; the other operations back the CLI.
    All methods raise ``StorageError`` subclasses on failure.
    """

    def save_prompt(self, prompt: Prompt) -> None: ...

    def get_prompt(self, name: str) -> Prompt: ...

    def get_prompts(self) -> list[Prompt]: ...

    def get_prompts_by_tag(self, tags: Sequence[str]) -> list[Prompt]: ...

    def delete_prompt(self, name: str) -> None: ...
