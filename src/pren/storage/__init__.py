"""
Prompt storage.

PromptStorage is the interface rendering depends on; FileStorage keeps
prompts as markdown files with YAML frontmatter.
"""

from .base import (
    InvalidBasePathError,
    InvalidPromptNameError,
    PromptNotFoundError,
    PromptSerializationError,
    PromptStorage,
    StorageError,
)
from .file_storage import FileStorage, parse_frontmatter, serialize_frontmatter

__all__ = [
    "FileStorage",
    "InvalidBasePathError",
    "InvalidPromptNameError",
    "PromptNotFoundError",
    "PromptSerializationError",
    "PromptStorage",
    "StorageError",
    "parse_frontmatter",
    "serialize_frontmatter",
]
