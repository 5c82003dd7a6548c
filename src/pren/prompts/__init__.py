"""
Prompt template parsing and rendering.

Provides:
- Prompt and PromptMetadata, the stored form of a prompt
- A strict template grammar for arguments, prompt references and escapes
- Recursive rendering with cycle detection and a nesting depth limit
"""

from .errors import (
    CircularReferenceError,
    MaxDepthExceededError,
    MissingArgumentError,
    ParseTemplateError,
    ReferencedPromptError,
    ReferenceNotFoundError,
    RenderTemplateError,
)
from .models import (
    Argument,
    Literal,
    Prompt,
    PromptMetadata,
    PromptReference,
    PromptTemplate,
    PromptTemplatePart,
    VariablePromptReference,
)
from .parser import is_valid_identifier, parse_template
from .renderer import MAX_NESTING_DEPTH, RenderValidationContext, render

__all__ = [
    "MAX_NESTING_DEPTH",
    "Argument",
    "CircularReferenceError",
    "Literal",
    "MaxDepthExceededError",
    "MissingArgumentError",
    "ParseTemplateError",
    "Prompt",
    "PromptMetadata",
    "PromptReference",
    "PromptTemplate",
    "PromptTemplatePart",
    "ReferenceNotFoundError",
    "ReferencedPromptError",
    "RenderTemplateError",
    "RenderValidationContext",
    "VariablePromptReference",
    "is_valid_identifier",
    "parse_template",
    "render",
]
