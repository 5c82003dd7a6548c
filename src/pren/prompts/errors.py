"""Exceptions raised while parsing and rendering prompt templates."""

from __future__ import annotations


class ParseTemplateError(Exception):
    """Raised when prompt content does not follow the template grammar."""

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        return f"Parse template error: {self.message}"


class RenderTemplateError(Exception):
    """Base exception for failures while rendering a template."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"Render template error: {self.message}"


class MissingArgumentError(RenderTemplateError):
    """Raised when an argument used by the template was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing argument: {name}")


class CircularReferenceError(RenderTemplateError):
    """Raised when a prompt is referenced again while it is still being resolved."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Circular reference detected: prompt '{name}' references itself "
            "(directly or indirectly)"
        )


class MaxDepthExceededError(RenderTemplateError):
    """Raised when prompt references nest deeper than allowed."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Maximum nesting depth of {max_depth} exceeded")


class ReferenceNotFoundError(RenderTemplateError):
    """Raised when a referenced prompt cannot be fetched from storage.

    The storage error is available as ``__cause__``.
    """

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Error retrieving referenced prompt '{name}': {reason}")


class ReferencedPromptError(RenderTemplateError):
    """Wraps an error raised inside a referenced prompt.

    Each level of reference adds one wrapper, so the chain of wrappers
    mirrors the chain of references that led to the failure.
    """

    def __init__(self, name: str, inner: RenderTemplateError | ParseTemplateError):
        self.name = name
        self.inner = inner
        inner_message = str(inner) if isinstance(inner, ParseTemplateError) else inner.message
        super().__init__(f"failed to render referenced prompt '{name}': {inner_message}")

    @property
    def root_cause(self) -> RenderTemplateError | ParseTemplateError:
        """The innermost error of the chain."""
        error: RenderTemplateError | ParseTemplateError = self
        while isinstance(error, ReferencedPromptError):
            error = error.inner
        return error

    @property
    def reference_chain(self) -> list[str]:
        """Names of the referenced prompts, outermost first."""
        chain = []
        error: RenderTemplateError | ParseTemplateError = self
        while isinstance(error, ReferencedPromptError):
            chain.append(error.name)
            error = error.inner
        return chain
