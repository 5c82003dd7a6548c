"""
Template renderer.

Substitutes arguments and recursively resolves prompt references. Each
top-level render owns a RenderValidationContext that records the prompts
on the active resolution path, which is how cycles and runaway nesting
are rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from pren.prompts.errors import (
    CircularReferenceError,
    MaxDepthExceededError,
    MissingArgumentError,
    ParseTemplateError,
    ReferencedPromptError,
    ReferenceNotFoundError,
    RenderTemplateError,
)
from pren.prompts.models import (
    Argument,
    Literal,
    PromptReference,
    PromptTemplate,
    PromptTemplatePart,
    VariablePromptReference,
)
from pren.storage.base import StorageError

if TYPE_CHECKING:
    from pren.storage.base import PromptStorage

logger = logging.getLogger(__name__)

# Maximum number of prompt references resolved at once on a single path
MAX_NESTING_DEPTH = 3


class RenderValidationContext:
    """Tracks the active reference path of one render call.

    Only ancestors of the reference being resolved are recorded: names are
    removed again on exit, so a prompt reachable through two sibling
    branches is not mistaken for a cycle.
    """

    def __init__(self) -> None:
        self.visited_prompts: set[str] = set()
        self.current_depth = 0

    def enter(self, name: str) -> None:
        """Register ``name`` on the active path.

        Raises:
            CircularReferenceError: If ``name`` is already on the path
            MaxDepthExceededError: If the path is already at maximum depth
        """
        if name in self.visited_prompts:
            raise CircularReferenceError(name)

        if self.current_depth >= MAX_NESTING_DEPTH:
            raise MaxDepthExceededError(MAX_NESTING_DEPTH)

        self.visited_prompts.add(name)
        self.current_depth += 1

    def exit(self, name: str) -> None:
        """Remove ``name`` from the active path."""
        self.visited_prompts.discard(name)
        self.current_depth -= 1


def render(
    template: PromptTemplate,
    arguments: Mapping[str, str],
    storage: PromptStorage,
) -> str:
    """Render a template.

    Args:
        template: Parsed template to render
        arguments: Argument values, shared by every referenced prompt
        storage: Storage used to fetch referenced prompts

    Returns:
        The rendered text

    Raises:
        RenderTemplateError: On the first failure; no partial output is returned
    """
    context = RenderValidationContext()
    return _render_parts(template.parts, arguments, storage, context)


def _render_parts(
    parts: Iterable[PromptTemplatePart],
    arguments: Mapping[str, str],
    storage: PromptStorage,
    context: RenderValidationContext,
) -> str:
    result: list[str] = []

    for part in parts:
        match part:
            case Literal(text=text):
                result.append(text)
            case Argument(name=name):
                result.append(_get_argument(arguments, name))
            case PromptReference(name=name):
                result.append(_render_reference(name, arguments, storage, context))
            case VariablePromptReference(name=name):
                target = _get_argument(arguments, name)
                result.append(_render_reference(target, arguments, storage, context))
            case _:
                raise TypeError(f"Unknown template part: {part!r}")

    return "".join(result)


def _get_argument(arguments: Mapping[str, str], name: str) -> str:
    try:
        return arguments[name]
    except KeyError:
        raise MissingArgumentError(name) from None


def _render_reference(
    name: str,
    arguments: Mapping[str, str],
    storage: PromptStorage,
    context: RenderValidationContext,
) -> str:
    """Resolve and render the prompt ``name`` on behalf of a reference."""
    context.enter(name)
    logger.debug(f"Resolving prompt reference '{name}' (depth {context.current_depth})")

    try:
        try:
            prompt = storage.get_prompt(name)
        except StorageError as e:
            raise ReferenceNotFoundError(name, str(e)) from e

        try:
            template = PromptTemplate.from_prompt(prompt)
        except ParseTemplateError as e:
            raise ReferencedPromptError(name, e) from e

        try:
            return _render_parts(template.parts, arguments, storage, context)
        except RenderTemplateError as e:
            raise ReferencedPromptError(name, e) from e
    finally:
        context.exit(name)
