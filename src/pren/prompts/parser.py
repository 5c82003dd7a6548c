"""
Template grammar parser.

Turns raw prompt content into an ordered tuple of template parts. At each
position the constructs below are tried in order and the first match wins:

1. ``{{{{text}}}}``          escaped literal, ``text`` kept verbatim
2. ``{{prompt:name}}``       reference to another stored prompt
3. ``{{prompt_var:name}}``   reference to the prompt named by argument ``name``
4. ``{{name}}``              argument placeholder
5. anything up to the next ``{{`` (or the end of input) as literal text

The whole input must be consumed. A ``{{`` that does not open one of the
constructs above cannot start a literal run either, so it is an error.
"""

from __future__ import annotations

import logging
import re

from pren.prompts.errors import ParseTemplateError
from pren.prompts.models import (
    Argument,
    Literal,
    PromptReference,
    PromptTemplatePart,
    VariablePromptReference,
)

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_LENGTH = 64
IDENTIFIER_PATTERN = rf"[A-Za-z0-9_-]{{1,{MAX_IDENTIFIER_LENGTH}}}"
IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)

OPEN = "{{"
CLOSE = "}}"
ESCAPE_OPEN = "{{{{"
ESCAPE_CLOSE = "}}}}"

_ESCAPED_LITERAL_RE = re.compile(r"\{\{\{\{(.*?)\}\}\}\}", re.DOTALL)
_PROMPT_REFERENCE_RE = re.compile(rf"\{{\{{prompt:({IDENTIFIER_PATTERN})\}}\}}")
_VARIABLE_REFERENCE_RE = re.compile(rf"\{{\{{prompt_var:({IDENTIFIER_PATTERN})\}}\}}")
_ARGUMENT_RE = re.compile(rf"\{{\{{({IDENTIFIER_PATTERN})\}}\}}")


def is_valid_identifier(name: str) -> bool:
    """Check whether ``name`` can be used as an argument or prompt name."""
    return IDENTIFIER_RE.fullmatch(name) is not None


def parse_template(content: str) -> tuple[PromptTemplatePart, ...]:
    """Parse template content into its parts.

    Args:
        content: Raw template source

    Returns:
        Tuple of parts in source order (empty for empty content)

    Raises:
        ParseTemplateError: If any part of the input is not valid template syntax
    """
    parts: list[PromptTemplatePart] = []
    pos = 0
    end = len(content)

    while pos < end:
        part, pos = _parse_part(content, pos)
        parts.append(part)

    logger.debug(f"Parsed template into {len(parts)} parts")
    return tuple(parts)


def _parse_part(content: str, pos: int) -> tuple[PromptTemplatePart, int]:
    """Parse the single part starting at ``pos``.

    Returns:
        The part and the position right after it
    """
    match = _ESCAPED_LITERAL_RE.match(content, pos)
    if match:
        return Literal(match.group(1)), match.end()

    match = _PROMPT_REFERENCE_RE.match(content, pos)
    if match:
        return PromptReference(match.group(1)), match.end()

    match = _VARIABLE_REFERENCE_RE.match(content, pos)
    if match:
        return VariablePromptReference(match.group(1)), match.end()

    match = _ARGUMENT_RE.match(content, pos)
    if match:
        return Argument(match.group(1)), match.end()

    next_open = content.find(OPEN, pos)
    if next_open == -1:
        next_open = len(content)
    if next_open > pos:
        return Literal(content[pos:next_open]), next_open

    raise _invalid_construct(content, pos)


def _invalid_construct(content: str, pos: int) -> ParseTemplateError:
    """Describe why the ``{{`` at ``pos`` does not open a valid construct."""
    if content.startswith(ESCAPE_OPEN, pos) and ESCAPE_CLOSE not in content[pos + 4 :]:
        return ParseTemplateError(
            f"unterminated escaped literal at position {pos}: missing '{ESCAPE_CLOSE}'",
            position=pos,
        )

    close = content.find(CLOSE, pos + len(OPEN))
    if close == -1:
        return ParseTemplateError(
            f"unterminated placeholder at position {pos}: missing '{CLOSE}'",
            position=pos,
        )

    placeholder = content[pos : close + len(CLOSE)]
    return ParseTemplateError(
        f"invalid placeholder '{placeholder}' at position {pos}: names must be 1 to "
        f"{MAX_IDENTIFIER_LENGTH} letters, digits, '-' or '_'",
        position=pos,
    )
