"""
Single-shot LLM completions through LiteLLM.

Sends a rendered prompt as one user message and returns the text of the
first choice. LiteLLM gives access to OpenAI-compatible endpoints as well
as Anthropic, Mistral, Gemini and other providers.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from pren.config.app import ENV_VAR_PATTERN, LLMSettings

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when a completion request fails or returns no text."""

    pass


def export_api_keys(api_keys: dict[str, str]) -> None:
    """Set configured API keys in the environment unless already present.

    Values still holding a ``${VAR}`` reference (the variable was unset when
    the config was loaded) are skipped.

    Args:
        api_keys: Mapping like {"OPENAI_API_KEY": "sk-..."}
    """
    for key, value in api_keys.items():
        if not value or key in os.environ:
            continue
        if ENV_VAR_PATTERN.search(value):
            logger.warning(f"Not exporting {key}: {value} is not set in the environment")
            continue
        os.environ[key] = value
        logger.debug(f"Set {key} from config")


async def get_completion_content(
    prompt: str,
    settings: LLMSettings,
    model: str | None = None,
) -> str:
    """
    Send a prompt to the configured model and return the completion text.

    Args:
        prompt: Rendered prompt text
        settings: LLM settings (model, api_base, api_keys, timeout)
        model: Optional model override

    Returns:
        Text content of the first choice

    Raises:
        CompletionError: If the request fails or the response has no text
        ImportError: If litellm is not installed
    """
    try:
        import litellm
    except ImportError as e:
        raise ImportError(
            "litellm package not found. Please install with `pip install litellm`."
        ) from e

    export_api_keys(settings.api_keys)

    model_name = model or settings.model
    completion_kwargs: dict[str, Any] = {
        "model": model_name,
        "messages": [{"role": "user", "content": prompt}],
        "timeout": settings.timeout,
    }
    if settings.api_base:
        completion_kwargs["api_base"] = settings.api_base
    if settings.max_tokens:
        completion_kwargs["max_tokens"] = settings.max_tokens

    logger.debug(f"Requesting completion from {model_name}")
    try:
        response = await litellm.acompletion(**completion_kwargs)
    except Exception as e:
        logger.error(f"Completion request to {model_name} failed: {e}")
        raise CompletionError(f"Completion request to {model_name} failed: {e}") from e

    choices = getattr(response, "choices", None)
    if not choices:
        raise CompletionError("Completion response contained no choices")

    content = choices[0].message.content
    if not isinstance(content, str) or not content:
        raise CompletionError("Expected text response, but got tool call or empty content")

    return content
