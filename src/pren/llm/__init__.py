"""LLM completion for rendered prompts."""

from .completion import CompletionError, export_api_keys, get_completion_content

__all__ = ["CompletionError", "export_api_keys", "get_completion_content"]
