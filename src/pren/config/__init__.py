"""
Configuration package for pren.

Pydantic config models and YAML loading live in app.py.
"""

from pren.config.app import (
    LLMSettings,
    LoggingSettings,
    PrenConfig,
    expand_env_vars,
    get_pren_home,
    load_config,
)

__all__ = [
    "LLMSettings",
    "LoggingSettings",
    "PrenConfig",
    "expand_env_vars",
    "get_pren_home",
    "load_config",
]
