"""
Configuration management for pren.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

if TYPE_CHECKING:
    from pren.storage.file_storage import FileStorage

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def get_pren_home() -> Path:
    """Get pren home directory, respecting PREN_HOME env var.

    Returns:
        Path to pren home (~/.pren by default, or PREN_HOME if set)
    """
    pren_home = os.environ.get("PREN_HOME")
    if pren_home:
        return Path(pren_home).expanduser()
    return Path.home() / ".pren"


def get_default_config_file() -> str:
    """Path of the configuration file used when none is given."""
    return str(get_pren_home() / "config.yaml")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Log level (--verbose forces debug)",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path, rotated by size",
    )
    max_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB",
    )
    backup_count: int = Field(
        default=3,
        description="Number of backup log files to keep",
    )

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class LLMSettings(BaseModel):
    """
    Settings for sending rendered prompts to an LLM.

    Any provider supported by LiteLLM works; OpenAI-compatible servers
    are reached through ``api_base``.

    Example YAML:
    ```yaml
    llm:
      model: openai/gpt-4o-mini
      api_base: http://localhost:11434/v1
      api_keys:
        OPENAI_API_KEY: ${OPENAI_API_KEY}
    ```
    """

    model: str = Field(
        default="gpt-4o-mini",
        description="Model name in LiteLLM format",
    )
    api_base: str | None = Field(
        default=None,
        description="Custom API base URL for OpenAI-compatible endpoints",
    )
    api_keys: dict[str, str] = Field(
        default_factory=dict,
        description="API keys exported to the environment when not already set",
    )
    timeout: float = Field(
        default=120.0,
        description="Completion request timeout in seconds",
    )
    max_tokens: int | None = Field(
        default=None,
        description="Maximum tokens in the completion (provider default when unset)",
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class PrenConfig(BaseModel):
    """
    Main configuration for pren.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. YAML file (~/.pren/config.yaml)
    3. Defaults (lowest)
    """

    storage_path: str = Field(
        default="~/pren/prompts",
        description="Directory holding prompt markdown files",
    )
    copy_to_clipboard: bool = Field(
        default=True,
        description="Copy rendered prompts to the clipboard",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )
    llm: LLMSettings = Field(
        default_factory=LLMSettings,
        description="LLM completion configuration",
    )

    def get_storage_path(self) -> Path:
        """Storage directory with ~ expanded."""
        return Path(self.storage_path).expanduser()

    def get_storage(self) -> FileStorage:
        """Build the prompt storage described by this configuration."""
        from pren.storage.file_storage import FileStorage

        return FileStorage(self.get_storage_path())


def expand_env_vars(value: Any) -> Any:
    """
    Expand ${VAR} and ${VAR:-default} references in string values.

    Walks dicts and lists recursively. Unset variables without a default
    are left untouched.

    Args:
        value: Parsed configuration value

    Returns:
        Value with environment references expanded
    """
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            name, default = match.group(1), match.group(2)
            env_value = os.environ.get(name)
            if env_value:
                return env_value
            if default is not None:
                return default
            if env_value is not None:
                return env_value
            return match.group(0)

        return ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    # Validate file extension matches format
    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        with open(config_path) as f:
            content = f.read()

        if file_ext == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content)

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides. Nested keys use dots,
            e.g. "logging.level". None values are ignored.

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value
        else:
            config_dict[key] = value

    return config_dict


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> PrenConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    A missing config file is not an error; pren then runs on defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.pren/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides

    Returns:
        Validated PrenConfig instance

    Raises:
        ValueError: If the file cannot be parsed or the configuration is invalid
    """
    if config_file is None:
        config_file = get_default_config_file()

    config_dict = expand_env_vars(load_yaml(config_file))
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return PrenConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e
