"""
Configuration loader for LLM Brand Checker.

Loads the optional checker.config.yaml, applies environment overrides,
validates everything with Pydantic and resolves the API key from the
environment into a RuntimeConfig.

Precedence (highest first):
    1. GEMINI_MODEL / GEMINI_TEMPERATURE environment variables
    2. YAML file values
    3. CheckerConfig defaults

Functions:
    load_config: Main entrypoint returning a RuntimeConfig
    resolve_api_key: Read the API key from the configured variable
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from llm_brand_checker.exceptions import (
    ConfigFileNotFoundError,
    ConfigValidationError,
)

from .constants import MODEL_ENV, TEMPERATURE_ENV
from .schema import CheckerConfig, RuntimeConfig

logger = logging.getLogger(__name__)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigValidationError(
            f"Failed to read configuration file {config_path}: {e}"
        ) from e

    if raw_config is None:
        raise ConfigValidationError(f"Configuration file is empty: {config_path}")

    if not isinstance(raw_config, dict):
        raise ConfigValidationError(
            f"Configuration file must contain a mapping: {config_path}"
        )

    return raw_config


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    model_name = os.environ.get(MODEL_ENV)
    if model_name:
        overrides["model_name"] = model_name

    temperature = os.environ.get(TEMPERATURE_ENV)
    if temperature:
        overrides["temperature"] = temperature

    return overrides


def resolve_api_key(env_var: str) -> str | None:
    """
    Resolve the provider API key from an environment variable.

    Returns None (not an error) when the variable is unset or blank.

    Security:
        The key value is never logged; only the variable name is.
    """
    api_key = os.environ.get(env_var)
    if not api_key or api_key.isspace():
        logger.info(f"No API key in ${env_var}, provider calls are disabled")
        return None
    return api_key


def load_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration and resolve the API key from the environment.

    Args:
        config_path: Optional path to a YAML file. Without it, defaults plus
            environment overrides are used.

    Returns:
        RuntimeConfig ready for the check service

    Raises:
        ConfigFileNotFoundError: If config_path is given but doesn't exist
        ConfigValidationError: If YAML is invalid or validation fails

    Example:
        >>> config = load_config()
        >>> config.model_name
        'gemini-2.5-flash'
    """
    raw_config: dict[str, Any] = {}
    source = "defaults"

    if config_path is not None:
        config_path = Path(config_path)
        raw_config = _read_yaml(config_path)
        source = str(config_path)

    raw_config.update(_env_overrides())

    try:
        checker_config = CheckerConfig.model_validate(raw_config)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            error_messages.append(f"  - {loc}: {msg}")

        raise ConfigValidationError(
            f"Configuration validation failed in {source}:\n"
            + "\n".join(error_messages)
        ) from e

    runtime_config = RuntimeConfig(
        **checker_config.model_dump(),
        api_key=resolve_api_key(checker_config.env_api_key),
    )

    logger.debug(
        f"Loaded configuration from {source}: model={runtime_config.model_name}"
    )

    return runtime_config
