"""
Configuration schema models for LLM Brand Checker.

This module defines Pydantic models for validating the optional
checker.config.yaml file and the runtime configuration derived from it.

Models:
    CheckerConfig: Provider settings from YAML (model, sampling, timeout)
    RuntimeConfig: CheckerConfig plus the API key resolved from the environment

Example YAML:
    model_name: gemini-2.5-flash
    temperature: 0.2
    max_output_tokens: 2048
    request_timeout: 20
    env_api_key: GEMINI_API_KEY
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_API_KEY_ENV, DEFAULT_MODEL_NAME, FALLBACK_TEXT


class CheckerConfig(BaseModel):
    """
    Provider configuration for brand checks.

    Attributes:
        model_name: Gemini model identifier (e.g., "gemini-2.5-flash")
        temperature: Sampling temperature sent with every request (0.0-2.0)
        max_output_tokens: Upper bound on generated tokens
        request_timeout: Per-request HTTP timeout in seconds
        env_api_key: Environment variable holding the API key
        fallback_text: Answer text used when no provider call is made
    """

    model_config = ConfigDict(extra="forbid")

    model_name: str = DEFAULT_MODEL_NAME
    temperature: float = 0.2
    max_output_tokens: int = 2048
    request_timeout: float = 20.0
    env_api_key: str = DEFAULT_API_KEY_ENV
    fallback_text: str = FALLBACK_TEXT

    @field_validator("model_name", "env_api_key", "fallback_text")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Validate string settings are non-empty."""
        if not v or v.isspace():
            raise ValueError("value cannot be empty")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature is within the provider's accepted range."""
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0, got: {v}")
        return v

    @field_validator("max_output_tokens", "request_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate limits are positive."""
        if v <= 0:
            raise ValueError(f"value must be positive, got: {v}")
        return v


class RuntimeConfig(CheckerConfig):
    """
    Runtime configuration with the API key resolved.

    api_key is None when the environment variable is unset; the check
    service then answers with fallback_text instead of calling the provider.

    Security:
        api_key is excluded from repr() so it never lands in logs.
    """

    api_key: str | None = Field(default=None, repr=False)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key) and not self.api_key.isspace()
