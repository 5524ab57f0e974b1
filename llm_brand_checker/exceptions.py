"""
Custom exceptions for LLM Brand Checker.

This module provides a hierarchy of exceptions that enable type-safe error
handling throughout the application. All exceptions inherit from the base
BrandCheckerError for consistent catching.

The matching pipeline (normalizer, segmenter, brand matcher) never raises:
malformed provider payloads and odd brand names degrade to empty results.
These exceptions belong to the layers around it: configuration loading,
request validation and the model provider client.

Exception Hierarchy:
    BrandCheckerError (base)
    ├── ConfigurationError
    │   ├── ConfigFileNotFoundError
    │   └── ConfigValidationError
    ├── InvalidCheckRequestError
    └── LLMProviderError
        ├── LLMAuthenticationError
        ├── LLMTimeoutError
        └── LLMResponseError

Usage:
    from llm_brand_checker.exceptions import ConfigurationError

    try:
        config = load_config(path)
    except ConfigFileNotFoundError as e:
        logger.error(f"Config file not found: {e}")
        sys.exit(1)
"""

from typing import Any


class BrandCheckerError(Exception):
    """
    Base exception for all LLM Brand Checker errors.

    Example:
        try:
            # application code
            pass
        except BrandCheckerError as e:
            logger.error(f"Application error: {e}")
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BrandCheckerError):
    """
    Base class for configuration-related errors.

    Should be caught and result in exit code 1 (configuration error).
    """

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """
    Configuration file does not exist at the specified path.

    Example:
        raise ConfigFileNotFoundError("/path/to/checker.config.yaml")
    """

    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration file or environment override is invalid.

    Example:
        raise ConfigValidationError("Field 'temperature' must be <= 2.0")
    """

    pass


# ============================================================================
# Request Errors
# ============================================================================


class InvalidCheckRequestError(BrandCheckerError):
    """
    A brand check was requested without a usable prompt or brand.

    This is the client-error signal: nothing is sent to the provider.

    Example:
        raise InvalidCheckRequestError("Missing prompt or brand")
    """

    pass


# ============================================================================
# LLM Provider Errors
# ============================================================================


class LLMProviderError(BrandCheckerError):
    """
    Base class for LLM provider API errors.

    Carries whatever the provider told us so the check service can turn the
    failure into a textual fallback result.

    Attributes:
        status_code: HTTP status returned by the provider, None for
            connection failures and timeouts
        detail: Decoded JSON error body from the provider, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class LLMAuthenticationError(LLMProviderError):
    """
    LLM provider rejected the credentials (401/403).

    Example:
        raise LLMAuthenticationError("Gemini API key is invalid", status_code=401)
    """

    pass


class LLMTimeoutError(LLMProviderError):
    """
    LLM provider request timed out.

    Example:
        raise LLMTimeoutError("Gemini request timed out after 20s")
    """

    pass


class LLMResponseError(LLMProviderError):
    """
    LLM provider returned a body that is not valid JSON.

    Unexpected JSON shapes are NOT errors; the normalizer handles them.

    Example:
        raise LLMResponseError("Gemini response is not JSON")
    """

    pass
