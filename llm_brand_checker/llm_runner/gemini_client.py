"""
Google Gemini API client implementation for LLM Brand Checker.

Sends a prompt to the Gemini generateContent endpoint and hands back the
decoded JSON body untouched. Turning that body into text is the
normalizer's job, so response shape changes never break this client.

Key features:
- Async HTTP client (httpx.AsyncClient)
- One request per call; failures surface as LLMProviderError subclasses
  carrying the HTTP status and the provider's error body
- Security: NEVER logs API keys

Example:
    >>> client = GeminiClient("gemini-2.5-flash", api_key="AIza...")
    >>> payload = await client.generate_content("Best CRM tools?")
    >>> normalize(payload)
    '1. HubSpot\\n2. Salesforce'
"""

import logging
from typing import Any

import httpx

from llm_brand_checker.config.constants import MAX_PROMPT_LENGTH
from llm_brand_checker.exceptions import (
    LLMAuthenticationError,
    LLMProviderError,
    LLMResponseError,
    LLMTimeoutError,
)

# Suppress HTTPX request logging; request URLs carry the API key
httpx_logger = logging.getLogger("httpx")
httpx_logger.setLevel(logging.WARNING)

# API endpoint format: https://generativelanguage.googleapis.com/v1/models/{model}:generateContent
GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1"

AUTH_STATUS_CODES = frozenset([401, 403])

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Google Gemini API client.

    Attributes:
        model_name: Gemini model identifier (e.g., "gemini-2.5-flash")
        api_key: Google API key (NEVER logged)
        temperature: Sampling temperature sent in generationConfig
        max_output_tokens: maxOutputTokens sent in generationConfig
        timeout: Per-request timeout in seconds

    Security:
        - API keys are NEVER logged in any form (not even partial)
        - API keys only travel in the `key` query parameter
        - Error messages include status and provider message, never the URL
    """

    def __init__(
        self,
        model_name: str,
        api_key: str,
        temperature: float = 0.2,
        max_output_tokens: int = 2048,
        timeout: float = 20.0,
    ):
        """
        Raises:
            ValueError: If model_name or api_key is empty
        """
        if not model_name or model_name.isspace():
            raise ValueError("model_name cannot be empty")

        if not api_key or api_key.isspace():
            raise ValueError("api_key cannot be empty")

        self.model_name = model_name
        self.api_key = api_key
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout

        logger.info(f"Initialized Gemini client for model: {model_name}")

    @property
    def api_url(self) -> str:
        return f"{GEMINI_API_BASE_URL}/models/{self.model_name}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def generate_content(self, prompt: str) -> Any:
        """
        Send the prompt to Gemini and return the decoded response body.

        Args:
            prompt: User prompt

        Returns:
            Decoded JSON body (normally a dict with a 'candidates' array)

        Raises:
            ValueError: If prompt is empty or too long
            LLMAuthenticationError: On 401/403
            LLMTimeoutError: If the request timed out
            LLMProviderError: On any other HTTP or connection failure
            LLMResponseError: If the success body is not JSON
        """
        if not prompt or prompt.isspace():
            raise ValueError("Prompt cannot be empty")

        if len(prompt) > MAX_PROMPT_LENGTH:
            raise ValueError(
                f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH:,} characters "
                f"(received {len(prompt):,} characters)"
            )

        logger.debug(f"Sending request to Gemini: model={self.model_name}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    json=self.build_payload(prompt),
                    headers={"Content-Type": "application/json"},
                    params={"key": self.api_key},
                )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini API timeout: model={self.model_name}")
            raise LLMTimeoutError(
                f"Gemini request timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                f"Gemini API connection error: model={self.model_name}, "
                f"error={type(e).__name__}"
            )
            raise LLMProviderError(f"Gemini connection failed: {type(e).__name__}") from e

        if response.is_error:
            self._raise_for_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise LLMResponseError(
                "Failed to parse Gemini response JSON",
                status_code=response.status_code,
            ) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        detail = self._extract_error_body(response)
        message = self._extract_error_message(detail, response.status_code)

        logger.error(
            f"Gemini API HTTP error: status={response.status_code}, "
            f"model={self.model_name}, detail={message}"
        )

        error_cls = (
            LLMAuthenticationError
            if response.status_code in AUTH_STATUS_CODES
            else LLMProviderError
        )
        raise error_cls(message, status_code=response.status_code, detail=detail)

    @staticmethod
    def _extract_error_body(response: httpx.Response) -> dict[str, Any] | None:
        try:
            body = response.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    @staticmethod
    def _extract_error_message(detail: dict[str, Any] | None, status_code: int) -> str:
        if detail:
            error = detail.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"HTTP {status_code}"
