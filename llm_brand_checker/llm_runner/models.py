"""
Provider client abstraction and factory for LLM Brand Checker.

The check service only needs something that turns a prompt into a raw
provider payload. ProviderClient captures that contract so tests and
alternative providers can be swapped in without touching the service.

Example:
    >>> client = build_client(load_config())
    >>> payload = await client.generate_content("What are the best CRM tools?")
"""

from typing import Any, Protocol

from llm_brand_checker.config.schema import RuntimeConfig

from .gemini_client import GeminiClient


class ProviderClient(Protocol):
    """
    Anything that can answer a prompt with a raw provider payload.

    Attributes:
        model_name: Model identifier reported back in check results
    """

    model_name: str

    async def generate_content(self, prompt: str) -> Any:
        """Return the provider's decoded response body for the prompt."""
        ...


def build_client(config: RuntimeConfig) -> ProviderClient | None:
    """
    Create the provider client described by the runtime configuration.

    Returns:
        GeminiClient, or None when no API key is configured

    Example:
        >>> config = RuntimeConfig(api_key="AIza-test")
        >>> build_client(config).model_name
        'gemini-2.5-flash'
    """
    if not config.has_api_key:
        return None

    return GeminiClient(
        model_name=config.model_name,
        api_key=config.api_key,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        timeout=config.request_timeout,
    )
