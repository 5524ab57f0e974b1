"""
Model provider layer for LLM Brand Checker.

Supplies raw response payloads to the brand check pipeline and translates
provider failures into result payloads.

Example:
    >>> from llm_brand_checker.llm_runner import CheckRequest, run_check
    >>> result = await run_check(CheckRequest(prompt="Best CRM?", brand="HubSpot"), config)
    >>> result.mentioned
    True
"""

from .gemini_client import GeminiClient
from .models import ProviderClient, build_client
from .runner import CheckRequest, CheckResult, classify_provider_error, run_check

__all__ = [
    "CheckRequest",
    "CheckResult",
    "GeminiClient",
    "ProviderClient",
    "build_client",
    "classify_provider_error",
    "run_check",
]
