"""
Brand check orchestration for LLM Brand Checker.

Implements the request lifecycle around the matching pipeline:

1. Validate the request (prompt and brand must be non-blank)
2. Obtain answer text: provider payload when a client is available,
   otherwise the configured fallback text
3. Run normalize -> split_into_items -> find_brand_positions
4. Return a CheckResult

Provider failures never reach the pipeline as exceptions. They are
translated into a CheckResult carrying the fallback text, the provider's
status and error body, and a classified reason (e.g. API_KEY_INVALID).

Example:
    >>> config = load_config()
    >>> result = await run_check(CheckRequest("Best CRM tools?", "HubSpot"), config)
    >>> result.to_dict()["mentioned"]
    True
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from ..config.constants import MAX_PROMPT_LENGTH
from ..config.schema import RuntimeConfig
from ..exceptions import InvalidCheckRequestError, LLMProviderError
from ..extractor.brand_matcher import MatchResult
from ..extractor.parser import check_response, check_text
from ..utils.time import utc_timestamp
from .models import ProviderClient, build_client

logger = logging.getLogger(__name__)

API_KEY_INVALID = "API_KEY_INVALID"

API_KEY_MARKERS = ("api key", "api_key", "api-key")

NOT_FOUND_TROUBLESHOOTING = (
    "\n\nTroubleshooting:\n"
    "1. Verify your API key has access to Gemini models\n"
    '2. Enable "Generative Language API" in Google Cloud Console\n'
    "3. Check that your API key is for Gemini, not another service\n"
    "4. Visit https://aistudio.google.com/apikey to create or verify your key"
)


def _present(value: str | None) -> bool:
    return isinstance(value, str) and bool(value.strip())


@dataclass
class CheckRequest:
    """
    A single brand check.

    Attributes:
        prompt: Prompt sent to the model
        brand: Brand name to look for in the answer

    Raises:
        InvalidCheckRequestError: If prompt or brand is missing or blank, or
            the prompt is longer than MAX_PROMPT_LENGTH
    """

    prompt: str
    brand: str

    def __post_init__(self):
        if not _present(self.prompt) or not _present(self.brand):
            raise InvalidCheckRequestError("Missing prompt or brand")
        if len(self.prompt) > MAX_PROMPT_LENGTH:
            raise InvalidCheckRequestError(
                f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH:,} characters "
                f"(received {len(self.prompt):,} characters)"
            )


@dataclass
class CheckResult:
    """
    Outcome of a brand check, including the answer text that was matched.

    Error fields are only set when the provider call failed.
    """

    prompt: str
    brand: str
    mentioned: bool
    positions: list[int]
    position: int | None
    raw_text: str
    used_model: str | None = None
    checked_at: str = field(default_factory=utc_timestamp)
    error: str | None = None
    message: str | None = None
    provider_status: int | None = None
    provider_reason: str | None = None
    provider_detail: dict[str, Any] | None = field(default=None, repr=False)

    @classmethod
    def from_match(
        cls,
        request: CheckRequest,
        match: MatchResult,
        raw_text: str,
        used_model: str | None,
    ) -> "CheckResult":
        return cls(
            prompt=request.prompt,
            brand=request.brand,
            mentioned=match.mentioned,
            positions=list(match.positions),
            position=match.position,
            raw_text=raw_text,
            used_model=used_model,
        )

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, dropping unset error fields."""
        data: dict[str, Any] = {
            "prompt": self.prompt,
            "brand": self.brand,
            "mentioned": self.mentioned,
            "positions": list(self.positions),
            "position": self.position,
            "raw_text": self.raw_text,
            "used_model": self.used_model,
            "checked_at": self.checked_at,
        }
        for name in (
            "error",
            "message",
            "provider_status",
            "provider_reason",
            "provider_detail",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


def classify_provider_error(detail: dict[str, Any] | None) -> str | None:
    """
    Derive a machine-readable failure reason from a provider error body.

    Looks at error.details[].reason first, then falls back to spotting an
    API-key complaint in error.message.

    Example:
        >>> classify_provider_error(
        ...     {"error": {"details": [{"reason": "API_KEY_INVALID"}]}}
        ... )
        'API_KEY_INVALID'
        >>> classify_provider_error({"error": {"message": "API key expired."}})
        'API_KEY_INVALID'
        >>> classify_provider_error(None) is None
        True
    """
    if not isinstance(detail, dict):
        return None

    error = detail.get("error")
    if not isinstance(error, dict):
        return None

    details = error.get("details")
    if isinstance(details, list):
        for entry in details:
            if isinstance(entry, dict) and entry.get("reason"):
                return str(entry["reason"])

    message = str(error.get("message") or "").lower()
    if any(marker in message for marker in API_KEY_MARKERS):
        return API_KEY_INVALID

    return None


def _failure_result(
    request: CheckRequest,
    exc: LLMProviderError,
    fallback_text: str,
    used_model: str | None,
) -> CheckResult:
    status = exc.status_code
    status_text = status if status is not None else "N/A"
    reason = classify_provider_error(exc.detail)

    base = CheckResult(
        prompt=request.prompt,
        brand=request.brand,
        mentioned=False,
        positions=[],
        position=None,
        raw_text="",
        used_model=used_model,
        provider_status=status,
        provider_reason=reason,
        provider_detail=exc.detail,
    )

    if reason == API_KEY_INVALID:
        base.error = "Invalid API key"
        base.message = (
            "The configured API key is invalid or expired. "
            "Renew or replace the API key."
        )
        base.raw_text = (
            f"API Key Error: {exc}\n\nStatus: {status_text}\n\n"
            "Please update the API key in your environment.\n\n"
            "Get a new key at: https://aistudio.google.com/apikey"
        )
        return base

    troubleshooting = NOT_FOUND_TROUBLESHOOTING if status == 404 else ""
    base.error = f"API Error: {exc}"
    base.message = "API call failed - returning fallback response"
    base.raw_text = (
        f"{fallback_text}\n\n{base.error}\nStatus: {status_text}{troubleshooting}"
    )
    return base


async def run_check(
    request: CheckRequest,
    config: RuntimeConfig,
    client: ProviderClient | None = None,
) -> CheckResult:
    """
    Run one brand check end to end.

    Args:
        request: Validated prompt and brand
        config: Runtime configuration (model, fallback text, API key)
        client: Provider client override; built from config when omitted

    Returns:
        CheckResult. Provider failures are reported in the result, not raised.
    """
    if client is None:
        client = build_client(config)

    if client is None:
        logger.info("No provider client configured, matching against fallback text")
        match = check_text(config.fallback_text, request.brand)
        return CheckResult.from_match(
            request, match, config.fallback_text, config.model_name
        )

    try:
        payload = await client.generate_content(request.prompt)
    except LLMProviderError as e:
        logger.error(
            f"Provider call failed: model={client.model_name}, "
            f"status={e.status_code}, error={e}"
        )
        return _failure_result(request, e, config.fallback_text, client.model_name)

    if not payload:
        logger.warning(f"Empty provider payload: model={client.model_name}")
        payload = config.fallback_text

    text, match = check_response(payload, request.brand)

    logger.info(
        f"Brand check complete: model={client.model_name}, "
        f"mentioned={match.mentioned}, positions={match.positions}"
    )

    return CheckResult.from_match(request, match, text, client.model_name)
