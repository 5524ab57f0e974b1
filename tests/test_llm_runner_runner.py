"""
Tests for llm_runner.runner module - brand check orchestration.

Tests cover:
- CheckRequest validation
- Fallback answer when no API key is configured
- Provider payloads flowing through the matching pipeline
- Provider failures translated into fallback results (never raised)
- API_KEY_INVALID classification and 404 troubleshooting text
- CheckResult serialization
"""

import pytest
from freezegun import freeze_time

from llm_brand_checker.config.constants import FALLBACK_TEXT, MAX_PROMPT_LENGTH
from llm_brand_checker.config.schema import RuntimeConfig
from llm_brand_checker.exceptions import (
    InvalidCheckRequestError,
    LLMAuthenticationError,
    LLMProviderError,
    LLMTimeoutError,
)
from llm_brand_checker.llm_runner.gemini_client import GeminiClient
from llm_brand_checker.llm_runner.models import build_client
from llm_brand_checker.llm_runner.runner import (
    API_KEY_INVALID,
    CheckRequest,
    CheckResult,
    classify_provider_error,
    run_check,
)


class FakeClient:
    """Provider client returning a canned payload or raising a canned error."""

    def __init__(self, payload=None, error=None, model_name="gemini-test"):
        self.model_name = model_name
        self.payload = payload
        self.error = error
        self.prompts = []

    async def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


def gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def check_request():
    return CheckRequest(prompt="What are the best CRM tools?", brand="HubSpot")


@pytest.fixture
def config():
    return RuntimeConfig()


class TestCheckRequest:
    """Test suite for CheckRequest validation."""

    def test_valid(self):
        """Test a normal request."""
        request = CheckRequest(prompt="Best CRM?", brand="HubSpot")

        assert request.prompt == "Best CRM?"
        assert request.brand == "HubSpot"

    @pytest.mark.parametrize(
        "prompt,brand",
        [("", "HubSpot"), ("   ", "HubSpot"), ("Best CRM?", ""), ("Best CRM?", "  "), (None, "HubSpot")],
    )
    def test_missing_fields(self, prompt, brand):
        """Test blank or missing prompt/brand are rejected."""
        with pytest.raises(InvalidCheckRequestError, match="Missing prompt or brand"):
            CheckRequest(prompt=prompt, brand=brand)

    def test_prompt_at_max_length(self):
        """Test a prompt of exactly MAX_PROMPT_LENGTH is accepted."""
        request = CheckRequest(prompt="x" * MAX_PROMPT_LENGTH, brand="HubSpot")

        assert len(request.prompt) == MAX_PROMPT_LENGTH

    def test_prompt_too_long(self):
        """Test over-long prompts are rejected before any provider call."""
        with pytest.raises(InvalidCheckRequestError, match="exceeds maximum length"):
            CheckRequest(prompt="x" * (MAX_PROMPT_LENGTH + 1), brand="HubSpot")


class TestBuildClient:
    """Test suite for build_client()."""

    def test_no_api_key(self):
        """Test no client is built without a key."""
        assert build_client(RuntimeConfig()) is None

    def test_gemini_client_from_config(self):
        """Test the client picks up config values."""
        client = build_client(
            RuntimeConfig(api_key="AIza-test", model_name="gemini-2.5-pro", temperature=0.4)
        )

        assert isinstance(client, GeminiClient)
        assert client.model_name == "gemini-2.5-pro"
        assert client.temperature == 0.4


class TestRunCheckSuccess:
    """Test suite for run_check() happy paths."""

    @pytest.mark.asyncio
    async def test_without_api_key_uses_fallback(self, check_request, config):
        """Test the fallback answer is matched when no key is configured."""
        result = await run_check(check_request, config)

        assert result.raw_text == FALLBACK_TEXT
        assert result.mentioned is False
        assert result.positions == []
        assert result.position is None
        assert result.used_model == config.model_name
        assert result.failed is False

    @pytest.mark.asyncio
    async def test_provider_payload_is_matched(self, check_request, config):
        """Test the provider answer flows through the pipeline."""
        client = FakeClient(gemini_payload("1. Salesforce\n2. HubSpot\n3. Zoho"))

        result = await run_check(check_request, config, client=client)

        assert client.prompts == ["What are the best CRM tools?"]
        assert result.raw_text == "1. Salesforce\n2. HubSpot\n3. Zoho"
        assert result.mentioned is True
        assert result.positions == [2]
        assert result.position == 2
        assert result.used_model == "gemini-test"
        assert result.error is None

    @pytest.mark.asyncio
    async def test_brand_not_in_answer(self, check_request, config):
        """Test an answer without the brand."""
        client = FakeClient(gemini_payload("Salesforce, Zoho, Pipedrive"))

        result = await run_check(check_request, config, client=client)

        assert result.mentioned is False
        assert result.failed is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, "", {}])
    async def test_empty_payload_uses_fallback(self, check_request, config, payload):
        """Test an empty provider payload is replaced by the fallback text."""
        result = await run_check(check_request, config, client=FakeClient(payload))

        assert result.raw_text == FALLBACK_TEXT
        assert result.mentioned is False

    @pytest.mark.asyncio
    async def test_custom_fallback_text(self, check_request):
        """Test configured fallback text is what gets matched."""
        config = RuntimeConfig(fallback_text="1. HubSpot")

        result = await run_check(check_request, config)

        assert result.positions == [1]


class TestRunCheckFailures:
    """Test suite for provider failure translation."""

    @pytest.mark.asyncio
    async def test_generic_error(self, check_request, config):
        """Test a provider error becomes a fallback result with status."""
        error = LLMProviderError(
            "Internal error", status_code=500, detail={"error": {"message": "Internal error"}}
        )

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert result.failed is True
        assert result.error == "API Error: Internal error"
        assert result.message == "API call failed - returning fallback response"
        assert result.provider_status == 500
        assert result.provider_reason is None
        assert result.raw_text.startswith(FALLBACK_TEXT)
        assert "API Error: Internal error\nStatus: 500" in result.raw_text
        assert "Troubleshooting" not in result.raw_text
        assert result.mentioned is False
        assert result.positions == []

    @pytest.mark.asyncio
    async def test_not_found_adds_troubleshooting(self, check_request, config):
        """Test 404 failures carry setup hints."""
        error = LLMProviderError("models/gemini-x is not found", status_code=404)

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert "Status: 404" in result.raw_text
        assert "Troubleshooting:" in result.raw_text
        assert "Generative Language API" in result.raw_text

    @pytest.mark.asyncio
    async def test_timeout_has_no_status(self, check_request, config):
        """Test failures without HTTP status report N/A."""
        error = LLMTimeoutError("Gemini request timed out after 20.0s")

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert result.provider_status is None
        assert "Status: N/A" in result.raw_text

    @pytest.mark.asyncio
    async def test_invalid_api_key(self, check_request, config):
        """Test API_KEY_INVALID failures get a dedicated error."""
        detail = {
            "error": {
                "code": 400,
                "message": "API key not valid. Please pass a valid API key.",
                "details": [{"reason": "API_KEY_INVALID"}],
            }
        }
        error = LLMProviderError(
            "API key not valid. Please pass a valid API key.",
            status_code=400,
            detail=detail,
        )

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert result.error == "Invalid API key"
        assert result.provider_reason == API_KEY_INVALID
        assert result.provider_detail == detail
        assert result.raw_text.startswith("API Key Error:")
        assert "Status: 400" in result.raw_text

    @pytest.mark.asyncio
    async def test_auth_error_is_a_provider_error(self, check_request, config):
        """Test subclasses are translated like any provider error."""
        error = LLMAuthenticationError("Permission denied", status_code=403)

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert result.failed is True
        assert result.provider_status == 403

    @pytest.mark.asyncio
    async def test_fallback_text_containing_brand(self, check_request):
        """Test failures never report a mention, even if the fallback has one."""
        config = RuntimeConfig(fallback_text="Try HubSpot")
        error = LLMProviderError("boom", status_code=500)

        result = await run_check(check_request, config, client=FakeClient(error=error))

        assert result.mentioned is False


class TestClassifyProviderError:
    """Test suite for classify_provider_error()."""

    @pytest.mark.parametrize(
        "detail,expected",
        [
            (None, None),
            ({}, None),
            ({"error": "flat string"}, None),
            ({"error": {"details": [{"reason": "RATE_LIMIT_EXCEEDED"}]}}, "RATE_LIMIT_EXCEEDED"),
            ({"error": {"details": [{"@type": "x"}, {"reason": API_KEY_INVALID}]}}, API_KEY_INVALID),
            ({"error": {"message": "API key expired. Please renew the API key."}}, API_KEY_INVALID),
            ({"error": {"message": "Invalid api_key supplied"}}, API_KEY_INVALID),
            ({"error": {"message": "Internal error"}}, None),
        ],
    )
    def test_classification(self, detail, expected):
        """Test reasons come from details[] first, then the message."""
        assert classify_provider_error(detail) == expected


class TestCheckResult:
    """Test suite for CheckResult."""

    @freeze_time("2025-11-02T08:30:45Z")
    def test_checked_at_is_utc(self):
        """Test results are stamped with a UTC timestamp."""
        result = CheckResult(
            prompt="p", brand="b", mentioned=False, positions=[], position=None, raw_text=""
        )

        assert result.checked_at == "2025-11-02T08:30:45Z"

    @freeze_time("2025-11-02T08:30:45Z")
    def test_to_dict_success(self):
        """Test error fields are omitted on success."""
        result = CheckResult(
            prompt="Best CRM?",
            brand="HubSpot",
            mentioned=True,
            positions=[2],
            position=2,
            raw_text="1. Salesforce\n2. HubSpot",
            used_model="gemini-2.5-flash",
        )

        assert result.to_dict() == {
            "prompt": "Best CRM?",
            "brand": "HubSpot",
            "mentioned": True,
            "positions": [2],
            "position": 2,
            "raw_text": "1. Salesforce\n2. HubSpot",
            "used_model": "gemini-2.5-flash",
            "checked_at": "2025-11-02T08:30:45Z",
        }

    @pytest.mark.asyncio
    async def test_to_dict_failure(self, check_request, config):
        """Test error fields are included on failure."""
        error = LLMProviderError("boom", status_code=500, detail={"error": {"message": "boom"}})
        result = await run_check(check_request, config, client=FakeClient(error=error))

        data = result.to_dict()

        assert data["error"] == "API Error: boom"
        assert data["provider_status"] == 500
        assert data["provider_detail"] == {"error": {"message": "boom"}}
        assert "provider_reason" not in data
