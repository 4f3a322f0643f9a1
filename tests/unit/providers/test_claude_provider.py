"""
Unit Tests for ClaudeProvider

The Anthropic SDK client is patched; no network calls are made.
"""
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import anthropic
import httpx
import pytest

from sandcraft.core.exceptions import (
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from sandcraft.providers.claude_provider import ClaudeProvider


REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def status_error(cls, status: int, body=None):
    return cls(message=f"HTTP {status}", response=httpx.Response(status, request=REQUEST), body=body)


@pytest.fixture
def mock_anthropic():
    with patch("sandcraft.providers.claude_provider.AsyncAnthropic") as client_cls:
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=Mock(
            content=[Mock(type="text", text="// src/App.js\n"), Mock(type="text", text="```jsx\n...```")],
            usage=Mock(input_tokens=120, output_tokens=480),
            stop_reason="end_turn",
        ))
        client_cls.return_value = client
        yield client_cls


class TestClaudeClient:
    """Test client construction"""

    def test_client_options(self, mock_anthropic):
        ClaudeProvider(api_key="sk-ant-test", connect_timeout=5.0, request_timeout=60.0)

        kwargs = mock_anthropic.call_args.kwargs
        assert kwargs["api_key"] == "sk-ant-test"
        assert kwargs["max_retries"] == 0
        assert "base_url" not in kwargs
        assert kwargs["timeout"].connect == 5.0
        assert kwargs["timeout"].read == 60.0

    def test_custom_base_url(self, mock_anthropic):
        ClaudeProvider(api_key="sk-ant-test", base_url=" http://localhost:8001 ")
        assert mock_anthropic.call_args.kwargs["base_url"] == "http://localhost:8001"

    def test_no_key_no_client(self, mock_anthropic):
        provider = ClaudeProvider(api_key="")

        assert provider.client is None
        mock_anthropic.assert_not_called()


class TestClaudeComplete:
    """Test completion mapping"""

    @pytest.mark.asyncio
    async def test_text_blocks_joined(self, mock_anthropic):
        provider = ClaudeProvider(api_key="sk-ant-test", model="claude-test", max_tokens=1000, temperature=0.2)
        response = await provider.complete("system prompt", "build a counter")

        assert response.content == "// src/App.js\n```jsx\n...```"
        assert response.provider == "claude"
        assert response.model == "claude-test"
        assert response.usage.total_tokens == 600
        assert response.stop_reason == "end_turn"

        create = mock_anthropic.return_value.messages.create
        create.assert_awaited_once_with(
            model="claude-test",
            max_tokens=1000,
            temperature=0.2,
            system="system prompt",
            messages=[{"role": "user", "content": "build a counter"}],
        )


class TestClaudeErrors:
    """Test Anthropic exception mapping"""

    @pytest.fixture
    def provider(self, mock_anthropic):
        return ClaudeProvider(api_key="sk-ant-test")

    def test_connection_error(self, provider):
        error = provider.classify_error(anthropic.APIConnectionError(request=REQUEST))
        assert isinstance(error, ProviderUnavailableError)
        assert "Network error talking to Claude" in error.message

    def test_timeout_error(self, provider):
        assert isinstance(provider.classify_error(anthropic.APITimeoutError(request=REQUEST)), ProviderUnavailableError)

    def test_authentication_error(self, provider):
        error = status_error(anthropic.AuthenticationError, 401)
        assert isinstance(provider.classify_error(error), ProviderAuthError)

    def test_rate_limit_error(self, provider):
        error = status_error(anthropic.RateLimitError, 429)
        assert isinstance(provider.classify_error(error), ProviderRateLimitError)

    def test_overloaded_body_type(self, provider):
        error = status_error(anthropic.APIStatusError, 400, body={"error": {"type": "overloaded_error"}})
        assert isinstance(provider.classify_error(error), ProviderUnavailableError)

    @pytest.mark.asyncio
    async def test_sdk_error_raised_as_provider_error(self, provider, mock_anthropic):
        mock_anthropic.return_value.messages.create.side_effect = status_error(anthropic.InternalServerError, 500)

        with pytest.raises(ProviderUnavailableError):
            await provider.complete("s", "u")
