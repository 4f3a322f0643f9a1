from typing import Optional

import httpx
from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic

from sandcraft.core.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import ProviderResponse, ProviderUsage
from sandcraft.providers.base import LLMProvider

# Anthropic error types that mean "try elsewhere", not "bad request"
UNAVAILABLE_ERROR_TYPES = ['overloaded_error', 'api_error']


class ClaudeProvider(LLMProvider):
    """Anthropic Messages API (non-streaming)"""

    name = "claude"

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-3-5-haiku-20241022",
        max_tokens: int = 4096,
        temperature: float = 0.1,
        max_requests_per_minute: int = 50,
        base_url: Optional[str] = None,
        connect_timeout: float = 30.0,
        request_timeout: float = 120.0,
    ):
        super().__init__(api_key, model, max_tokens, temperature, max_requests_per_minute)
        self.client: Optional[AsyncAnthropic] = None
        if not self.is_configured:
            return

        client_kwargs = {"api_key": self.api_key, "max_retries": 0}

        # Only set base_url if it's a non-empty string with actual content
        if base_url and base_url.strip():
            client_kwargs["base_url"] = base_url.strip()
            logger.info(f"[claude] Using custom Claude API base URL: {base_url}")

        client_kwargs["timeout"] = httpx.Timeout(
            connect=connect_timeout,
            read=request_timeout,
            write=request_timeout,
            pool=request_timeout
        )

        self.client = AsyncAnthropic(**client_kwargs)
        logger.info(f"[claude] client initialized: timeout={request_timeout}s, model={self.model}")

    async def _complete(self, system_prompt: str, user_prompt: str) -> ProviderResponse:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system_prompt or "",
            messages=[{"role": "user", "content": user_prompt}]
        )

        content = "".join(
            block.text for block in (response.content or [])
            if getattr(block, "type", "text") == "text"
        )
        input_tokens = response.usage.input_tokens if response.usage else 0
        output_tokens = response.usage.output_tokens if response.usage else 0

        return ProviderResponse(
            content=content,
            provider=self.name,
            model=self.model,
            usage=ProviderUsage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
            stop_reason=response.stop_reason,
        )

    def classify_error(self, error: Exception) -> ProviderError:
        if isinstance(error, (APIConnectionError, APITimeoutError)):
            return ProviderUnavailableError(self.name, f"Network error talking to Claude: {type(error).__name__}")

        if isinstance(error, APIStatusError):
            error_type = ""
            if isinstance(error.body, dict):
                error_type = error.body.get('error', {}).get('type', '')
            if error.status_code in (401, 403) or error_type in ('authentication_error', 'permission_error'):
                return ProviderAuthError(self.name)
            if error.status_code == 429 or error_type == 'rate_limit_error':
                return ProviderRateLimitError(self.name)
            if error.status_code >= 500 or error_type in UNAVAILABLE_ERROR_TYPES:
                return ProviderUnavailableError(self.name, f"Claude service temporarily unavailable ({error.status_code})")

        return super().classify_error(error)
