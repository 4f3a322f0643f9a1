"""
Groq provider - OpenAI-compatible chat completions on Groq's LPU inference
"""

from typing import Optional

from groq import APIConnectionError, APIStatusError, APITimeoutError, AsyncGroq

from sandcraft.core.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from sandcraft.models.generated_file import ProviderResponse, ProviderUsage
from sandcraft.providers.base import LLMProvider


class GroqProvider(LLMProvider):
    """Groq chat.completions (non-streaming)"""

    name = "groq"

    def __init__(
        self,
        api_key: str = "",
        model: str = "llama-3.3-70b-versatile",
        max_tokens: int = 4096,
        temperature: float = 0.1,
        max_requests_per_minute: int = 30,
        request_timeout: float = 120.0,
    ):
        super().__init__(api_key, model, max_tokens, temperature, max_requests_per_minute)
        self.client: Optional[AsyncGroq] = None
        if self.is_configured:
            self.client = AsyncGroq(api_key=self.api_key, timeout=request_timeout, max_retries=0)

    async def _complete(self, system_prompt: str, user_prompt: str) -> ProviderResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        completion = await self.client.chat.completions.create(
            messages=messages,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            top_p=1,
            stream=False,
        )

        if not completion.choices:
            raise ProviderError(self.name, "No completion choices returned from Groq")

        usage = completion.usage
        return ProviderResponse(
            content=completion.choices[0].message.content or "",
            provider=self.name,
            model=getattr(completion, "model", None) or self.model,
            usage=ProviderUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            ),
            stop_reason=completion.choices[0].finish_reason,
        )

    def classify_error(self, error: Exception) -> ProviderError:
        if isinstance(error, (APIConnectionError, APITimeoutError)):
            return ProviderUnavailableError(self.name, "Groq service temporarily unavailable. Trying fallback...")

        if isinstance(error, APIStatusError):
            if error.status_code in (401, 403):
                return ProviderAuthError(self.name)
            if error.status_code == 429:
                return ProviderRateLimitError(self.name)
            if error.status_code >= 500:
                return ProviderUnavailableError(self.name, "Groq service temporarily unavailable. Trying fallback...")

        return super().classify_error(error)
