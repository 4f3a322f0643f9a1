"""
Gemini provider - Google Generative AI (google-generativeai SDK)
"""

from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from sandcraft.core.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from sandcraft.models.generated_file import ProviderResponse, ProviderUsage
from sandcraft.providers.base import LLMProvider


def _usage_value(usage: Any, key: str) -> int:
    if usage is None:
        return 0
    if isinstance(usage, dict):
        return int(usage.get(key) or 0)
    return int(getattr(usage, key, 0) or 0)


class GeminiProvider(LLMProvider):
    """Gemini generate_content (non-streaming)"""

    name = "gemini"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-1.5-flash",
        max_tokens: int = 4096,
        temperature: float = 0.1,
        max_requests_per_minute: int = 15,
    ):
        super().__init__(api_key, model, max_tokens, temperature, max_requests_per_minute)
        if self.is_configured:
            genai.configure(api_key=self.api_key)

    def _model(self, system_prompt: Optional[str]) -> "genai.GenerativeModel":
        return genai.GenerativeModel(
            model_name=self.model,
            system_instruction=system_prompt or None,
            generation_config=genai.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
                top_p=0.8,
                top_k=10,
            ),
        )

    async def _complete(self, system_prompt: str, user_prompt: str) -> ProviderResponse:
        response = await self._model(system_prompt).generate_content_async(user_prompt)

        # response.text raises ValueError when the candidate was blocked or empty
        try:
            text = response.text
        except ValueError:
            text = ""

        usage = getattr(response, "usage_metadata", None)
        return ProviderResponse(
            content=text or "",
            provider=self.name,
            model=self.model,
            usage=ProviderUsage(
                prompt_tokens=_usage_value(usage, "prompt_token_count"),
                completion_tokens=_usage_value(usage, "candidates_token_count"),
                total_tokens=_usage_value(usage, "total_token_count"),
            ),
        )

    def classify_error(self, error: Exception) -> ProviderError:
        if isinstance(error, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
            return ProviderAuthError(self.name)
        if isinstance(error, google_exceptions.ResourceExhausted):
            return ProviderRateLimitError(self.name)
        if isinstance(error, (
            google_exceptions.ServiceUnavailable,
            google_exceptions.InternalServerError,
            google_exceptions.DeadlineExceeded,
        )):
            return ProviderUnavailableError(self.name, "Gemini service temporarily unavailable.")
        return super().classify_error(error)
