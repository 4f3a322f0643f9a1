"""
LLM provider interface

The gateway only depends on:
    await provider.complete(system_prompt, user_prompt) -> ProviderResponse
    await provider.health_check() -> {"available": bool, ...}

Concrete providers implement `_complete` with their SDK and may extend
`classify_error` to map SDK exception types. Everything raised out of
`complete` is a ProviderError.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import httpx

from sandcraft.core.exceptions import (
    EmptyCompletionError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import ProviderResponse


HEALTH_CHECK_SYSTEM_PROMPT = "You are a health check. Reply with OK."
HEALTH_CHECK_PROMPT = "Hello"

AUTH_MARKERS = ("api key", "api_key", "authentication", "unauthorized", "permission")
RATE_LIMIT_MARKERS = ("rate limit", "rate_limit", "quota", "too many requests")
UNAVAILABLE_MARKERS = ("overload", "unavailable", "connection", "timeout", "timed out", "network")


class RequestWindow:
    """
    Fixed one-minute request budget.

    The counter resets once the window has elapsed; the request that would
    exceed the budget raises ProviderRateLimitError instead of being sent.
    """

    def __init__(self, max_requests: int, window_seconds: float = 60.0,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._started = clock()
        self.count = 0

    def acquire(self, provider: str) -> None:
        now = self._clock()
        if now - self._started > self.window_seconds:
            self.count = 0
            self._started = now

        if self.count >= self.max_requests:
            retry_after = self.window_seconds - (now - self._started)
            raise ProviderRateLimitError(provider, retry_after=max(retry_after, 0.0))

        self.count += 1

    def snapshot(self) -> Dict[str, Any]:
        return {"requests": self.count, "window": self.window_seconds, "max": self.max_requests}


class LLMProvider(ABC):
    """One text-completion backend (Claude, Groq, Gemini, ...)"""

    name: str = "base"

    def __init__(
        self,
        api_key: str = "",
        model: str = "",
        max_tokens: int = 4096,
        temperature: float = 0.1,
        max_requests_per_minute: int = 30,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.window = RequestWindow(max_requests_per_minute)

        if not self.api_key:
            logger.warning(f"[{self.name}] API key not set. {self.name} provider will not be available.")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> ProviderResponse:
        """SDK call; may raise anything"""

    async def complete(self, system_prompt: str, user_prompt: str) -> ProviderResponse:
        """
        Send one completion request.

        Raises:
            ProviderUnavailableError: not configured, 5xx, connection problems
            ProviderAuthError: key rejected
            ProviderRateLimitError: local window or upstream 429/quota
            EmptyCompletionError: the completion text is blank
            ProviderError: anything else
        """
        if not self.is_configured:
            raise ProviderUnavailableError(
                self.name, f"{self.name} service not available. API key not configured."
            )

        self.window.acquire(self.name)

        try:
            response = await self._complete(system_prompt, user_prompt)
        except ProviderError:
            raise
        except Exception as e:
            raise self.classify_error(e) from e

        if not response.content or not response.content.strip():
            raise EmptyCompletionError(self.name)

        logger.debug(
            f"[{self.name}] completion: model={response.model}, "
            f"tokens={response.usage.total_tokens}, chars={len(response.content)}"
        )
        return response

    async def health_check(self) -> Dict[str, Any]:
        """Ping the provider with a trivial prompt; never raises"""
        status: Dict[str, Any] = {
            "provider": self.name,
            "model": self.model,
            "rate_limit": self.window.snapshot(),
        }

        if not self.is_configured:
            status.update(available=False, status="unavailable", error="API key not configured")
            return status

        try:
            response = await self._complete(HEALTH_CHECK_SYSTEM_PROMPT, HEALTH_CHECK_PROMPT)
            if not response.content:
                raise EmptyCompletionError(self.name)
        except Exception as e:
            error = e if isinstance(e, ProviderError) else self.classify_error(e)
            logger.log_provider_event(self.name, "health check failed", success=False, error=error.message)
            status.update(available=False, status="unhealthy", error=error.message)
            return status

        status.update(available=True, status="healthy")
        return status

    def classify_error(self, error: Exception) -> ProviderError:
        """Map an SDK/transport exception to the provider error taxonomy"""
        status_code = _status_code(error)
        text = str(error).lower()

        if status_code in (401, 403) or any(m in text for m in AUTH_MARKERS):
            return ProviderAuthError(self.name)
        if status_code == 429 or any(m in text for m in RATE_LIMIT_MARKERS):
            return ProviderRateLimitError(self.name)
        if (
            (status_code is not None and status_code >= 500)
            or isinstance(error, (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError))
            or any(m in text for m in UNAVAILABLE_MARKERS)
        ):
            return ProviderUnavailableError(self.name, f"{self.name} service temporarily unavailable: {error}")
        return ProviderError(self.name, f"{self.name} API error: {error}")


def _status_code(error: Exception) -> Optional[int]:
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None
