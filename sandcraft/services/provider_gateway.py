"""
Provider Gateway - primary provider with exactly one fallback hop

    primary.complete()  --ok-->  response
         | any ProviderError (network, auth, rate limit, timeout, empty)
         v
    fallback.complete() --ok-->  response
         | ProviderError
         v
    AllProvidersFailedError naming both failures

No backoff, no circuit breaker, no retry budget beyond the fallback.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Union

from sandcraft.core.exceptions import (
    AllProvidersFailedError,
    ProviderError,
    ProviderTimeoutError,
)
from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import GenerationType, ProviderResponse
from sandcraft.prompts.sandpack_prompts import build_user_prompt, get_system_prompt
from sandcraft.providers.base import LLMProvider


class ProviderGateway:
    """Send a prompt to the primary provider, falling back once on failure"""

    def __init__(self, primary: LLMProvider, fallback: Optional[LLMProvider] = None,
                 timeout: Optional[float] = 120.0):
        self.primary = primary
        self.fallback = fallback
        self.timeout = timeout

    @property
    def providers(self) -> List[LLMProvider]:
        return [p for p in (self.primary, self.fallback) if p is not None]

    async def generate(
        self,
        prompt: str,
        generation_type: Union[GenerationType, str] = GenerationType.REACT,
        context: Optional[Dict[str, Any]] = None,
    ) -> ProviderResponse:
        """
        Generate raw completion text for a request.

        Args:
            prompt: User request
            generation_type: Selects the system prompt
            context: Optional projectStructure / currentFiles

        Returns:
            ProviderResponse from whichever provider succeeded

        Raises:
            AllProvidersFailedError: primary and fallback both failed
        """
        system_prompt = get_system_prompt(generation_type)
        user_prompt = build_user_prompt(prompt, context)

        failures: List[ProviderError] = []
        for role, provider in zip(("primary", "fallback"), self.providers):
            try:
                return await self._attempt(role, provider, system_prompt, user_prompt)
            except ProviderError as e:
                failures.append(e)

        error = AllProvidersFailedError(failures)
        logger.error(
            f"[ProviderGateway] {error.message}",
            extra={"event_type": "provider", "error_code": error.code, "failures": error.details["failures"]},
        )
        raise error

    async def _attempt(self, role: str, provider: LLMProvider,
                       system_prompt: str, user_prompt: str) -> ProviderResponse:
        logger.log_provider_event(provider.name, f"{role} attempt", role=role, model=provider.model)
        start = time.perf_counter()

        try:
            if self.timeout:
                response = await asyncio.wait_for(
                    provider.complete(system_prompt, user_prompt), timeout=self.timeout
                )
            else:
                response = await provider.complete(system_prompt, user_prompt)
        except asyncio.TimeoutError:
            error = ProviderTimeoutError(provider.name, self.timeout)
            self._log_failure(role, provider, error, start)
            raise error
        except ProviderError as e:
            self._log_failure(role, provider, e, start)
            raise
        except Exception as e:
            # Providers outside the LLMProvider hierarchy may raise anything
            logger.log_error_with_context(e, context=f"ProviderGateway {role} attempt", provider=provider.name, role=role)
            error = ProviderError(provider.name, f"{type(e).__name__}: {e}")
            self._log_failure(role, provider, error, start)
            raise error from e

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log_provider_event(
            provider.name,
            f"{role} succeeded",
            role=role,
            model=response.model,
            duration_ms=round(duration_ms, 2),
            total_tokens=response.usage.total_tokens,
        )
        return response

    @staticmethod
    def _log_failure(role: str, provider: LLMProvider, error: ProviderError, start: float) -> None:
        logger.log_provider_event(
            provider.name,
            f"{role} failed: {error.message}",
            success=False,
            role=role,
            error_code=error.code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )

    async def health(self) -> Dict[str, Any]:
        """Health of both configured providers, keyed by role"""
        result: Dict[str, Any] = {}
        for role, provider in zip(("primary", "fallback"), self.providers):
            result[role] = await provider.health_check()
        if self.fallback is None:
            result["fallback"] = None
        return result
