"""
Provider registry - builds providers and the gateway from settings

This is the only place that reads provider settings; the pipeline receives a
ready ProviderGateway.
"""

from typing import Callable, Dict, Optional

from sandcraft.core.config import Settings, settings as default_settings
from sandcraft.core.exceptions import ConfigurationError
from sandcraft.providers.base import LLMProvider
from sandcraft.providers.claude_provider import ClaudeProvider
from sandcraft.providers.gemini_provider import GeminiProvider
from sandcraft.providers.groq_provider import GroqProvider
from sandcraft.services.provider_gateway import ProviderGateway


PROVIDER_FACTORIES: Dict[str, Callable[..., LLMProvider]] = {
    "claude": ClaudeProvider,
    "groq": GroqProvider,
    "gemini": GeminiProvider,
}


def available_providers() -> list:
    return sorted(PROVIDER_FACTORIES)


def build_provider(name: str, config: Optional[Settings] = None) -> LLMProvider:
    """
    Construct one provider from settings.

    Raises:
        ConfigurationError: unknown provider name
    """
    config = config or default_settings
    factory = PROVIDER_FACTORIES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown AI provider '{name}'. Available: {', '.join(available_providers())}"
        )
    return factory(**config.get_provider_config(name))


def build_gateway(config: Optional[Settings] = None) -> ProviderGateway:
    """Primary + optional fallback provider, bounded by PROVIDER_TIMEOUT_SECONDS"""
    config = config or default_settings
    primary = build_provider(config.PRIMARY_AI_PROVIDER, config)

    fallback_name = config.get_fallback_provider()
    fallback = build_provider(fallback_name, config) if fallback_name else None

    return ProviderGateway(primary, fallback, timeout=config.PROVIDER_TIMEOUT_SECONDS)
