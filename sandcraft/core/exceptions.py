"""
Custom Exceptions for Sandcraft
===============================

Only provider-facing and request-facing failures are exceptions. Content
problems found in an LLM response (no files, broken JSON, unbalanced braces)
are never raised; they are reported through ValidationReport.

Usage:
    from sandcraft.core.exceptions import ProviderError, AllProvidersFailedError

    try:
        result = await gateway.generate(prompt)
    except AllProvidersFailedError as e:
        logger.error(f"Generation failed: {e}")
        return error_response(e)
"""

from typing import Optional, Any, Dict, List


class SandcraftError(Exception):
    """Base exception for all Sandcraft errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(SandcraftError):
    """Settings are inconsistent (unknown provider name, etc.)"""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


# ============================================
# Request Errors (400-type)
# ============================================

class InvalidGenerationRequestError(SandcraftError):
    """Generation request is unusable (blank prompt, unknown type)"""

    def __init__(self, message: str = "Prompt is required", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="INVALID_REQUEST", details=details)


# ============================================
# Provider Errors
# ============================================

class ProviderError(SandcraftError):
    """An LLM provider call failed"""

    def __init__(self, provider: str, message: str, code: str = "PROVIDER_ERROR"):
        super().__init__(message, code=code, details={"provider": provider})
        self.provider = provider


class ProviderUnavailableError(ProviderError):
    """Provider not configured, unreachable or returning 5xx"""

    def __init__(self, provider: str, message: str = "Service temporarily unavailable"):
        super().__init__(provider, message, code="PROVIDER_UNAVAILABLE")


class ProviderAuthError(ProviderError):
    """Provider rejected the API key"""

    def __init__(self, provider: str, message: Optional[str] = None):
        super().__init__(
            provider,
            message or f"{provider} API authentication failed. Please check your API key.",
            code="PROVIDER_AUTH_FAILED"
        )


class ProviderRateLimitError(ProviderError):
    """Provider (or our own request window) rate limit exceeded"""

    def __init__(self, provider: str, retry_after: Optional[float] = None):
        super().__init__(
            provider,
            f"{provider} rate limit exceeded. Please try again later.",
            code="PROVIDER_RATE_LIMITED"
        )
        if retry_after:
            self.details["retry_after_seconds"] = round(retry_after, 1)


class ProviderTimeoutError(ProviderError):
    """Provider did not answer within the configured bound"""

    def __init__(self, provider: str, timeout_seconds: float):
        super().__init__(
            provider,
            f"{provider} did not respond within {timeout_seconds:g}s",
            code="PROVIDER_TIMEOUT"
        )
        self.details["timeout_seconds"] = timeout_seconds


class EmptyCompletionError(ProviderError):
    """Provider answered but the completion text is empty"""

    def __init__(self, provider: str):
        super().__init__(provider, f"Empty response from {provider}", code="PROVIDER_EMPTY_RESPONSE")


class AllProvidersFailedError(SandcraftError):
    """Primary and fallback providers both failed"""

    def __init__(self, failures: List[ProviderError]):
        labels = ["Primary", "Fallback"]
        parts = [
            f"{labels[i] if i < len(labels) else 'Provider'} ({f.provider}): {f.message}"
            for i, f in enumerate(failures)
        ]
        super().__init__(
            "All AI providers failed. " + ", ".join(parts),
            code="ALL_PROVIDERS_FAILED",
            details={"failures": [{"provider": f.provider, "error": f.message} for f in failures]}
        )
        self.failures = failures


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: SandcraftError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
