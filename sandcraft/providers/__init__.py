from sandcraft.providers.base import LLMProvider, RequestWindow
from sandcraft.providers.claude_provider import ClaudeProvider
from sandcraft.providers.gemini_provider import GeminiProvider
from sandcraft.providers.groq_provider import GroqProvider

__all__ = [
    "LLMProvider",
    "RequestWindow",
    "ClaudeProvider",
    "GeminiProvider",
    "GroqProvider",
]
