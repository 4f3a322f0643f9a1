from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Any, Dict, Optional


def parse_provider_name(v: Any) -> str:
    """Normalize provider names from env ("Groq ", "GEMINI") to lowercase keys"""
    if v is None:
        return ""
    return str(v).strip().lower()


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Sandcraft"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # Empty means console only

    # ==========================================
    # Provider selection
    # ==========================================
    PRIMARY_AI_PROVIDER: str = "groq"
    FALLBACK_AI_PROVIDER: str = "gemini"  # Empty disables the fallback hop
    PROVIDER_TIMEOUT_SECONDS: float = 120.0
    PROVIDER_CONNECT_TIMEOUT: float = 30.0

    # ==========================================
    # Claude AI
    # ==========================================
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_BASE_URL: str = ""  # Empty means use default Anthropic URL
    CLAUDE_MODEL: str = "claude-3-5-haiku-20241022"
    CLAUDE_MAX_TOKENS: int = 4096
    CLAUDE_TEMPERATURE: float = 0.1
    CLAUDE_MAX_REQUESTS_PER_MINUTE: int = 50

    # ==========================================
    # Groq
    # ==========================================
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_MAX_TOKENS: int = 4096
    GROQ_TEMPERATURE: float = 0.1
    GROQ_MAX_REQUESTS_PER_MINUTE: int = 30  # Conservative limit for free tier

    # ==========================================
    # Google Gemini
    # ==========================================
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_MAX_TOKENS: int = 4096
    GEMINI_TEMPERATURE: float = 0.1
    GEMINI_MAX_REQUESTS_PER_MINUTE: int = 15  # Free tier allows 60, stay well below

    @field_validator("PRIMARY_AI_PROVIDER", "FALLBACK_AI_PROVIDER", mode="before")
    @classmethod
    def normalize_provider(cls, v: Any) -> str:
        return parse_provider_name(v)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    # ==========================================
    # Helper Methods
    # ==========================================
    def is_production(self) -> bool:
        """Check if running in production mode (JSON logs)"""
        return self.ENVIRONMENT == "production"

    def get_fallback_provider(self) -> Optional[str]:
        """Fallback provider name, or None when disabled or equal to the primary"""
        fallback = self.FALLBACK_AI_PROVIDER
        if not fallback or fallback == self.PRIMARY_AI_PROVIDER:
            return None
        return fallback

    def get_provider_config(self, provider: str) -> Dict[str, Any]:
        """Get SDK settings for one provider by name"""
        if provider == "claude":
            return {
                "api_key": self.ANTHROPIC_API_KEY,
                "base_url": self.ANTHROPIC_BASE_URL,
                "model": self.CLAUDE_MODEL,
                "max_tokens": self.CLAUDE_MAX_TOKENS,
                "temperature": self.CLAUDE_TEMPERATURE,
                "max_requests_per_minute": self.CLAUDE_MAX_REQUESTS_PER_MINUTE,
                "connect_timeout": self.PROVIDER_CONNECT_TIMEOUT,
                "request_timeout": self.PROVIDER_TIMEOUT_SECONDS,
            }
        if provider == "groq":
            return {
                "api_key": self.GROQ_API_KEY,
                "model": self.GROQ_MODEL,
                "max_tokens": self.GROQ_MAX_TOKENS,
                "temperature": self.GROQ_TEMPERATURE,
                "max_requests_per_minute": self.GROQ_MAX_REQUESTS_PER_MINUTE,
                "request_timeout": self.PROVIDER_TIMEOUT_SECONDS,
            }
        if provider == "gemini":
            return {
                "api_key": self.GOOGLE_API_KEY,
                "model": self.GEMINI_MODEL,
                "max_tokens": self.GEMINI_MAX_TOKENS,
                "temperature": self.GEMINI_TEMPERATURE,
                "max_requests_per_minute": self.GEMINI_MAX_REQUESTS_PER_MINUTE,
            }
        return {}


# Create settings instance
settings = Settings()
