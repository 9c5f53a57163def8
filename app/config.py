"""
Configuration module for the code review service.

Loads environment variables and provides centralized settings.
All secrets and configuration are managed through environment variables.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Secrets are loaded from environment or .env file.
    Never commit secrets to version control.
    """

    # Application
    ENVIRONMENT: str = Field(default="development")
    PORT: int = Field(default=8000)
    ALLOWED_ORIGINS: str = Field(default="*")

    # LLM Configuration
    LLM_PROVIDER: str = Field(default="gemini")
    LLM_MODEL: str = Field(default="gemini-2.0-flash")
    LLM_MAX_TOKENS: int = Field(default=4096)
    LLM_TEMPERATURE: float = Field(default=0.4)
    # Unset means no client-side timeout on the provider call
    LLM_REQUEST_TIMEOUT_SECONDS: Optional[float] = Field(default=None)
    GEMINI_API_KEY: str = Field(default="")
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta"
    )
    OPENAI_API_KEY: str = Field(default="")
    ANTHROPIC_API_KEY: str = Field(default="")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./reviews.db")
    DATABASE_ECHO: bool = Field(default=False)

    # Auth (tokens are issued by the upstream auth service)
    JWT_SECRET: str = Field(default="")
    JWT_ALGORITHM: str = Field(default="HS256")

    # Upload Configuration
    MAX_UPLOAD_SIZE_BYTES: int = Field(
        default=5 * 1024 * 1024,  # 5 MiB
        gt=0,
    )
    GUEST_REVIEWS_ENABLED: bool = Field(default=True)

    # Observability
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")
    ERROR_TRACKING_ENABLED: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LLM_PROVIDER")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Provider names are matched case-insensitively."""
        return v.strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure LOG_LEVEL is a level the logging module knows."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @property
    def allowed_origins(self) -> List[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def provider_api_key(self) -> str:
        """API key for the configured LLM provider ("" when unknown or unset)."""
        return {
            "gemini": self.GEMINI_API_KEY,
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
        }.get(self.LLM_PROVIDER, "")


@lru_cache
def get_settings() -> Settings:
    """
    Build the settings object once per process.

    Injected into the analysis client, repository and pipeline at startup;
    tests construct their own Settings instead.
    """
    return Settings()
