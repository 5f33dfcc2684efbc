"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
Every credential is optional: components check for an empty value and
degrade instead of failing at startup.
"""

from datetime import datetime
from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "prepMSCEIT"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Supabase (database + auth)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Gemini (assessment item generation)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-3-flash-preview"

    # OpenAI (free-text question extraction)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"

    # Resend (transactional email)
    resend_api_key: str = ""
    resend_base_url: str = "https://api.resend.com"
    mail_from: str = "prepMSCEIT <noreply@prepmsceit.com>"

    # Landing page
    lead_webhook_url: str = ""
    lead_source: str = "Ebook Dashboard Apply"
    enrolment_deadline: datetime = datetime.fromisoformat("2026-01-22T23:45:00+10:00")

    # Learner state
    cache_dir: Path = Path(".cache/learners")
    onboarding_delay_seconds: float = 1.5

    # CORS - stored as comma-separated string in env, "*" for any origin
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="*",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
