"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    menu_base_url: str = "https://fso.ueat.utoronto.ca/FSO/ServiceMenuReport"
    menu_user_agent: str = "Mozilla/5.0 (compatible; UofT Meal Planner)"
    menu_request_timeout_seconds: float = 15
    menu_max_concurrency: int = 4
    menu_slice_fallback_enabled: bool = True
    menu_timezone: str = "America/Toronto"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5-mini"
    planner_max_attempts: int = 5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
