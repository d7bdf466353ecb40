"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5-mini"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    data_file: str = "calorie_companion.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    timezone: str | None = None
    profile_weight_lbs: float = 175.0
    profile_height_in: float = 68.0
    profile_age: int = 39
    profile_sex: str = "male"
    activity_multiplier: float = 1.2
    daily_deficit_kcal: float = 500.0
    scan_interval_seconds: float = 0.3
    camera_index: int = 0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def uses_supabase(settings: Settings) -> bool:
    """Return True when Supabase credentials are configured."""
    return bool(
        settings.supabase_url
        and settings.supabase_url.strip()
        and settings.supabase_service_key
        and settings.supabase_service_key.strip()
    )
