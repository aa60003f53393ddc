"""Application configuration."""

import os
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


@dataclass(frozen=True)
class ProviderConfig:
    """Endpoint and model used for food estimates."""

    base_url: str | None
    model: str


PROVIDER_PRESETS: dict[str, ProviderConfig] = {
    "openai": ProviderConfig(base_url=None, model="gpt-4o-mini"),
    "deepseek": ProviderConfig(
        base_url="https://api.deepseek.com/v1", model="deepseek-chat"
    ),
    "moonshot": ProviderConfig(
        base_url="https://api.moonshot.cn/v1", model="moonshot-v1-8k"
    ),
    "gemini": ProviderConfig(
        base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
        model="gemini-2.5-flash",
    ),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    state_table: str = "tracker_state"
    state_key_prefix: str = "calorie_tracker"
    ai_provider: str = "openai"
    ai_api_key: str
    ai_base_url: str | None = None
    ai_model: str | None = None
    lookup_timeout_seconds: float = 20.0
    chart_window_size: int = 7
    chart_width: float = 600.0
    chart_height: float = 200.0
    timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_provider(settings: Settings) -> ProviderConfig:
    """Apply explicit base URL and model overrides on top of a preset."""
    preset = PROVIDER_PRESETS.get(
        settings.ai_provider.strip().lower(), PROVIDER_PRESETS["openai"]
    )
    base_url = (settings.ai_base_url or "").strip() or preset.base_url
    model = (settings.ai_model or "").strip() or preset.model
    return ProviderConfig(base_url=base_url, model=model)
