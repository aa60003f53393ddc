"""Tests for configuration helpers."""

from calorie_tracker.config import PROVIDER_PRESETS, Settings, resolve_provider


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "supabase_url": "https://example.supabase.co",
        "supabase_service_key": "service-key",
        "ai_api_key": "ai-key",
    }
    values.update(overrides)
    return Settings(**values)


def test_resolve_provider_uses_preset() -> None:
    provider = resolve_provider(_settings(ai_provider="DeepSeek"))

    assert provider == PROVIDER_PRESETS["deepseek"]


def test_resolve_provider_overrides() -> None:
    provider = resolve_provider(
        _settings(ai_base_url="https://llm.internal/v1", ai_model="local-model")
    )

    assert provider.base_url == "https://llm.internal/v1"
    assert provider.model == "local-model"


def test_blank_overrides_fall_back_to_preset() -> None:
    provider = resolve_provider(_settings(ai_provider="unknown", ai_model=" "))

    assert provider == PROVIDER_PRESETS["openai"]


def test_log_level_defaults_to_info() -> None:
    assert _settings().log_level == "INFO"
    assert _settings(log_level="DEBUG").log_level == "DEBUG"
