from __future__ import annotations

import pytest

from llm_unified_client.settings import LLMSettings, get_settings
from llm_unified_client.types import ProviderName


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "deepseek")
    monkeypatch.setenv("LLM_API_KEY", "env-key")
    monkeypatch.setenv("LLM_TIMEOUT", "12.5")
    monkeypatch.setenv("LLM_DEFAULT_TEMPERATURE", "0.2")
    monkeypatch.setenv("LLM_EXTRA_CONFIG", '{"api_mode": "legacy"}')

    config = get_settings().to_client_config()

    assert config.provider is ProviderName.DEEPSEEK
    assert config.api_key == "env-key"
    assert config.timeout == 12.5
    assert config.default_temperature == 0.2
    assert config.extra_config == {"api_mode": "legacy"}
    assert config.base_url is None


def test_settings_accept_alternate_api_key_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("LLM_PROVIDER_API_KEY", "alias-key")
    monkeypatch.setenv("LLM_BASE_URL", "  ")

    settings = LLMSettings(_env_file=None)

    assert settings.api_key == "alias-key"
    assert settings.base_url is None


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_API_KEY", "first")
    first = get_settings()
    monkeypatch.setenv("LLM_API_KEY", "second")

    assert get_settings() is first
    assert get_settings().api_key == "first"
