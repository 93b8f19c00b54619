"""
Tests for configuration loading, validation and agent overrides.
"""

import json

import pytest

from edu_orchestrator.models import AgentType, AIProvider, RateLimitConfig
from edu_orchestrator.utils import ConfigManager, apply_agent_overrides
from edu_orchestrator.utils.config_manager import CONFIG_PATH_ENV
from edu_orchestrator.utils.error_handling import ConfigurationError
from edu_orchestrator.variants import VARIANTS


def write_config(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_missing_file_creates_default_config(tmp_path):
    path = tmp_path / "config" / "settings.json"

    config = ConfigManager(str(path)).load_config()

    assert path.exists()
    assert config.enable_fallback is True
    assert config.provider_settings(AIProvider.OPENAI).default_model == "gpt-4"
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert set(saved["providers"]) == {"openai", "gemini", "anthropic"}
    assert "api_key" not in saved["providers"]["openai"]


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = write_config(tmp_path / "env.json", {"debug_mode": True})
    monkeypatch.setenv(CONFIG_PATH_ENV, path)

    manager = ConfigManager()

    assert manager.config_path == path
    assert manager.load_config().debug_mode is True


def test_file_values_override_defaults(tmp_path):
    path = write_config(tmp_path / "config.json", {
        "providers": {"gemini": {"default_model": "gemini-1.5-flash", "timeout_seconds": 10}},
        "pricing": {"openai": {"input_per_1k": 0.01, "output_per_1k": 0.03}},
        "agents": {"tutor": {"temperature": 0.2, "fallback_model": "gemini-1.5-pro"}},
        "enable_fallback": False,
    })

    config = ConfigManager(path).load_config()

    gemini = config.provider_settings(AIProvider.GEMINI)
    assert gemini.default_model == "gemini-1.5-flash"
    assert gemini.timeout_seconds == 10
    assert gemini.api_key_env == "GEMINI_API_KEY"
    assert config.pricing_for(AIProvider.OPENAI).output_per_1k == 0.03
    assert config.pricing_for(AIProvider.ANTHROPIC).output_per_1k == 0.015
    assert config.agents["tutor"]["temperature"] == 0.2
    assert config.enable_fallback is False


@pytest.mark.parametrize("data", [
    {"agents": {"librarian": {"temperature": 0.5}}},
    {"agents": {"tutor": {"temperature": 2.5}}},
    {"agents": {"tutor": {"max_tokens": 0}}},
    {"agents": {"tutor": {"fallback_provider": "openai"}}},
    {"agents": {"tutor": {"provider": "cohere"}}},
    {"agents": {"tutor": {"colour": "blue"}}},
    {"agents": {"tutor": {"rate_limiting": {"requests_per_minute": 0, "requests_per_hour": 10}}}},
    {"providers": {"mistral": {"api_key_env": "MISTRAL_API_KEY", "default_model": "m"}}},
    {"pricing": {"gemini": {"input_per_1k": -1, "output_per_1k": 0}}},
])
def test_invalid_configuration_is_rejected(tmp_path, data):
    path = write_config(tmp_path / "config.json", data)
    with pytest.raises(ConfigurationError):
        ConfigManager(path).load_config()


def test_malformed_json_is_a_configuration_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        ConfigManager(str(path)).load_config()


def test_update_config_deep_merges_and_saves(tmp_path):
    path = tmp_path / "config.json"
    manager = ConfigManager(str(path))
    manager.load_config()

    updated = manager.update_config({
        "providers": {"openai": {"max_retries": 5}},
        "agents": {"mentor": {"max_tokens": 900}},
    })

    assert updated.provider_settings(AIProvider.OPENAI).max_retries == 5
    assert updated.provider_settings(AIProvider.OPENAI).default_model == "gpt-4"
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["agents"]["mentor"] == {"max_tokens": 900}


def test_update_config_rejects_invalid_values(tmp_path):
    manager = ConfigManager(str(tmp_path / "config.json"))
    manager.load_config()

    with pytest.raises(ConfigurationError):
        manager.update_config({"agents": {"tutor": {"temperature": -1}}})
    assert manager.get_config().agents == {}


def test_api_key_resolves_from_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    from edu_orchestrator.models import SystemConfig

    assert SystemConfig().provider_settings(AIProvider.ANTHROPIC).resolve_api_key() == "sk-test"


def test_apply_agent_overrides_builds_new_config():
    base = VARIANTS[AgentType.TUTOR].default_config()

    config = apply_agent_overrides(base, {
        "provider": "anthropic",
        "model": "claude-3-haiku-20240307",
        "fallback_provider": "openai",
        "rate_limiting": {"requests_per_minute": 5, "requests_per_hour": 50},
    })

    assert config.provider == AIProvider.ANTHROPIC
    assert config.model == "claude-3-haiku-20240307"
    assert config.fallback_provider == AIProvider.OPENAI
    assert config.rate_limiting == RateLimitConfig(requests_per_minute=5, requests_per_hour=50)
    assert base.provider == AIProvider.OPENAI


def test_new_fallback_provider_drops_inherited_fallback_model():
    base = VARIANTS[AgentType.ASSESSMENT].default_config()
    assert base.fallback_model == "gpt-3.5-turbo"

    config = apply_agent_overrides(base, {"fallback_provider": "anthropic"})

    assert config.fallback_provider == AIProvider.ANTHROPIC
    assert config.fallback_model is None


def test_explicit_fallback_model_is_kept():
    base = VARIANTS[AgentType.CONTENT_CREATOR].default_config()
    config = apply_agent_overrides(base, {"fallback_provider": "gemini", "fallback_model": "gemini-1.5-pro"})
    assert config.fallback_model == "gemini-1.5-pro"


def test_same_fallback_provider_keeps_fallback_model():
    base = VARIANTS[AgentType.CONTENT_CREATOR].default_config()
    config = apply_agent_overrides(base, {"fallback_provider": "openai"})
    assert config.fallback_model == "gpt-4"


def test_provider_override_without_model_is_rejected():
    base = VARIANTS[AgentType.TUTOR].default_config()
    with pytest.raises(ConfigurationError):
        apply_agent_overrides(base, {"provider": "anthropic", "fallback_provider": "openai"})
    assert apply_agent_overrides(base, {"provider": "openai"}).model == "gpt-4"


def test_apply_agent_overrides_can_remove_limits_and_fallback():
    base = VARIANTS[AgentType.MENTOR].default_config()
    config = apply_agent_overrides(base, {"rate_limiting": None, "fallback_provider": None})
    assert config.rate_limiting is None
    assert config.fallback_provider is None


def test_empty_overrides_return_defaults():
    base = VARIANTS[AgentType.ASSESSMENT].default_config()
    assert apply_agent_overrides(base, None) is base
    assert apply_agent_overrides(base, {}) is base
