import logging

from edashow import config


def test_provider_keys(monkeypatch):
    for var in config.REQUIRED_ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")

    assert config.check_api_key("openrouter")
    assert not config.check_api_key("openai")
    assert not config.check_api_key("unknown")
    assert config.get_available_providers() == ["openrouter"]
    assert config.get_missing_keys() == ["claude", "openai", "gemini"]


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    config.configure_logging("debug")

    assert calls[0]["level"] == "DEBUG"
