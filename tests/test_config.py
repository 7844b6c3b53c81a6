from chat.config import DEFAULT_MODEL, Settings


def test_defaults_from_empty_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY", "OPENAI_MODEL", "SESSION_MAX_AGE_SECONDS",
        "SESSION_SWEEP_INTERVAL_SECONDS", "RATE_LIMIT_PER_MINUTE", "CORS_ORIGINS", "PORT",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.openai_api_key is None
    assert settings.openai_model == DEFAULT_MODEL == "gpt-3.5-turbo"
    assert settings.session_max_age_seconds == 3600
    assert settings.session_sweep_interval_seconds == 3600
    assert settings.rate_limit_per_minute == 30
    assert settings.cors_origins == ["*"]
    assert settings.port == 8000
    assert settings.api_key_configured is False


def test_values_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-abc")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("SESSION_MAX_AGE_SECONDS", "60")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, http://example.com")

    settings = Settings.from_env()

    assert settings.api_key_configured is True
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.session_max_age_seconds == 60
    assert settings.cors_origins == ["http://localhost:5173", "http://example.com"]


def test_placeholder_key_is_not_configured():
    assert Settings(openai_api_key="your_openai_api_key_here").api_key_configured is False
    assert Settings(openai_api_key="").api_key_configured is False
