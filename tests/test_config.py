import pytest

from weather_proxy.config import DEFAULT_CWA_API_URL, Settings


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.api_key is None
    assert settings.api_url == DEFAULT_CWA_API_URL
    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.timeout == 30.0
    assert settings.environment == "development"
    assert settings.cors_origins == ("*",)
    assert settings.log_level == "INFO"
    assert settings.credential_configured is False


def test_values_from_environment():
    settings = Settings.from_env({
        "CWA_API_KEY": "CWA-1234",
        "CWA_API_URL": "https://example.test/forecast",
        "CWA_TIMEOUT": "2.5",
        "PORT": "8080",
        "HOST": "127.0.0.1",
        "APP_ENV": "production",
        "CORS_ORIGINS": "https://a.example, https://b.example",
        "LOG_LEVEL": "debug",
    })

    assert settings.api_key == "CWA-1234"
    assert settings.credential_configured is True
    assert settings.api_url == "https://example.test/forecast"
    assert settings.timeout == 2.5
    assert settings.port == 8080
    assert settings.host == "127.0.0.1"
    assert settings.environment == "production"
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"


def test_empty_key_is_treated_as_missing():
    assert Settings.from_env({"CWA_API_KEY": ""}).credential_configured is False
    assert Settings(api_key="  ").credential_configured is False


def test_invalid_port_fails_at_startup():
    with pytest.raises(ValueError):
        Settings.from_env({"PORT": "not-a-port"})


def test_repr_hides_credential():
    assert "secret-key" not in repr(Settings(api_key="secret-key"))


def test_settings_are_immutable():
    settings = Settings(api_key="a")
    with pytest.raises(AttributeError):
        settings.api_key = "b"
