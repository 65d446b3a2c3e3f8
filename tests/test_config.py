import pytest

from opus_api.config import DEFAULT_CORS_ORIGINS, DEFAULT_PORT, load_settings
from opus_api.core import ConfigError

BASE_ENV = {
    "OPUS_INTERNAL_API_KEY": "secret",
    "SUPABASE_URL": "https://proj.supabase.co/",
    "SUPABASE_SERVICE_ROLE_KEY": "service-role",
}


def test_load_settings_defaults() -> None:
    settings = load_settings(BASE_ENV)

    assert settings.internal_api_key == "secret"
    assert settings.supabase_url == "https://proj.supabase.co"
    assert settings.port == DEFAULT_PORT
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.environment == "development"


def test_load_settings_overrides() -> None:
    env = dict(
        BASE_ENV,
        PORT="9000",
        CORS_ORIGIN="https://a.example, https://b.example,",
        APP_ENV="production",
        LOG_LEVEL="debug",
        SUPABASE_TIMEOUT_SECONDS="2.5",
    )
    settings = load_settings(env)

    assert settings.port == 9000
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.environment == "production"
    assert settings.log_level == "DEBUG"
    assert settings.store_timeout == 2.5


@pytest.mark.parametrize(
    "missing", ["OPUS_INTERNAL_API_KEY", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"]
)
def test_missing_required_setting_fails_fast(missing) -> None:
    env = {k: v for k, v in BASE_ENV.items() if k != missing}
    with pytest.raises(ConfigError, match=missing):
        load_settings(env)


def test_store_credentials_optional_for_in_memory_store() -> None:
    settings = load_settings({"OPUS_INTERNAL_API_KEY": "secret"}, require_store=False)
    assert settings.supabase_url == ""

    with pytest.raises(ConfigError, match="OPUS_INTERNAL_API_KEY"):
        load_settings({}, require_store=False)


def test_invalid_port_is_config_error() -> None:
    with pytest.raises(ConfigError):
        load_settings(dict(BASE_ENV, PORT="eighty"))
