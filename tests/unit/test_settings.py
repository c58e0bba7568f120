"""
Unit tests for application settings.
"""

import pytest

from workout_scheduler.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD",
        "SNOWFLAKE_PRIVATE_KEY_PATH", "SNOWFLAKE_MOCK_MODE",
        "SMTP_HOST", "EMAIL_FROM_ADDRESS", "EMAIL_MOCK_MODE", "CORS_ORIGINS",
    ]:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:

    def test_mock_modes_need_nothing(self):
        settings = make_settings(snowflake_mock_mode=True, email_mock_mode=True)

        assert settings.validate_required_fields() == []

    def test_real_mode_lists_missing_fields(self):
        missing = make_settings().validate_required_fields()

        assert "SNOWFLAKE_ACCOUNT" in missing
        assert "SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH" in missing
        assert "SMTP_HOST" in missing
        assert "EMAIL_FROM_ADDRESS" in missing

    def test_private_key_satisfies_snowflake_auth(self):
        settings = make_settings(
            snowflake_account="acct",
            snowflake_user="svc",
            snowflake_private_key_path="/keys/rsa.p8",
            email_mock_mode=True,
        )

        assert settings.validate_required_fields() == []

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
        monkeypatch.setenv("EMAIL_MOCK_MODE", "true")

        settings = make_settings()

        assert settings.smtp_host == "smtp.example.com"
        assert settings.email_mock_mode is True

    def test_cors_origins_list(self):
        assert make_settings(cors_origins="*").cors_origins_list == ["*"]
        assert make_settings(cors_origins="http://a, http://b").cors_origins_list == [
            "http://a",
            "http://b",
        ]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
