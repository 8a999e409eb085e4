"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from sprout.shared.config.settings import Settings


def make_settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestValidators:
    def test_environment_is_normalised(self) -> None:
        assert make_settings(ENVIRONMENT="Production").ENVIRONMENT == "production"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("ENVIRONMENT", "qa"),
            ("LOG_LEVEL", "verbose"),
            ("LOG_FORMAT", "xml"),
            ("JWT_ALGORITHM", "RS256"),
            ("CORS_ORIGINS", "http://ok.test,ftp://bad.test"),
            ("CHECKOUT_CURRENCY", "usdollars"),
        ],
    )
    def test_invalid_values_are_rejected(self, field, value) -> None:
        with pytest.raises(ValidationError):
            make_settings(**{field: value})

    def test_log_level_and_currency_case(self) -> None:
        settings = make_settings(LOG_LEVEL="debug", CHECKOUT_CURRENCY="EUR")

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.CHECKOUT_CURRENCY == "eur"


class TestProperties:
    def test_database_url_is_built_from_parts(self) -> None:
        settings = make_settings(
            DATABASE_URL=None,
            DB_USER="sprout",
            DB_PASSWORD="secret",
            DB_HOST="db",
            DB_PORT=5433,
            DB_NAME="market",
        )

        assert settings.database_url == "postgresql+asyncpg://sprout:secret@db:5433/market"

    def test_explicit_database_url_wins(self) -> None:
        assert make_settings(DATABASE_URL="sqlite+aiosqlite://").database_url == "sqlite+aiosqlite://"

    def test_cors_origins_list(self) -> None:
        settings = make_settings(CORS_ORIGINS="http://a.test, https://b.test")

        assert settings.cors_origins_list == ["http://a.test", "https://b.test"]

    def test_provider_flags(self) -> None:
        settings = make_settings(
            STRIPE_SECRET_KEY=None,
            MAILJET_API_KEY="key",
            MAILJET_SECRET_KEY="secret",
            CONTACT_FORM_RECEIVER_EMAIL=None,
            SHIPPO_API_KEY="shippo",
            SUPABASE_URL="https://project.supabase.co",
            SUPABASE_SERVICE_ROLE_KEY=None,
        )

        assert settings.stripe_enabled is False
        assert settings.mailjet_enabled is False
        assert settings.shippo_enabled is True
        assert settings.storage_enabled is False

    def test_environment_flags(self) -> None:
        assert make_settings(ENVIRONMENT="test").is_testing is True
        assert make_settings(ENVIRONMENT="production").is_production is True
