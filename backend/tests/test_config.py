"""
Arboriza Backend - Settings Tests
==================================
"""

import ssl

import pytest
from pydantic import ValidationError

from arboriza.config import Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.rate_limit_requests == 1000
        assert settings.rate_limit_window == 900
        assert settings.messages_default_limit == 50
        assert settings.is_postgres

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="https://a.example, https://b.example,")

        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_log_level_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///env.db")
        monkeypatch.setenv("PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///env.db"
        assert settings.port == 8080
        assert not settings.is_postgres


class TestSslContext:

    def test_disabled(self):
        assert Settings(_env_file=None, db_ssl=False).ssl_context() is None

    def test_unverified(self):
        context = Settings(_env_file=None, db_ssl=True, db_ssl_verify=False).ssl_context()

        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False

    def test_verified(self):
        context = Settings(_env_file=None, db_ssl=True, db_ssl_verify=True).ssl_context()

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True
