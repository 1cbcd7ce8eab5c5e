"""
Tests for employee_service/core/config.py - Configuration and settings validation.
"""
import pytest

from employee_service.core.config import Settings

STRONG_ACCESS_SECRET = "a" * 16 + "access-secret-strong-value"
STRONG_REFRESH_SECRET = "b" * 16 + "refresh-secret-strong-value"


@pytest.fixture
def production_env(monkeypatch):
    """A production environment that passes every check."""
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", STRONG_ACCESS_SECRET)
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", STRONG_REFRESH_SECRET)
    monkeypatch.setenv("POSTGRES_PASSWORD", "a-long-and-strong-db-password")
    monkeypatch.setenv("COOKIE_SECURE", "true")
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://hr.example.com")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return monkeypatch


class TestSettingsDefaults:

    def test_development_mode_allows_default_secrets(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("ACCESS_TOKEN_SECRET", raising=False)

        settings = Settings(_env_file=None)

        assert settings.ENVIRONMENT == "development"
        assert settings.ACCESS_TOKEN_SECRET.startswith("access-token-secret")

    def test_database_url_built_from_postgres_settings(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("POSTGRES_USER", "hr")
        monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
        monkeypatch.setenv("POSTGRES_SERVER", "dbhost")
        monkeypatch.setenv("POSTGRES_DB", "staff")

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL == "postgresql+asyncpg://hr:pw@dbhost:5432/staff"

    def test_explicit_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@elsewhere/db")

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL == "postgresql+asyncpg://u:p@elsewhere/db"

    def test_allowed_origins_accepts_comma_separated_string(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com")

        settings = Settings(_env_file=None)

        assert settings.ALLOWED_ORIGINS == ["https://a.example.com", "https://b.example.com"]

    def test_cookie_defaults_are_secure(self, monkeypatch):
        monkeypatch.delenv("COOKIE_SECURE", raising=False)
        monkeypatch.delenv("COOKIE_SAMESITE", raising=False)

        settings = Settings(_env_file=None)

        assert settings.COOKIE_SECURE is True
        assert settings.COOKIE_SAMESITE == "lax"

    def test_rejects_unknown_samesite(self, monkeypatch):
        monkeypatch.setenv("COOKIE_SAMESITE", "sometimes")

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestProductionValidation:

    def test_valid_production_config_loads(self, production_env):
        settings = Settings(_env_file=None)

        assert settings.ENVIRONMENT == "production"

    def test_rejects_default_access_secret(self, production_env):
        production_env.delenv("ACCESS_TOKEN_SECRET")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "ACCESS_TOKEN_SECRET is insecure" in str(exc_info.value)

    def test_rejects_short_refresh_secret(self, production_env):
        production_env.setenv("REFRESH_TOKEN_SECRET", "short")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "REFRESH_TOKEN_SECRET is insecure" in str(exc_info.value)

    def test_rejects_identical_secrets(self, production_env):
        production_env.setenv("REFRESH_TOKEN_SECRET", STRONG_ACCESS_SECRET)

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "must differ" in str(exc_info.value)

    def test_rejects_insecure_db_password(self, production_env):
        production_env.setenv("POSTGRES_PASSWORD", "postgres")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "POSTGRES_PASSWORD is insecure" in str(exc_info.value)
        assert "DATABASE_URL contains" not in str(exc_info.value)

    def test_rejects_insecure_password_in_explicit_database_url(self, production_env):
        production_env.setenv("DATABASE_URL", "postgresql+asyncpg://hr:password@db:5432/staff")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "DATABASE_URL contains an insecure password" in str(exc_info.value)
        assert "POSTGRES_PASSWORD is insecure" not in str(exc_info.value)

    def test_strong_explicit_database_url_overrides_weak_postgres_password(self, production_env):
        production_env.setenv("POSTGRES_PASSWORD", "postgres")
        production_env.setenv("DATABASE_URL", "postgresql+asyncpg://hr:a-long-strong-password@db:5432/staff")

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL.endswith("@db:5432/staff")

    def test_rejects_insecure_cookies(self, production_env):
        production_env.setenv("COOKIE_SECURE", "false")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "COOKIE_SECURE" in str(exc_info.value)

    def test_requires_cloudinary_credentials(self, production_env):
        production_env.delenv("CLOUDINARY_API_SECRET")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "CLOUDINARY" in str(exc_info.value)

    def test_rejects_localhost_origins(self, production_env):
        production_env.delenv("ALLOWED_ORIGINS")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        assert "ALLOWED_ORIGINS" in str(exc_info.value)

    def test_reports_all_errors_at_once(self, production_env):
        production_env.setenv("DEBUG", "true")
        production_env.setenv("COOKIE_SECURE", "false")

        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None)

        message = str(exc_info.value)
        assert "DEBUG must be False" in message
        assert "COOKIE_SECURE" in message
