# mypy: ignore-errors
# tests/services/test_settings.py
"""Tests for settings properties."""

from crush_confessions.core.settings import Settings


def test_email_suffix_is_lowercased() -> None:
    config = Settings(SECRET_KEY="x", ALLOWED_EMAIL_DOMAIN="UMT.edu.pk")
    assert config.email_suffix == "@umt.edu.pk"


def test_database_url_sync_converts_asyncpg() -> None:
    config = Settings(SECRET_KEY="x", DATABASE_URL="postgresql+asyncpg://u:p@db/crush")
    assert config.database_url_sync == "postgresql+psycopg://u:p@db/crush"


def test_effective_database_url_prefers_test_database() -> None:
    config = Settings(
        SECRET_KEY="x",
        DATABASE_URL="sqlite:///./main.db",
        TEST_DATABASE_URL="sqlite:///./test.db",
        USE_TEST_DATABASE=True,
    )
    assert config.effective_database_url == "sqlite:///./test.db"

    config.use_testing_database = False
    assert config.effective_database_url == "sqlite:///./main.db"
