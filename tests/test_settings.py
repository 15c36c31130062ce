import pytest
from pydantic import ValidationError

from saas_platform.core.settings import AppSettings
from saas_platform.db import run_migrations


def test_cors_lists_accept_comma_separated_values(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.setenv("CORS_ALLOW_METHODS", "GET,POST")
    settings = AppSettings()
    assert settings.CORS_ORIGINS == ["https://a.example.com", "https://b.example.com"]
    assert settings.CORS_ALLOW_METHODS == ["GET", "POST"]
    assert settings.CORS_ALLOW_HEADERS == ["*"]


def test_log_level_is_normalised_and_checked():
    assert AppSettings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        AppSettings(LOG_LEVEL="chatty")


def test_migration_config_points_at_packaged_scripts():
    cfg = run_migrations.build_config()
    assert (run_migrations.MIGRATIONS_DIR / "env.py").exists()
    assert cfg.get_main_option("script_location") == str(run_migrations.MIGRATIONS_DIR)
    assert cfg.get_main_option("sqlalchemy.url").startswith("sqlite")


def test_unknown_migration_command_exits():
    with pytest.raises(SystemExit) as exc:
        run_migrations.main(["explode"])
    assert exc.value.code == 2
