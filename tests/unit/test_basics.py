from __future__ import annotations

from jobly import config
from jobly.infrastructure.db_factory import _server_settings, build_dsn
from scripts import seed_data


def test_get_settings_defaults(monkeypatch):
    for var in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    settings = config.Settings(_env_file=None)

    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "jobly"
    assert settings.log_level == "INFO"
    assert settings.log_json is False


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DB_NAME", "jobly_test")
    monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "2500")

    settings = config.Settings(_env_file=None)

    assert settings.db_name == "jobly_test"
    assert settings.db_statement_timeout_ms == 2500


def test_build_dsn_from_settings():
    settings = config.Settings(
        _env_file=None,
        DB_HOST="db",
        DB_PORT=6543,
        DB_USER="u",
        DB_PASSWORD="p",
        DB_NAME="n",
    )

    assert build_dsn(settings) == "postgresql://u:p@db:6543/n"


def test_statement_timeout_only_when_configured():
    assert _server_settings(config.Settings(_env_file=None, DB_STATEMENT_TIMEOUT_MS=0)) == {}
    assert _server_settings(config.Settings(_env_file=None, DB_STATEMENT_TIMEOUT_MS=500)) == {
        "statement_timeout": "500"
    }


def test_schema_file_defines_both_tables():
    ddl = seed_data.SCHEMA_PATH.read_text(encoding="utf-8")

    assert "CREATE TABLE IF NOT EXISTS companies" in ddl
    assert "CREATE TABLE IF NOT EXISTS jobs" in ddl
    assert "UNIQUE (title, company_handle)" in ddl


def test_sample_jobs_reference_sample_companies():
    handles = {company[0] for company in seed_data.SAMPLE_COMPANIES}

    assert {job[3] for job in seed_data.SAMPLE_JOBS} <= handles
