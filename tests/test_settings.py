"""
tests.test_settings

Env-driven settings and URL assembly.
"""

from __future__ import annotations

from ask_sql_persistence.settings import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.table_name == "skill_attributes"
    assert settings.partition_key_name == "user_id"
    assert settings.attributes_name == "attributes"
    assert settings.connection_mode == "pool"
    assert settings.create_table is True


def test_explicit_url_wins(monkeypatch) -> None:
    monkeypatch.setenv("ASK_SQL_DATABASE_URL", "sqlite:///attrs.db")
    monkeypatch.setenv("ASK_SQL_DB_HOST", "ignored.example.com")

    url = Settings(_env_file=None).sqlalchemy_url
    assert url.get_backend_name() == "sqlite"
    assert url.database == "attrs.db"


def test_url_assembled_from_parts(monkeypatch) -> None:
    monkeypatch.delenv("ASK_SQL_DATABASE_URL", raising=False)
    monkeypatch.setenv("ASK_SQL_DB_HOST", "db.internal")
    monkeypatch.setenv("ASK_SQL_DB_PORT", "6543")
    monkeypatch.setenv("ASK_SQL_DB_USER", "skill")
    monkeypatch.setenv("ASK_SQL_DB_PASSWORD", "s3cret")
    monkeypatch.setenv("ASK_SQL_DB_NAME", "alexa")

    url = Settings(_env_file=None).sqlalchemy_url
    assert url.drivername == "postgresql+psycopg"
    assert (url.host, url.port, url.username, url.database) == ("db.internal", 6543, "skill", "alexa")
    assert url.password == "s3cret"


def test_password_hidden_from_repr() -> None:
    settings = Settings(_env_file=None, db_password="s3cret")
    assert "s3cret" not in repr(settings)


# --- Module Notes -----------------------------------------------------------
# _env_file=None keeps a developer's local .env out of these assertions.
