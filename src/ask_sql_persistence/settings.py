"""
ask_sql_persistence.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the connection and the adapter.
- Assemble a SQLAlchemy URL from discrete host/port/user parts when no URL is given.
- Hide the database password from repr/logging.
- Offer a cached settings instance for skills that build the adapter at import time.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL, make_url


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `ASK_SQL_`, optional `.env` file).

    Either set `database_url` directly or the discrete `db_*` parts.
    """

    model_config = SettingsConfigDict(
        env_prefix="ASK_SQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "ask-sql-persistence"
    log_level: str = "INFO"

    # Connection target. An explicit URL wins over the discrete parts below.
    database_url: str | None = None
    db_driver: str = "postgresql+psycopg"
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = Field(default="", repr=False)
    db_name: str | None = None

    # Attributes table layout
    table_name: str = "skill_attributes"
    partition_key_name: str = "user_id"
    attributes_name: str = "attributes"
    partition_keygen: Literal["user_id", "device_id", "person_id"] = "user_id"
    create_table: bool = True

    # Connection strategy: one persistent client connection, or a pool.
    connection_mode: Literal["client", "pool"] = "pool"
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    echo_sql: bool = False

    @property
    def sqlalchemy_url(self) -> URL:
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The discrete db_* fields exist for deployments that inject credentials as separate
# secrets (DB_USER/DB_PASSWORD style) rather than a single DSN.
