"""
Centralised settings loader.

Values come from the process environment, falling back to a local `.env`.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ────────────────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    cors_origins: list[str] = Field(["*"], validation_alias="CORS_ORIGINS")

    # ─── credential store ───────────────────────────────────────────
    database_url: str | None = Field(None, validation_alias="DATABASE_URL")
    cloud_sql_instance: str | None = Field(None, validation_alias="CLOUD_SQL_CONNECTION_NAME")
    db_user: str | None = Field(None, validation_alias="DB_USER")
    db_pass: str | None = Field(None, validation_alias="DB_PASS")
    db_name: str | None = Field(None, validation_alias="DB_NAME")

    # ─── session tokens ─────────────────────────────────────────────
    jwt_secret: str = Field("changeme", validation_alias="JWT_SECRET")
    token_ttl_minutes: int = Field(60, validation_alias="TOKEN_TTL_MINUTES")

    # allow other teammates’ env-vars without crashing
    model_config = {"extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
