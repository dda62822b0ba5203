"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* The `users` table: one document-style row per account, keyed by email
* Session factory used by the credential store
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    # 1) plain TCP URL
    if settings.database_url:
        return create_async_engine(settings.database_url, pool_pre_ping=True)

    # 2) Cloud SQL connector (only if URL not supplied)
    if not settings.cloud_sql_instance:
        raise RuntimeError(
            "Set either DATABASE_URL or CLOUD_SQL_CONNECTION_NAME env var"
        )

    # lazy import here
    try:
        from google.cloud.sql.connector import IPTypes, create_async_connector  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "cloud-sql-python-connector missing. Run:\n"
            "pip install 'cloud-sql-python-connector[asyncpg]>=1.4.0'"
        ) from exc

    connector = await create_async_connector()

    async def _getconn():  # type: ignore[name-defined]
        return await connector.connect_async(
            settings.cloud_sql_instance,
            "asyncpg",
            user=settings.db_user,
            password=settings.db_pass,
            db=settings.db_name,
            ip_type=IPTypes.PRIVATE,
        )

    return create_async_engine(
        "postgresql+asyncpg://",
        async_creator=_getconn,
        pool_pre_ping=True,
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


async def dispose_engine() -> None:
    global _ENGINE
    if _ENGINE is not None:
        await _ENGINE.dispose()
        _ENGINE = None


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class UserDoc(Base):
    __tablename__ = "users"

    email:        Mapped[str]   = mapped_column(String, primary_key=True)
    user_id:      Mapped[str]   = mapped_column(String, unique=True)
    fullname:     Mapped[str | None] = mapped_column(String)
    password_hash: Mapped[str]  = mapped_column(String)
    # numeric as sent by the client; JSON keeps int vs float apart
    height:       Mapped[int | float | None] = mapped_column(JSON)
    weight:       Mapped[int | float | None] = mapped_column(JSON)
    age:          Mapped[int | float | None] = mapped_column(JSON)
    gender:       Mapped[str]   = mapped_column(String)
    is_logged_in: Mapped[bool]  = mapped_column(Boolean, default=False)
    last_login:   Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


# ───────── schema / session helpers ──────────────────────────────────

async def init_models(eng: AsyncEngine | None = None) -> None:
    """Create missing tables; existing ones are left untouched."""
    eng = eng or await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def session_factory(
    eng: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    eng = eng or await engine()
    return async_sessionmaker(eng, expire_on_commit=False)
