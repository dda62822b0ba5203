"""
SqlCredentialStore against a throw-away SQLite file (aiosqlite driver).
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.models.user import Gender, UserRecord
from services.db import init_models
from services.users import (
    InMemoryCredentialStore,
    SqlCredentialStore,
    UserAlreadyExistsError,
    UserNotFoundError,
)

BOB = UserRecord(
    user_id="8d7c4c1e-0000-4000-8000-000000000001",
    email="bob@example.com",
    fullname="Bob Builder",
    password_hash="$2b$10$abcdefghijklmnopqrstuv",
    height=180.0,
    weight=82.0,
    age=41,
    gender=Gender.man,
)


def _sql_store(tmp_path) -> SqlCredentialStore:
    async def _setup():
        eng = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'users.db'}", poolclass=NullPool
        )
        await init_models(eng)
        return SqlCredentialStore(async_sessionmaker(eng, expire_on_commit=False))

    return asyncio.run(_setup())


@pytest.fixture(params=["sql", "memory"])
def store(request, tmp_path):
    if request.param == "sql":
        return _sql_store(tmp_path)
    return InMemoryCredentialStore()


def test_get_missing_returns_none(store):
    assert asyncio.run(store.get("nobody@example.com")) is None
    assert asyncio.run(store.exists("nobody@example.com")) is False


def test_create_then_get(store):
    asyncio.run(store.create(BOB))

    got = asyncio.run(store.get(BOB.email))
    assert asyncio.run(store.exists(BOB.email)) is True
    assert got.user_id == BOB.user_id
    assert got.gender is Gender.man
    assert (got.height, got.weight, got.age) == (180.0, 82.0, 41)
    assert got.is_logged_in is False
    assert got.last_login is None


def test_create_is_conditional(store):
    asyncio.run(store.create(BOB))
    with pytest.raises(UserAlreadyExistsError):
        asyncio.run(store.create(BOB.model_copy(update={"user_id": "other"})))

    assert asyncio.run(store.get(BOB.email)).user_id == BOB.user_id


def test_patch_merges_session_fields_only(store):
    asyncio.run(store.create(BOB))
    when = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    asyncio.run(store.patch(BOB.email, is_logged_in=True, last_login=when))

    got = asyncio.run(store.get(BOB.email))
    assert got.is_logged_in is True
    assert got.last_login.replace(tzinfo=timezone.utc) == when
    assert got.fullname == BOB.fullname
    assert got.password_hash == BOB.password_hash


def test_patch_rejects_immutable_fields(store):
    asyncio.run(store.create(BOB))
    with pytest.raises(ValueError):
        asyncio.run(store.patch(BOB.email, password_hash="x"))


def test_patch_unknown_email(store):
    with pytest.raises(UserNotFoundError):
        asyncio.run(store.patch("nobody@example.com", is_logged_in=False))


def test_numeric_fields_keep_int_or_float(store):
    asyncio.run(store.create(BOB.model_copy(update={"height": 180, "age": 41.5})))

    got = asyncio.run(store.get(BOB.email))
    assert got.height == 180 and isinstance(got.height, int)
    assert got.weight == 82.0 and isinstance(got.weight, float)
    assert got.age == 41.5
