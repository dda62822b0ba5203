"""Credential store: user records keyed by email."""
from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.models.user import UserRecord
from services.db import UserDoc

# fields a patch may touch; everything else is fixed at creation
PATCHABLE_FIELDS = frozenset({"is_logged_in", "last_login"})


class UserAlreadyExistsError(Exception):
    pass


class UserNotFoundError(Exception):
    pass


class CredentialStore(Protocol):
    """Key-value view of the users collection."""

    @abstractmethod
    async def get(self, email: str) -> UserRecord | None:
        ...

    @abstractmethod
    async def exists(self, email: str) -> bool:
        ...

    @abstractmethod
    async def create(self, record: UserRecord) -> None:
        """Insert `record`; raise UserAlreadyExistsError if the email is taken."""
        ...

    @abstractmethod
    async def patch(self, email: str, **fields: Any) -> None:
        """Merge `fields` into the stored record; raise UserNotFoundError if absent."""
        ...


def _check_patch(fields: dict[str, Any]) -> None:
    unknown = set(fields) - PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"fields not patchable: {sorted(unknown)}")


class SqlCredentialStore:
    """CredentialStore backed by the `users` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _to_record(doc: UserDoc) -> UserRecord:
        return UserRecord(
            user_id=doc.user_id,
            email=doc.email,
            fullname=doc.fullname,
            password_hash=doc.password_hash,
            height=doc.height,
            weight=doc.weight,
            age=doc.age,
            gender=doc.gender,
            is_logged_in=doc.is_logged_in,
            last_login=doc.last_login,
        )

    async def get(self, email: str) -> UserRecord | None:
        async with self._session_factory() as db:
            doc = await db.get(UserDoc, email)
            if doc is None:
                return None
            return self._to_record(doc)

    async def exists(self, email: str) -> bool:
        async with self._session_factory() as db:
            return bool(
                await db.scalar(select(exists().where(UserDoc.email == email)))
            )

    async def create(self, record: UserRecord) -> None:
        async with self._session_factory() as db:
            values = record.model_dump()
            values["gender"] = record.gender.value
            db.add(UserDoc(**values))
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise UserAlreadyExistsError(record.email) from exc

    async def patch(self, email: str, **fields: Any) -> None:
        _check_patch(fields)
        async with self._session_factory() as db:
            res = await db.execute(
                update(UserDoc).where(UserDoc.email == email).values(**fields)
            )
            await db.commit()
            if res.rowcount == 0:
                raise UserNotFoundError(email)


class InMemoryCredentialStore:
    """Dict-backed CredentialStore for local runs and tests."""

    def __init__(self) -> None:
        self._docs: dict[str, UserRecord] = {}

    def __len__(self) -> int:
        return len(self._docs)

    async def get(self, email: str) -> UserRecord | None:
        doc = self._docs.get(email)
        return doc.model_copy() if doc is not None else None

    async def exists(self, email: str) -> bool:
        return email in self._docs

    async def create(self, record: UserRecord) -> None:
        if record.email in self._docs:
            raise UserAlreadyExistsError(record.email)
        self._docs[record.email] = record.model_copy()

    async def patch(self, email: str, **fields: Any) -> None:
        _check_patch(fields)
        doc = self._docs.get(email)
        if doc is None:
            raise UserNotFoundError(email)
        self._docs[email] = doc.model_copy(update=fields)
