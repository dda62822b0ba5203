from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Gender(str, Enum):
    man = "man"
    women = "women"


class UserRecord(BaseModel):
    """One stored account, keyed by ``email``."""

    user_id: str
    email: str
    fullname: str | None = None
    password_hash: str
    height: int | float | None = None
    weight: int | float | None = None
    age: int | float | None = None
    gender: Gender
    is_logged_in: bool = False
    last_login: datetime | None = None


class LoginResult(BaseModel):
    """Public profile plus a fresh bearer token; never carries the digest."""

    user_id: str
    name: str | None = None
    email: str
    height: int | float | None = None
    weight: int | float | None = None
    age: int | float | None = None
    gender: Gender
    token: str
