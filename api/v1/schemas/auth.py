from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.models.user import Gender

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ───────── requests ─────────────────────────────────────────────────
# Everything optional: presence and equality are checked by the service so
# the caller gets its message, not a schema error.
class RegisterIn(BaseModel):
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None
    fullname: str | None = None
    height: int | float | None = None
    weight: int | float | None = None
    age: int | float | None = None
    gender: str | None = Field(None, examples=["man", "women"])

    model_config = _CAMEL


class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None


# ───────── responses ────────────────────────────────────────────────
class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: bool = True
    message: str


class LoginResultOut(BaseModel):
    user_id: str
    name: str | None = None
    email: str
    height: int | float | None = None
    weight: int | float | None = None
    age: int | float | None = None
    gender: Gender
    token: str

    model_config = _CAMEL


class LoginOut(BaseModel):
    error: bool = False
    message: str
    login_result: LoginResultOut

    model_config = _CAMEL
