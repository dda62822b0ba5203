"""
core/auth_service.py
────────────────────────────────────────────────────────────────────────
Register / login / logout against an injected credential store, password
hasher and token codec.

Every failure surfaces as an ``AuthError`` subclass carrying the HTTP status
and the fixed message shown to the caller. Unexpected collaborator errors are
logged here and collapsed into ``InternalError`` so no store or library
detail leaks out.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from starlette.concurrency import run_in_threadpool

from core.models.user import Gender, LoginResult, UserRecord
from services.auth import TokenError
from services.users import CredentialStore, UserAlreadyExistsError, UserNotFoundError

_LOG = logging.getLogger(__name__)

_GENDERS = frozenset(g.value for g in Gender)


# ───────── error taxonomy ────────────────────────────────────────────
class AuthError(Exception):
    status_code = 400
    message = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    status_code = 400


class ConflictError(AuthError):
    status_code = 400
    message = "User already exists"


class NotFoundError(AuthError):
    status_code = 404
    message = "User not found"


class InvalidCredentialsError(AuthError):
    status_code = 400
    message = "Invalid Password"


class MissingAuthError(AuthError):
    status_code = 400
    message = "Authorization token required"


class InvalidTokenError(AuthError):
    status_code = 401
    message = "Invalid or expired token"


class InternalError(AuthError):
    status_code = 500
    message = "Internal server error"


# ───────── collaborator shapes ───────────────────────────────────────
class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, digest: str) -> bool: ...


class TokenCodec(Protocol):
    def encode(self, claims: dict[str, Any]) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def bearer_token(header: str) -> str | None:
    """Second whitespace-delimited segment of an Authorization header."""
    parts = header.split()
    return parts[1] if len(parts) > 1 else None


# ───────── service ───────────────────────────────────────────────────
class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        codec: TokenCodec,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._codec = codec

    async def register(
        self,
        *,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        fullname: str | None = None,
        height: int | float | None = None,
        weight: int | float | None = None,
        age: int | float | None = None,
        gender: str | None = None,
    ) -> str:
        if gender not in _GENDERS:
            raise ValidationError('Gender must be "man" or "women"')
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            digest = await run_in_threadpool(self._hasher.hash, password)
            user_id = str(uuid.uuid4())

            if await self._store.exists(email):
                raise ConflictError()

            await self._store.create(
                UserRecord(
                    user_id=user_id,
                    email=email,
                    fullname=fullname,
                    password_hash=digest,
                    height=height,
                    weight=weight,
                    age=age,
                    gender=Gender(gender),
                    is_logged_in=False,
                    last_login=None,
                )
            )
        except AuthError:
            raise
        except UserAlreadyExistsError as exc:
            # lost the race against a concurrent registration
            raise ConflictError() from exc
        except Exception as exc:
            _LOG.exception("registration failed")
            raise InternalError("Failed to register user") from exc

        _LOG.info("registered user %s", user_id)
        return "User registered successfully"

    async def login(self, *, email: str | None, password: str | None) -> LoginResult:
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            user = await self._store.get(email)
            if user is None:
                raise NotFoundError()

            if not await run_in_threadpool(
                self._hasher.verify, password, user.password_hash
            ):
                _LOG.info("rejected password for user %s", user.user_id)
                raise InvalidCredentialsError()

            token = self._codec.encode({"email": user.email, "userId": user.user_id})
            await self._store.patch(email, is_logged_in=True, last_login=_now())
        except AuthError:
            raise
        except UserNotFoundError as exc:
            raise NotFoundError() from exc
        except Exception as exc:
            _LOG.exception("login failed")
            raise InternalError("Login failed") from exc

        _LOG.info("login user %s", user.user_id)
        return LoginResult(
            user_id=user.user_id,
            name=user.fullname,
            email=user.email,
            height=user.height,
            weight=user.weight,
            age=user.age,
            gender=user.gender,
            token=token,
        )

    async def logout(self, authorization: str | None) -> str:
        """Flip the stored session flag off; the token itself stays valid until expiry."""
        if not authorization:
            raise MissingAuthError()

        token = bearer_token(authorization)
        if token is None:
            raise InvalidTokenError()
        try:
            claims = self._codec.decode(token)
        except TokenError as exc:
            _LOG.info("rejected token: %s", exc)
            raise InvalidTokenError() from exc

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidTokenError()

        try:
            user = await self._store.get(email)
            if user is None:
                _LOG.debug("token for unknown account %s", email)
                raise NotFoundError()
            await self._store.patch(email, is_logged_in=False, last_login=_now())
        except AuthError:
            raise
        except UserNotFoundError as exc:
            raise NotFoundError() from exc
        except Exception as exc:
            _LOG.exception("logout failed")
            raise InternalError("Logout failed") from exc

        _LOG.info("logout user %s", user.user_id)
        return "Logged out successfully"
