"""Password hashing and session-token signing."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

_ALGO = "HS256"
_BCRYPT_ROUNDS = 10
# bcrypt only reads this many bytes of the password
_BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Token is malformed, carries a bad signature, or has expired."""


def _pw(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptHasher:
    def hash(self, plain: str) -> str:
        salt = bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)
        return bcrypt.hashpw(_pw(plain), salt).decode("utf-8")

    def verify(self, plain: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_pw(plain), digest.encode("utf-8"))
        except ValueError:
            # digest is not a bcrypt hash
            return False


class JwtCodec:
    """HS256 bearer tokens with a fixed lifetime."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=1)) -> None:
        self._secret = secret
        self._ttl = ttl

    def encode(self, claims: dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=_ALGO)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGO],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError as exc:
            raise TokenError(str(exc)) from exc
