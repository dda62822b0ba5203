# tests/test_tokens.py
from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from services.auth import BcryptHasher, JwtCodec, TokenError

hasher = BcryptHasher()
codec = JwtCodec("unit-secret")


# ── password hashing ────────────────────────────────────────────────
def test_hash_is_salted_and_verifiable():
    a = hasher.hash("hunter2")
    b = hasher.hash("hunter2")

    assert a != b
    assert a.startswith("$2b$10$")
    assert hasher.verify("hunter2", a)
    assert hasher.verify("hunter2", b)
    assert not hasher.verify("hunter3", a)


def test_verify_against_malformed_digest_is_false():
    assert hasher.verify("hunter2", "not-a-bcrypt-hash") is False


# ── token codec ─────────────────────────────────────────────────────
def test_roundtrip_keeps_claims_and_adds_expiry():
    token = codec.encode({"email": "a@b.c", "userId": "u-1"})
    claims = codec.decode(token)

    assert claims["email"] == "a@b.c"
    assert claims["userId"] == "u-1"
    assert claims["exp"] - claims["iat"] == 3600


def test_expired_token_is_rejected():
    token = JwtCodec("unit-secret", ttl=timedelta(seconds=-5)).encode({"email": "a@b.c"})
    with pytest.raises(TokenError):
        codec.decode(token)


def test_wrong_secret_is_rejected():
    token = JwtCodec("other-secret").encode({"email": "a@b.c"})
    with pytest.raises(TokenError):
        codec.decode(token)


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"email": "a@b.c"}, "unit-secret", algorithm="HS256")
    with pytest.raises(TokenError):
        codec.decode(token)


def test_garbage_is_rejected():
    with pytest.raises(TokenError):
        codec.decode("definitely.not.ajwt")


def test_long_password_uses_first_72_bytes():
    digest = hasher.hash("x" * 100)

    assert hasher.verify("x" * 100, digest)
    assert hasher.verify("x" * 72, digest)
    assert not hasher.verify("x" * 71, digest)
