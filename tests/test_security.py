# File: tests/test_security.py

from datetime import timedelta

import pytest
from jose import jwt

from lms.core.errors import BusinessRuleError
from lms.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_is_salted_and_verifies(settings):
    first = hash_password("librarian123", settings=settings)
    second = hash_password("librarian123", settings=settings)

    assert first != second
    assert first != "librarian123"
    assert verify_password("librarian123", first)
    assert verify_password("librarian123", second)


def test_wrong_password_does_not_verify(settings):
    hashed = hash_password("librarian123", settings=settings)
    assert not verify_password("librarian124", hashed)


def test_garbage_hash_does_not_verify():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_password_over_bcrypt_limit_is_rejected(settings):
    with pytest.raises(BusinessRuleError):
        hash_password("x" * 73, settings=settings)


def test_token_round_trips_user_id(settings):
    token = create_access_token(42, settings=settings)
    assert decode_access_token(token, settings=settings) == 42


def test_token_carries_issued_at_and_expiry(settings):
    token = create_access_token(7, settings=settings)
    claims = jwt.get_unverified_claims(token)

    assert claims["sub"] == "7"
    assert claims["exp"] - claims["iat"] == settings.access_token_expire_minutes * 60


def test_expired_token_is_rejected(settings):
    token = create_access_token(42, expires_delta=timedelta(seconds=-5), settings=settings)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=settings)


def test_tampered_token_is_rejected(settings):
    token = create_access_token(42, settings=settings)
    header, payload, signature = token.split(".")
    forged_payload = jwt.encode({"sub": "1", "exp": 9999999999}, "other-secret").split(".")[1]

    with pytest.raises(InvalidTokenError):
        decode_access_token(f"{header}.{forged_payload}.{signature}", settings=settings)


def test_token_signed_with_other_secret_is_rejected(settings):
    foreign = settings.model_copy(update={"secret_key": "someone-else"})
    token = create_access_token(42, settings=foreign)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=settings)


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_rejected(settings, token):
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=settings)


def test_non_numeric_subject_is_rejected(settings):
    token = jwt.encode({"sub": "alice", "exp": 9999999999}, settings.secret_key, algorithm=settings.algorithm)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=settings)
