# File: lms/core/security.py

"""
Security helpers for the library API.

  - Password hashing (bcrypt, salted, cost taken from settings)
  - Access tokens: HS-signed JWTs carrying the user id in ``sub``

Tokens are stateless. There is no revocation list, so a token stays valid
until its ``exp`` even if the account is disabled afterwards.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt

from lms.core.config import Settings, get_settings
from lms.core.errors import BusinessRuleError

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_PASSWORD_BYTES = 72


class InvalidTokenError(Exception):
    """Raised for any token that cannot be trusted (malformed, tampered, expired)."""


def hash_password(password: str, *, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    secret = password.encode("utf-8")
    if len(secret) > BCRYPT_MAX_PASSWORD_BYTES:
        raise BusinessRuleError(
            f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long"
        )
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(secret, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    secret = password.encode("utf-8")
    if len(secret) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(secret, password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: int | str,
    expires_delta: Optional[timedelta] = None,
    *,
    settings: Optional[Settings] = None,
) -> str:
    """
    Issue a signed access token for ``subject`` (the user id).

    The lifetime defaults to ``settings.access_token_expire_minutes``.
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, *, settings: Optional[Settings] = None) -> int:
    """
    Verify signature and expiry and return the user id the token was issued for.

    Every failure mode surfaces as ``InvalidTokenError``.
    """
    settings = settings or get_settings()
    if not token:
        raise InvalidTokenError("missing token")
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    sub = claims.get("sub")
    try:
        return int(sub)
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("token subject is not a user id") from exc
