# File: lms/services/auth_service.py

"""
Authentication service.

  - User lookup by email
  - Password verification
  - Token generation
"""

from typing import Optional

from sqlalchemy.orm import Session

from lms.core.config import Settings
from lms.core.errors import AuthenticationError
from lms.core.logging import get_logger
from lms.core.security import create_access_token, verify_password
from lms.models.user import User
from lms.services.user_service import find_by_email

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def authenticate_user(
    db: Session,
    *,
    email: str,
    password: str,
) -> User:
    """
    Return the user for a correct email/password pair.

    Unknown email and wrong password produce the same message. A disabled
    account is rejected even with the right password.
    """
    user = find_by_email(db, email.strip())
    if user is None or not verify_password(password, user.password_hash):
        log.info("login_failed", reason="bad_credentials")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.enabled:
        log.info("login_failed", reason="disabled", user_id=user.id)
        raise AuthenticationError("User account is disabled")
    return user


def login(
    db: Session,
    *,
    email: str,
    password: str,
    settings: Optional[Settings] = None,
) -> tuple[str, User]:
    user = authenticate_user(db, email=email, password=password)
    token = create_access_token(user.id, settings=settings)
    log.info("login_succeeded", user_id=user.id)
    return token, user
