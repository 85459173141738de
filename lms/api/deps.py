# File: lms/api/deps.py

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from lms.api.access_filter import AuthenticatedUser
from lms.core.config import Settings
from lms.core.errors import NotFoundError
from lms.models.user import User


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    The session factory is the one the application was created with, so the
    access filter and the endpoints always talk to the same database.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_principal(request: Request) -> AuthenticatedUser:
    """
    The caller identity attached by the access filter.

    Only used on routes the policy table already protects, so a missing
    identity here means the route was left public by mistake.
    """
    principal = getattr(request.state, "user", None)
    if principal is None:
        raise RuntimeError(f"No authenticated user on protected route {request.url.path}")
    return principal


def get_current_user(
    principal: AuthenticatedUser = Depends(get_principal),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, principal.id)
    if user is None:
        raise NotFoundError(f"User not found with id: {principal.id}")
    return user


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
