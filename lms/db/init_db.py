"""
Database initialization helpers.

Models are imported here so their tables get registered on Base.metadata
before ``create_all`` runs.
"""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lms.core.config import Settings, get_settings
from lms.core.logging import get_logger
from lms.db.session import engine
from lms.models.base import Base
from lms.models import book, borrowing_record, user  # noqa: F401
from lms.models.user import UserRole
from lms.schemas.user import UserCreate
from lms.services import user_service

log = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=bind or engine)


def seed_initial_data(db: Session, settings: Optional[Settings] = None) -> list[str]:
    """
    Create the default librarian and member accounts if they are missing.

    Idempotent: an account whose email already exists is left alone.
    Returns the emails that were created on this run.
    """
    settings = settings or get_settings()
    defaults = [
        (
            UserCreate(
                email=settings.default_librarian_email,
                password=settings.default_librarian_password,
                first_name="System",
                last_name="Librarian",
            ),
            UserRole.LIBRARIAN,
        ),
        (
            UserCreate(
                email=settings.default_member_email,
                password=settings.default_member_password,
                first_name="John",
                last_name="Member",
            ),
            UserRole.MEMBER,
        ),
    ]

    created: list[str] = []
    for payload, role in defaults:
        if user_service.find_by_email(db, payload.email) is not None:
            continue
        user_service.register_user(db, payload, role, settings=settings)
        created.append(payload.email)
        log.info("default_account_created", email=payload.email, role=role.value)
    return created
