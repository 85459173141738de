# File: lms/services/user_service.py

"""
User / member administration.

Membership rules:
  - registration starts a one-year membership
  - extending adds N years to the current expiry, or to today when the
    membership has already lapsed
  - a membership is valid while the expiry is strictly after today and the
    account is enabled

Member-scoped operations (``*_member``) treat a user whose role is not
MEMBER exactly like a missing user.
"""

from datetime import MAXYEAR, MINYEAR, date
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from lms.core.config import Settings
from lms.core.errors import BusinessRuleError, NotFoundError
from lms.core.logging import get_logger
from lms.core.security import hash_password
from lms.models.borrowing_record import OPEN_BORROW_STATUSES, BorrowingRecord
from lms.models.user import User, UserRole
from lms.schemas.user import UserCreate, UserUpdate

log = get_logger(__name__)

MEMBERSHIP_TERM_YEARS = 1


def add_years(d: date, years: int) -> date:
    """Calendar-year arithmetic; Feb 29 falls back to Feb 28 in non-leap years."""
    year = d.year + years
    if not MINYEAR <= year <= MAXYEAR:
        raise BusinessRuleError(
            f"Resulting year {year} is outside the supported range {MINYEAR}..{MAXYEAR}"
        )
    try:
        return d.replace(year=year)
    except ValueError:
        return d.replace(year=year, day=28)


# -----------------------------
# Lookups
# -----------------------------

def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email)).first()


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id)))


def list_by_role(db: Session, role: UserRole) -> list[User]:
    return list(db.scalars(select(User).where(User.role == role).order_by(User.id)))


def list_members(db: Session) -> list[User]:
    return list_by_role(db, UserRole.MEMBER)


def list_librarians(db: Session) -> list[User]:
    return list_by_role(db, UserRole.LIBRARIAN)


def search_by_name(db: Session, name: str, role: Optional[UserRole] = None) -> list[User]:
    """Case-insensitive substring match on first or last name."""
    pattern = f"%{name.strip().lower()}%"
    stmt = select(User).where(
        or_(
            func.lower(User.first_name).like(pattern),
            func.lower(User.last_name).like(pattern),
        )
    )
    if role is not None:
        stmt = stmt.where(User.role == role)
    return list(db.scalars(stmt.order_by(User.id)))


def get_member(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None or user.role != UserRole.MEMBER:
        raise NotFoundError(f"Member not found with id: {user_id}")
    return user


def find_member(db: Session, user_id: int) -> Optional[User]:
    user = db.get(User, user_id)
    if user is None or user.role != UserRole.MEMBER:
        return None
    return user


# -----------------------------
# Registration / updates
# -----------------------------

def register_user(
    db: Session,
    payload: UserCreate,
    role: UserRole,
    *,
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> User:
    if find_by_email(db, payload.email) is not None:
        raise BusinessRuleError(f"Email already exists: {payload.email}")

    today = today or date.today()
    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password, settings=settings),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone_number=payload.phone_number,
        address=payload.address,
        role=role,
        registration_date=today,
        membership_expiry=add_years(today, MEMBERSHIP_TERM_YEARS),
        enabled=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("user_registered", user_id=user.id, role=role.value)
    return user


def update_user(db: Session, user_id: int, changes: UserUpdate) -> User:
    user = get_user(db, user_id)
    return _apply_update(db, user, changes)


def update_member(db: Session, user_id: int, changes: UserUpdate) -> User:
    user = get_member(db, user_id)
    return _apply_update(db, user, changes)


def _apply_update(db: Session, user: User, changes: UserUpdate) -> User:
    data = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}

    new_email = data.pop("email", None)
    if new_email is not None and new_email != user.email:
        if find_by_email(db, new_email) is not None:
            raise BusinessRuleError(f"Email already exists: {new_email}")
        user.email = new_email

    for field, value in data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    log.info("user_updated", user_id=user.id, fields=sorted(changes.model_fields_set))
    return user


# -----------------------------
# Deletion
# -----------------------------

def has_active_borrowings(db: Session, user_id: int) -> bool:
    stmt = select(func.count(BorrowingRecord.id)).where(
        BorrowingRecord.user_id == user_id,
        BorrowingRecord.status.in_(OPEN_BORROW_STATUSES),
    )
    return db.scalar(stmt) > 0


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    _delete(db, user)


def delete_member(db: Session, user_id: int) -> None:
    user = get_member(db, user_id)
    _delete(db, user)


def _delete(db: Session, user: User) -> None:
    if has_active_borrowings(db, user.id):
        raise BusinessRuleError("Cannot delete user with active borrowings")

    # Closed borrowing history goes with the account.
    db.query(BorrowingRecord).filter(BorrowingRecord.user_id == user.id).delete(
        synchronize_session=False
    )
    db.delete(user)
    db.commit()
    log.info("user_deleted", user_id=user.id)


# -----------------------------
# Membership
# -----------------------------

def extend_membership(
    db: Session,
    user_id: int,
    years: int,
    *,
    today: Optional[date] = None,
) -> User:
    user = get_user(db, user_id)
    today = today or date.today()

    current = user.membership_expiry
    base = current if current is not None and current > today else today
    user.membership_expiry = add_years(base, years)
    db.commit()
    db.refresh(user)
    log.info(
        "membership_extended",
        user_id=user.id,
        years=years,
        membership_expiry=user.membership_expiry.isoformat(),
    )
    return user


def membership_valid(user: User, *, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return (
        user.membership_expiry is not None
        and user.membership_expiry > today
        and bool(user.enabled)
    )


def is_membership_valid(db: Session, user_id: int, *, today: Optional[date] = None) -> bool:
    return membership_valid(get_user(db, user_id), today=today)


def disable_user(db: Session, user_id: int) -> User:
    return _set_enabled(db, get_user(db, user_id), False)


def enable_user(db: Session, user_id: int) -> User:
    return _set_enabled(db, get_user(db, user_id), True)


def _set_enabled(db: Session, user: User, enabled: bool) -> User:
    user.enabled = enabled
    db.commit()
    db.refresh(user)
    log.info("user_enabled" if enabled else "user_disabled", user_id=user.id)
    return user
