# File: lms/models/user.py

"""
User model.

Librarians and members share one table and are told apart by ``role``.
The membership window runs from ``registration_date`` to
``membership_expiry``.
"""

import enum
from datetime import date

from sqlalchemy import Boolean, Date, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lms.models.base import Base


class UserRole(str, enum.Enum):
    LIBRARIAN = "LIBRARIAN"
    MEMBER = "MEMBER"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_code(cls, code: str) -> "UserRole":
        for role in cls:
            if role.value.lower() == (code or "").strip().lower():
                return role
        raise ValueError(f"Unknown role code: {code}")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.MEMBER,
    )

    registration_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    membership_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
