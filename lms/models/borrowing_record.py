# File: lms/models/borrowing_record.py

"""
BorrowingRecord model.

Links one user to one book. Nothing in the API creates or closes these rows
yet; the services only read them to decide whether a book or a user is
"currently borrowing" (status ACTIVE or OVERDUE) before a delete.
"""

import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.models.base import Base
from lms.models.book import Book
from lms.models.user import User


class BorrowStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


OPEN_BORROW_STATUSES = (BorrowStatus.ACTIVE, BorrowStatus.OVERDUE)


class BorrowingRecord(Base):
    __tablename__ = "borrowing_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), nullable=False, index=True)

    borrow_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    fine_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    fine_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    renewal_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[BorrowStatus] = mapped_column(
        Enum(BorrowStatus, name="borrow_status"),
        nullable=False,
        default=BorrowStatus.ACTIVE,
    )

    user: Mapped[User] = relationship(User)
    book: Mapped[Book] = relationship(Book)
