# File: lms/models/book.py

"""
Book model.

One row per catalog title. Copy accounting lives on the row:
``0 <= available_copies <= total_copies``. ``status`` is recomputed by the
book service whenever copy counts change and is never set by clients.
"""

import enum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lms.models.base import Base


class BookStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BORROWED = "BORROWED"
    MAINTENANCE = "MAINTENANCE"


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    isbn: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    publication_year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[BookStatus] = mapped_column(
        Enum(BookStatus, name="book_status"),
        nullable=False,
        default=BookStatus.AVAILABLE,
    )

    @property
    def borrowed_copies(self) -> int:
        return self.total_copies - self.available_copies

    def __repr__(self) -> str:
        return f"<Book {self.isbn} '{self.title}'>"
