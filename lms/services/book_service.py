# File: lms/services/book_service.py

"""
Book catalog operations.

Copy accounting: ``borrowed = total_copies - available_copies`` is the only
cross-field rule. ``status`` is derived from ``available_copies``:

  - on add:    AVAILABLE if any copy is available, else MAINTENANCE
  - on update: AVAILABLE if any copy is available, else BORROWED
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lms.core.errors import BusinessRuleError, NotFoundError
from lms.core.logging import get_logger
from lms.models.book import Book, BookStatus
from lms.models.borrowing_record import OPEN_BORROW_STATUSES, BorrowingRecord
from lms.schemas.book import BookCreate, BookUpdate

log = get_logger(__name__)


def derive_status(available_copies: int, *, when_empty: BookStatus) -> BookStatus:
    return BookStatus.AVAILABLE if available_copies > 0 else when_empty


def list_books(db: Session) -> list[Book]:
    return list(db.scalars(select(Book).order_by(Book.id)))


def get_book(db: Session, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError(f"Book not found with id: {book_id}")
    return book


def find_by_isbn(db: Session, isbn: str) -> Optional[Book]:
    return db.scalars(select(Book).where(Book.isbn == isbn)).first()


def search_books(
    db: Session,
    *,
    title: Optional[str] = None,
    author: Optional[str] = None,
    category: Optional[str] = None,
    isbn: Optional[str] = None,
) -> list[Book]:
    """
    Every supplied criterion must match; blank or missing ones are ignored.
    Title, author and category match case-insensitively.
    """
    stmt = select(Book)
    for column, value in (
        (Book.title, title),
        (Book.author, author),
        (Book.category, category),
    ):
        if value and value.strip():
            stmt = stmt.where(func.lower(column).like(f"%{value.strip().lower()}%"))
    if isbn and isbn.strip():
        stmt = stmt.where(Book.isbn.like(f"%{isbn.strip()}%"))
    return list(db.scalars(stmt.order_by(Book.id)))


def list_available_books(db: Session) -> list[Book]:
    stmt = (
        select(Book)
        .where(Book.status == BookStatus.AVAILABLE, Book.available_copies > 0)
        .order_by(Book.id)
    )
    return list(db.scalars(stmt))


def add_book(db: Session, payload: BookCreate) -> Book:
    if find_by_isbn(db, payload.isbn) is not None:
        raise BusinessRuleError(f"Book with ISBN already exists: {payload.isbn}")

    available = payload.total_copies if payload.available_copies is None else payload.available_copies
    if available > payload.total_copies:
        raise BusinessRuleError("Available copies cannot exceed total copies")

    book = Book(
        isbn=payload.isbn,
        title=payload.title,
        author=payload.author,
        category=payload.category,
        publication_year=payload.publication_year,
        total_copies=payload.total_copies,
        available_copies=available,
        status=derive_status(available, when_empty=BookStatus.MAINTENANCE),
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    log.info("book_added", book_id=book.id, isbn=book.isbn, total_copies=book.total_copies)
    return book


def update_book(db: Session, book_id: int, changes: BookUpdate) -> Book:
    book = get_book(db, book_id)

    if changes.isbn != book.isbn:
        other = find_by_isbn(db, changes.isbn)
        if other is not None and other.id != book.id:
            raise BusinessRuleError(f"Book with ISBN already exists: {changes.isbn}")

    # Validate before touching the row so a rejected update leaves it unchanged.
    if changes.total_copies is not None:
        borrowed = book.borrowed_copies
        if changes.total_copies < borrowed:
            raise BusinessRuleError("Cannot set total copies less than currently borrowed copies")
        book.total_copies = changes.total_copies
        book.available_copies = changes.total_copies - borrowed

    book.title = changes.title
    book.author = changes.author
    book.isbn = changes.isbn
    book.category = changes.category
    book.publication_year = changes.publication_year
    book.status = derive_status(book.available_copies, when_empty=BookStatus.BORROWED)

    db.commit()
    db.refresh(book)
    log.info("book_updated", book_id=book.id, total_copies=book.total_copies)
    return book


def is_book_borrowed(db: Session, book_id: int) -> bool:
    stmt = select(func.count(BorrowingRecord.id)).where(
        BorrowingRecord.book_id == book_id,
        BorrowingRecord.status.in_(OPEN_BORROW_STATUSES),
    )
    return db.scalar(stmt) > 0


def delete_book(db: Session, book_id: int) -> None:
    book = get_book(db, book_id)

    if is_book_borrowed(db, book_id):
        raise BusinessRuleError("Cannot delete book that is currently borrowed")

    db.query(BorrowingRecord).filter(BorrowingRecord.book_id == book_id).delete(
        synchronize_session=False
    )
    db.delete(book)
    db.commit()
    log.info("book_deleted", book_id=book_id)
