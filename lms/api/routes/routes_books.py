# File: lms/api/routes/routes_books.py

"""
Book catalog endpoints.

Reads are public; POST / PUT / DELETE require the LIBRARIAN role
(enforced by the access filter).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from lms.api.deps import get_db
from lms.schemas.book import BookCreate, BookRead, BookUpdate
from lms.services import book_service

router = APIRouter()


@router.get("", response_model=list[BookRead], summary="List all books")
def list_books(db: Session = Depends(get_db)):
    return book_service.list_books(db)


@router.get("/search", response_model=list[BookRead], summary="Search books")
def search_books(
    title: Optional[str] = None,
    author: Optional[str] = None,
    category: Optional[str] = None,
    isbn: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return book_service.search_books(
        db, title=title, author=author, category=category, isbn=isbn
    )


@router.get("/available", response_model=list[BookRead], summary="List books with free copies")
def list_available_books(db: Session = Depends(get_db)):
    return book_service.list_available_books(db)


@router.get("/{book_id}", response_model=BookRead, summary="Get a book")
def get_book(book_id: int, db: Session = Depends(get_db)):
    return book_service.get_book(db, book_id)


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED, summary="Add a book")
def add_book(payload: BookCreate, db: Session = Depends(get_db)):
    return book_service.add_book(db, payload)


@router.put("/{book_id}", response_model=BookRead, summary="Update a book")
def update_book(book_id: int, payload: BookUpdate, db: Session = Depends(get_db)):
    return book_service.update_book(db, book_id, payload)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a book")
def delete_book(book_id: int, db: Session = Depends(get_db)):
    book_service.delete_book(db, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
