# File: lms/schemas/book.py

from typing import Optional

from pydantic import Field

from lms.models.book import BookStatus
from lms.schemas.base import CamelModel, NonBlankStr


class BookBase(CamelModel):
    isbn: NonBlankStr
    title: NonBlankStr
    author: NonBlankStr
    category: Optional[str] = None
    publication_year: int


class BookCreate(BookBase):
    total_copies: int = Field(ge=0)
    # Defaults to total_copies when omitted
    available_copies: Optional[int] = Field(default=None, ge=0)


class BookUpdate(BookBase):
    # Omit to keep the current copy counts
    total_copies: Optional[int] = Field(default=None, ge=0)


class BookRead(BookBase):
    id: int
    total_copies: int
    available_copies: int
    status: BookStatus
