# File: lms/schemas/user.py

from datetime import date
from typing import Optional

from pydantic import EmailStr

from lms.models.user import UserRole
from lms.schemas.base import CamelModel, NonBlankStr, PasswordStr


class UserBase(CamelModel):
    email: EmailStr
    first_name: NonBlankStr
    last_name: NonBlankStr
    phone_number: Optional[str] = None
    address: Optional[str] = None


class UserCreate(UserBase):
    password: PasswordStr


class UserUpdate(CamelModel):
    # Only the fields that are sent get applied.
    email: Optional[EmailStr] = None
    first_name: Optional[NonBlankStr] = None
    last_name: Optional[NonBlankStr] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None


class UserRead(UserBase):
    # No password / hash field: user responses never carry credentials.
    id: int
    role: UserRole
    registration_date: Optional[date] = None
    membership_expiry: Optional[date] = None
    enabled: bool


class MemberProfile(UserRead):
    membership_valid: bool


class MembershipStatus(CamelModel):
    valid: bool
    expiry_date: Optional[date] = None
