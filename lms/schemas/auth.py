# File: lms/schemas/auth.py

from pydantic import EmailStr

from lms.schemas.base import CamelModel, PasswordStr
from lms.schemas.user import UserRead


class LoginRequest(CamelModel):
    # Same normalisation as registration, so the stored address matches.
    email: EmailStr
    password: PasswordStr


class LoginResponse(CamelModel):
    token: str
    token_type: str = "Bearer"
    user: UserRead
