# File: lms/api/routes/routes_auth.py

"""
Auth API routes: login and self-registration.

Both are public in the access policy.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import get_app_settings, get_db
from lms.core.config import Settings
from lms.core.errors import BusinessRuleError
from lms.models.user import UserRole
from lms.schemas.auth import LoginRequest, LoginResponse
from lms.schemas.user import UserCreate, UserRead
from lms.services import auth_service, user_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse, summary="User login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Exchange email + password for a bearer token.

    Bad credentials and disabled accounts answer 400.
    """
    token, user = auth_service.login(
        db, email=payload.email, password=payload.password, settings=settings
    )
    return LoginResponse(token=token, user=UserRead.model_validate(user))


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="User registration",
)
def register(
    payload: UserCreate,
    role: str = Query(default=UserRole.MEMBER.value, description="MEMBER or LIBRARIAN"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user_role = UserRole.from_code(role)
    except ValueError as exc:
        raise BusinessRuleError(str(exc)) from exc
    return user_service.register_user(db, payload, user_role, settings=settings)
