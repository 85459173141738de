# File: lms/api/routes/routes_users.py

"""
Endpoints about the caller's own account.

``/users/me`` needs any authenticated user, ``/member/profile`` a MEMBER.
"""

from fastapi import APIRouter, Depends

from lms.api.deps import get_current_user
from lms.models.user import User
from lms.schemas.user import MemberProfile, UserRead
from lms.services import user_service

users_router = APIRouter()
member_router = APIRouter()


@users_router.get("/me", response_model=UserRead, summary="Current user")
def read_me(user: User = Depends(get_current_user)):
    return user


@member_router.get("/profile", response_model=MemberProfile, summary="Member profile and membership state")
def member_profile(user: User = Depends(get_current_user)):
    return MemberProfile(
        **UserRead.model_validate(user).model_dump(),
        membership_valid=user_service.membership_valid(user),
    )
