# File: lms/api/routes/routes_librarian.py

"""
Member administration for librarians.

The whole router sits behind the LIBRARIAN rule of the access policy.
Any id that does not belong to a MEMBER answers 404, even when the user
exists (e.g. another librarian).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from lms.api.deps import get_app_settings, get_db
from lms.core.config import Settings
from lms.models.user import UserRole
from lms.schemas.user import MembershipStatus, UserCreate, UserRead, UserUpdate
from lms.services import user_service

router = APIRouter()


@router.post("/members", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_member(
    payload: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return user_service.register_user(db, payload, UserRole.MEMBER, settings=settings)


@router.get("/members", response_model=list[UserRead])
def list_members(db: Session = Depends(get_db)):
    return user_service.list_members(db)


@router.get("/members/search", response_model=list[UserRead])
def search_members(
    name: Optional[str] = None,
    member_id: Optional[int] = Query(default=None, alias="id"),
    db: Session = Depends(get_db),
):
    """
    ``id`` wins over ``name``; with neither, every member is returned.
    """
    if member_id is not None:
        member = user_service.find_member(db, member_id)
        return [member] if member is not None else []
    if name is not None and name.strip():
        return user_service.search_by_name(db, name, UserRole.MEMBER)
    return user_service.list_members(db)


@router.get("/members/{member_id}", response_model=UserRead)
def get_member(member_id: int, db: Session = Depends(get_db)):
    return user_service.get_member(db, member_id)


@router.put("/members/{member_id}", response_model=UserRead)
def update_member(member_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    return user_service.update_member(db, member_id, payload)


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(member_id: int, db: Session = Depends(get_db)):
    user_service.delete_member(db, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/members/{member_id}/extend-membership", response_model=UserRead)
def extend_membership(
    member_id: int,
    years: int = Query(default=1),
    db: Session = Depends(get_db),
):
    user_service.get_member(db, member_id)
    return user_service.extend_membership(db, member_id, years)


@router.get("/members/{member_id}/membership-status", response_model=MembershipStatus)
def membership_status(member_id: int, db: Session = Depends(get_db)):
    member = user_service.get_member(db, member_id)
    return MembershipStatus(
        valid=user_service.membership_valid(member),
        expiry_date=member.membership_expiry,
    )


@router.post("/members/{member_id}/disable", response_model=UserRead)
def disable_member(member_id: int, db: Session = Depends(get_db)):
    user_service.get_member(db, member_id)
    return user_service.disable_user(db, member_id)


@router.post("/members/{member_id}/enable", response_model=UserRead)
def enable_member(member_id: int, db: Session = Depends(get_db)):
    user_service.get_member(db, member_id)
    return user_service.enable_user(db, member_id)
