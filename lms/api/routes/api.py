from fastapi import APIRouter

from lms.api.routes.routes_auth import router as auth_router
from lms.api.routes.routes_books import router as books_router
from lms.api.routes.routes_librarian import router as librarian_router
from lms.api.routes.routes_users import member_router, users_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(books_router, prefix="/books", tags=["books"])
api_router.include_router(librarian_router, prefix="/librarian", tags=["librarian"])
api_router.include_router(member_router, prefix="/member", tags=["member"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
