# File: lms/api/access_filter.py

"""
Request authentication and route access policy.

Every request passes through ``AccessFilterMiddleware`` before routing:

  1. A ``Authorization: Bearer <token>`` header, if present and valid, is
     resolved to the user row and stored on ``request.state.user`` as an
     ``AuthenticatedUser``. A missing or bad token just leaves the request
     anonymous.
  2. The path/method is looked up in the policy table (first match wins,
     default AUTHENTICATED) and the request is rejected with 401 / 403 when
     the caller does not satisfy it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from fastapi import Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from lms.core.errors import error_response
from lms.core.logging import get_logger
from lms.core.security import InvalidTokenError, decode_access_token
from lms.models.user import User, UserRole

log = get_logger("access_filter")

READ_METHODS = frozenset({"GET", "HEAD"})
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class Access(str, Enum):
    PUBLIC = "PUBLIC"
    AUTHENTICATED = "AUTHENTICATED"
    LIBRARIAN = "LIBRARIAN"
    MEMBER = "MEMBER"

    @property
    def required_role(self) -> Optional[UserRole]:
        if self is Access.LIBRARIAN:
            return UserRole.LIBRARIAN
        if self is Access.MEMBER:
            return UserRole.MEMBER
        return None


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    email: str
    role: UserRole


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    access: Access
    methods: Optional[frozenset[str]] = None  # None = any method

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method not in self.methods:
            return False
        return path == self.prefix or path.startswith(self.prefix.rstrip("/") + "/")


def build_route_policy(api_prefix: str) -> tuple[RouteRule, ...]:
    return (
        RouteRule(f"{api_prefix}/auth", Access.PUBLIC),
        RouteRule(f"{api_prefix}/books", Access.PUBLIC, READ_METHODS),
        RouteRule(f"{api_prefix}/books", Access.LIBRARIAN, WRITE_METHODS),
        RouteRule(f"{api_prefix}/librarian", Access.LIBRARIAN),
        RouteRule(f"{api_prefix}/member", Access.MEMBER),
        RouteRule("/healthz", Access.PUBLIC),
        RouteRule("/docs", Access.PUBLIC),
        RouteRule("/redoc", Access.PUBLIC),
        RouteRule("/openapi.json", Access.PUBLIC),
    )


def resolve_access(rules: Sequence[RouteRule], method: str, path: str) -> Access:
    for rule in rules:
        if rule.matches(method.upper(), path):
            return rule.access
    return Access.AUTHENTICATED


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization")
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def load_principal(session_factory: Callable[[], Session], user_id: int) -> Optional[AuthenticatedUser]:
    db = session_factory()
    try:
        user = db.get(User, user_id)
        if user is None:
            return None
        return AuthenticatedUser(id=user.id, email=user.email, role=user.role)
    finally:
        db.close()


class AccessFilterMiddleware(BaseHTTPMiddleware):
    """
    Must be added *before* CORSMiddleware so CORS wraps auth failures too.
    """

    def __init__(self, app, *, rules: Sequence[RouteRule]):
        super().__init__(app)
        self._rules = tuple(rules)

    async def authenticate(self, request: Request) -> Optional[AuthenticatedUser]:
        token = bearer_token(request)
        if token is None:
            return None

        settings = request.app.state.settings
        try:
            user_id = decode_access_token(token, settings=settings)
        except InvalidTokenError as exc:
            log.info("token_rejected", path=request.url.path, reason=str(exc))
            return None

        principal = await run_in_threadpool(
            load_principal, request.app.state.session_factory, user_id
        )
        if principal is None:
            log.info("token_rejected", path=request.url.path, reason="unknown user")
        return principal

    async def dispatch(self, request: Request, call_next):
        # Let CORS preflight through without auth.
        if request.method.upper() == "OPTIONS":
            return await call_next(request)

        principal = await self.authenticate(request)
        request.state.user = principal

        path = request.url.path
        access = resolve_access(self._rules, request.method, path)

        if access is not Access.PUBLIC and principal is None:
            log.info("access_denied", status_code=401, method=request.method, path=path)
            return error_response(
                request,
                status_code=401,
                message="Full authentication is required to access this resource",
                headers={"WWW-Authenticate": "Bearer"},
            )

        required = access.required_role
        if required is not None and principal.role != required:
            log.info(
                "access_denied",
                status_code=403,
                method=request.method,
                path=path,
                user_id=principal.id,
                role=principal.role.value,
            )
            return error_response(
                request,
                status_code=403,
                message=f"Access denied: {required.display_name} role required",
            )

        return await call_next(request)
