# lms/main.py

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session, sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from lms.api.access_filter import AccessFilterMiddleware, build_route_policy
from lms.api.routes.api import api_router
from lms.core.config import Settings, get_settings
from lms.core.errors import GENERIC_SERVER_ERROR_MESSAGE, LibraryError, error_response
from lms.core.logging import configure_logging, get_logger
from lms.db.session import SessionLocal, build_engine, build_session_factory

log = get_logger("app")


def _library_error_handler(request: Request, exc: LibraryError):
    return error_response(request, status_code=exc.status_code, message=exc.message)


def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code == 404 and detail in (None, "Not Found"):
        detail = "Route not found"
    return error_response(
        request,
        status_code=exc.status_code,
        message=detail or "Request failed",
        headers=getattr(exc, "headers", None),
    )


def _validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return error_response(
        request,
        status_code=400,
        message="Validation failed: " + "; ".join(problems),
    )


def _unhandled_exception_handler(request: Request, exc: Exception):
    # Detail stays in the server log; clients get a fixed message.
    log.exception(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return error_response(request, status_code=500, message=GENERIC_SERVER_ERROR_MESSAGE)


def create_application(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker[Session]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)

    if session_factory is None:
        if settings.database_url == get_settings().database_url:
            session_factory = SessionLocal
        else:
            session_factory = build_session_factory(build_engine(settings.database_url))

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory

    # ---------- MIDDLEWARE ----------
    # Last added is outermost: CORS wraps the access filter so 401/403
    # responses still carry CORS headers.
    app.add_middleware(
        AccessFilterMiddleware,
        rules=build_route_policy(settings.api_prefix),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    # ---------- ERROR HANDLERS ----------
    app.add_exception_handler(LibraryError, _library_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    # ---------- ROUTERS ----------
    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.api_prefix)

    log.info(
        "app_created",
        api_prefix=settings.api_prefix,
        cors_origins=settings.cors_origins,
        token_ttl_minutes=settings.access_token_expire_minutes,
    )
    return app


app = create_application()
