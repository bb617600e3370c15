# app/main.py

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from app.api.v1.api import api_router
from app.core.config import Settings, get_settings
from app.core.errors import (
    AuthError,
    NotFound,
    StorageUnavailable,
    TaskTrackerError,
    Unauthenticated,
    ValidationError,
)
from app.core.logging import configure_logging
from app.db.init_db import init_db
from app.db.session import Database

logger = logging.getLogger(__name__)

EXCEPTION_MAPPING = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    NotFound: status.HTTP_404_NOT_FOUND,
    StorageUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def task_tracker_error_handler(request: Request, exc: TaskTrackerError):
    """Render a domain error. Only validation errors carry a body."""
    status_code = EXCEPTION_MAPPING.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(exc, ValidationError):
        return JSONResponse(
            status_code=status_code,
            content={"errors": [asdict(e) for e in exc.errors]},
        )
    headers = {"Retry-After": "1"} if isinstance(exc, StorageUnavailable) else None
    return Response(status_code=status_code, headers=headers)


def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or wrongly typed fields get the same 400 shape as ValidationError."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    # ---------- STORAGE ----------
    database = Database(settings.database_url, timeout_seconds=settings.db_timeout_seconds)
    init_db(database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s %s ready", settings.PROJECT_NAME, settings.VERSION)
        yield
        database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.auth_header],
    )

    # ---------- ERRORS ----------
    app.add_exception_handler(TaskTrackerError, task_tracker_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    return app


app = create_application()
