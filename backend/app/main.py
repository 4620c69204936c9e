from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.config import Settings
from app.database import create_db_engine, create_session_factory, create_tables
from app.routers import admin, health, listings
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Refuses to start without a signing secret.
        app.state.token_service = TokenService(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.jwt_expires_days),
        )
        engine = create_db_engine(settings.database_url, echo=settings.debug)
        create_tables(engine)
        app.state.session_factory = create_session_factory(engine)
        os.makedirs(settings.upload_dir, exist_ok=True)
        logger.info("%s started (env=%s)", settings.app_name, settings.env)
        yield
        engine.dispose()

    application = FastAPI(title=settings.app_name, lifespan=lifespan)
    application.state.settings = settings

    application.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[
            f"{settings.rate_max} per {settings.rate_window_seconds} seconds"
        ],
        enabled=settings.rate_limit_enabled,
    )
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(
            "[req] %s %s host=%s origin=%s",
            request.method,
            request.url.path,
            request.headers.get("host", "-"),
            request.headers.get("origin", "-"),
        )
        return await call_next(request)

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"detail": f"{field}: {message}" if field else message},
        )

    @application.exception_handler(SQLAlchemyError)
    @application.exception_handler(OSError)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    application.include_router(health.router, tags=["health"])
    application.include_router(admin.router, prefix=settings.api_prefix, tags=["admin"])
    application.include_router(
        listings.router, prefix=settings.api_prefix, tags=["listings"]
    )
    return application


app = create_app()
