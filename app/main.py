"""FastAPI application factory for the Forms Service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_config
from app.db.base import get_engine
from app.db.migrations_runner import apply_migrations
from app.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from app.http.request_id import RequestIdMiddleware
from app.logging_setup import configure_logging
from app.logic.errors import FormsServiceError
from app.middleware.cors import apply_cors
from app.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> dict:
    try:
        with get_engine().connect() as conn:
            conn.execute(sql_text("SELECT 1"))
        return {"status": "ok", "db": True}
    except SQLAlchemyError as e:
        logger.error("Health DB check failed", exc_info=True)
        return {"status": "degraded", "db": False, "reason": str(e)}


@asynccontextmanager
async def _lifespan(app: FastAPI):
    cfg = get_config()
    if cfg.database.auto_apply_migrations:
        try:
            applied = apply_migrations(get_engine())
            logger.info("startup_migrations_applied", extra={"applied": applied})
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
    else:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
    yield


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    cfg = get_config()
    app = FastAPI(title="Forms Service", lifespan=_lifespan)

    app.add_exception_handler(FormsServiceError, handle_domain_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=cfg.cors.origins)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return _health_check()

    return app


__all__ = ["create_app"]
