#!/usr/bin/env python3

"""
Main application entry point for the Shadow Ledger service.

Architecture: FastAPI application over an explicit database Store.
Key Features: Lifecycle management, database health checks, error handling, CORS configuration.
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.auth import router as auth_router
from app.api.books import router as books_router
from app.api.entries import router as entries_router
from app.api.http import router as http_router
from app.config import settings
from app.db import Store
from app.errors import LedgerError
from app.schemas import ErrorResponse
from app.utils.logger import setup_logger

logger = setup_logger("main")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def create_app(database_url: str | None = None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...")
        store = Store(database_url or settings.app_database_url, echo=settings.database_echo)
        try:
            logger.info("Initializing database...")
            await store.init()

            logger.info("Checking database connectivity...")
            await store.check_connection()
        except Exception as e:
            logger.critical(f"Startup error: {e}")
            await store.close()
            raise SystemExit(f"Startup failed: {e}") from e

        app.state.store = store
        logger.info("Shadow Ledger API startup successful.")

        yield

        logger.info("Shadow Ledger API shutdown...")
        await store.close()
        logger.info("Shutdown complete.")

    app = FastAPI(title="Shadow Ledger API", lifespan=lifespan)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=_validation_message(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    app.include_router(http_router)
    app.include_router(auth_router)
    app.include_router(books_router)
    app.include_router(entries_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


app = create_app()


def main():
    port = int(settings.server_port)
    host = settings.server_host

    logger.info(f"Starting Shadow Ledger API server on {host}:{port}")

    try:
        uvicorn.run(app, host=host, port=port, workers=settings.server_workers)
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
