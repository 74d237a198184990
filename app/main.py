"""Dispatch — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.adapters.persistence.database import engine
from app.config import settings
from app.domain.errors import (
    DomainError,
    DuplicateLegError,
    InvalidAmountError,
    ManagedLedgerEntryError,
    NotFoundError,
    SplitNotEligibleError,
    TransferOrderCannotSplitError,
    TransientStorageError,
)
from app.infrastructure.api.routes_assignments import router as assignments_router
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_ledger import router as ledger_router
from app.infrastructure.api.routes_orders import router as orders_router
from app.infrastructure.api.routes_truckloads import router as truckloads_router

logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (NotFoundError, 404),
    (DuplicateLegError, 409),
    (TransferOrderCannotSplitError, 409),
    (SplitNotEligibleError, 409),
    (ManagedLedgerEntryError, 409),
    (InvalidAmountError, 422),
    (TransientStorageError, 503),
]


def status_for(exc: DomainError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
        content={"success": False, "error": exc.kind, "message": exc.message},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "internal_error", "message": "Internal server error"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Dispatch — Truckload Assignment Engine",
        description="Order leg assignment, transfer detection and split-load pay allocation",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")
    app.include_router(truckloads_router, prefix="/api")
    app.include_router(ledger_router, prefix="/api")

    return app


app = create_app()
