"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_payroll import __version__
from campus_payroll.api.routes import (
    attendance_router,
    employees_router,
    health_router,
    payroll_router,
)
from campus_payroll.calculators.types import PayrollValidationError
from campus_payroll.config import Settings, get_settings
from campus_payroll.database import create_schema, dispose_db
from campus_payroll.events import EventEmitter, EventLog
from campus_payroll.services import (
    EmployeeNotFoundError,
    InvalidTransitionError,
    PayrollRecordNotFoundError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Campus Payroll API",
        description="Attendance-based monthly payroll for staff and lecturers",
        version=__version__,
        lifespan=lifespan,
    )

    emitter = EventEmitter()
    event_log = EventLog()
    emitter.on_all(event_log)

    app.state.settings = settings
    app.state.emitter = emitter
    app.state.event_log = event_log

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollValidationError)
    async def validation_exception_handler(
        request: Request, exc: PayrollValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc),
                "code": "VALIDATION_ERROR",
                "field": exc.field_name,
            },
        )

    @app.exception_handler(PayrollRecordNotFoundError)
    @app.exception_handler(EmployeeNotFoundError)
    async def not_found_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "NOT_FOUND"},
        )

    @app.exception_handler(InvalidTransitionError)
    async def transition_exception_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "INVALID_TRANSITION"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(attendance_router, prefix="/api/v1")
    app.include_router(employees_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
