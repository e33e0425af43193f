"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.config import Settings
from campus_payroll.database import init_db
from campus_payroll.events import EventEmitter, EventLog
from campus_payroll.services import PayrollLifecycleManager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_emitter(request: Request) -> EventEmitter:
    return request.app.state.emitter


def get_event_log(request: Request) -> EventLog:
    return request.app.state.event_log


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Emitter = Annotated[EventEmitter, Depends(get_emitter)]
Notifications = Annotated[EventLog, Depends(get_event_log)]


def get_lifecycle_manager(
    db: DbSession, settings: AppSettings, emitter: Emitter
) -> PayrollLifecycleManager:
    """Payroll lifecycle manager bound to the request's session."""
    return PayrollLifecycleManager(db, emitter=emitter, settings=settings)


LifecycleManager = Annotated[PayrollLifecycleManager, Depends(get_lifecycle_manager)]
