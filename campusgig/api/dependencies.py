"""
FastAPI dependency injection container.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.job_store import JobStore
from campusgig.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from campusgig.application.services.profile_service import ProfileService
from campusgig.application.services.rating_ledger import RatingLedger
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.monitoring.health_checks import HealthChecker


# Store handle
def get_database(request: Request) -> Database:
    """Get the process-wide database handle."""
    return request.app.state.database


def get_invalidator(request: Request) -> CacheInvalidator:
    return request.app.state.invalidator


# Authentication
async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> UUID:
    """Authenticated user id, set by the auth proxy in front of the API."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )


# Service Dependencies
async def get_notification_dispatcher(
    database: Database = Depends(get_database),
    invalidator: CacheInvalidator = Depends(get_invalidator),
) -> NotificationDispatcher:
    """Get notification dispatcher instance."""
    return NotificationDispatcher(database, invalidator)


async def get_job_store(
    database: Database = Depends(get_database),
    invalidator: CacheInvalidator = Depends(get_invalidator),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> JobStore:
    """Get job store instance."""
    return JobStore(database, notifications, invalidator)


async def get_rating_ledger(
    database: Database = Depends(get_database),
    invalidator: CacheInvalidator = Depends(get_invalidator),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> RatingLedger:
    """Get rating ledger instance."""
    return RatingLedger(database, notifications, invalidator)


async def get_profile_service(
    database: Database = Depends(get_database),
    invalidator: CacheInvalidator = Depends(get_invalidator),
) -> ProfileService:
    return ProfileService(database, invalidator)


async def get_health_checker(
    request: Request,
    database: Database = Depends(get_database),
) -> HealthChecker:
    """Get health checker instance."""
    return HealthChecker(
        database, timeout=request.app.state.settings.HEALTH_CHECK_TIMEOUT
    )


# Type aliases for cleaner dependency injection
CurrentUserDep = Annotated[UUID, Depends(get_current_user_id)]
DatabaseDep = Annotated[Database, Depends(get_database)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
RatingLedgerDep = Annotated[RatingLedger, Depends(get_rating_ledger)]
NotificationDispatcherDep = Annotated[
    NotificationDispatcher, Depends(get_notification_dispatcher)
]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
HealthCheckerDep = Annotated[HealthChecker, Depends(get_health_checker)]
