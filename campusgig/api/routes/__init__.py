"""
API routes package.
"""

from .health import router as health_router
from .jobs import router as jobs_router
from .notifications import router as notifications_router
from .profiles import router as profiles_router
from .ratings import router as ratings_router
from .users import router as users_router

__all__ = [
    "health_router",
    "jobs_router",
    "notifications_router",
    "profiles_router",
    "ratings_router",
    "users_router",
]
