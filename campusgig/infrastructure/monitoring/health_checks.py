"""
Health check implementations for the application.
"""

import asyncio
from typing import Any, Dict

from campusgig.config.logging import get_logger
from campusgig.infrastructure.database.connection import Database

logger = get_logger(__name__)


class HealthChecker:
    """Health checker for application components."""

    def __init__(self, database: Database, timeout: float = 5.0):
        self.database = database
        self.timeout = timeout
        self.checks = {
            "database": self._check_database,
        }

    async def run_health_checks(self) -> Dict[str, Any]:
        """Run all health checks."""
        results = {}

        for check_name, check_func in self.checks.items():
            try:
                results[check_name] = await asyncio.wait_for(
                    check_func(), timeout=self.timeout
                )
            except Exception as e:
                logger.error("Health check failed", check_name=check_name, error=str(e))
                results[check_name] = {"status": "error", "error": str(e)}

        return results

    async def _check_database(self) -> Dict[str, Any]:
        """Check database health."""
        return await self.database.health()

    async def check_readiness(self) -> bool:
        """Whether every component reports healthy."""
        results = await self.run_health_checks()
        return all(result.get("status") == "healthy" for result in results.values())

    async def check_all_components(self) -> Dict[str, Any]:
        results = await self.run_health_checks()
        overall = (
            "healthy"
            if all(result.get("status") == "healthy" for result in results.values())
            else "unhealthy"
        )
        return {"status": overall, "components": results}
