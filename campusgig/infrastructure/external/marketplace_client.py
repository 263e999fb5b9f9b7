"""
HTTP client for the marketplace API.

Transport failures surface as NetworkError and error payloads are rebuilt
into the matching domain exception. Writes are never retried.
"""

import time
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
import structlog

from campusgig.api.schemas.job import JobListItemResponse, JobResponse
from campusgig.api.schemas.notification import NotificationResponse
from campusgig.api.schemas.profile import ProfileResponse
from campusgig.api.schemas.rating import RatingResponse, RatingStatsResponse
from campusgig.config.settings import Settings, settings
from campusgig.domain.exceptions import ERROR_TYPES
from campusgig.domain.exceptions.base import MarketplaceError
from campusgig.domain.exceptions.network_error import NetworkError

logger = structlog.get_logger()


def error_from_response(response: httpx.Response) -> MarketplaceError:
    """Rebuild the typed error carried by an error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = {}

    message = payload.get("message") or response.reason_phrase
    error_class = ERROR_TYPES.get(payload.get("type"))
    if error_class is not None:
        return error_class.from_message(str(message))

    if response.status_code >= 500:
        return NetworkError(f"Server error {response.status_code}: {message}")
    return MarketplaceError(f"HTTP {response.status_code}: {message}")


class MarketplaceClient:
    """Marketplace API client acting as one authenticated user."""

    def __init__(
        self,
        user_id: UUID,
        base_url: Optional[str] = None,
        app_settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = app_settings or settings
        self.user_id = user_id
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.timeout = self.settings.HTTP_TIMEOUT
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def open(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=f"{self.base_url}{self.settings.API_PREFIX}",
                timeout=self.timeout,
                transport=self.transport,
                headers={self.settings.USER_ID_HEADER: str(self.user_id)},
            )

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        if self.client is None:
            await self.open()

        start_time = time.time()
        try:
            response = await self.client.request(
                method, path, json=data, params=params
            )
        except httpx.TransportError as e:
            logger.warning(
                "HTTP request failed",
                method=method,
                path=path,
                error=str(e),
                response_time_ms=(time.time() - start_time) * 1000,
            )
            raise NetworkError(f"{method} {path} failed: {e}") from e

        logger.debug(
            "HTTP request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            response_time_ms=(time.time() - start_time) * 1000,
        )

        if response.is_error:
            raise error_from_response(response)
        if response.status_code == 204:
            return None
        return response.json()

    # Jobs
    async def create_job(
        self,
        title: str,
        price: int,
        description: str = "",
        urgency: Optional[str] = None,
        location: Optional[str] = None,
        category: Optional[str] = None,
    ) -> JobResponse:
        body = {
            "title": title,
            "price": price,
            "description": description,
            "urgency": urgency,
            "location": location,
            "category": category,
        }
        return JobResponse.model_validate(await self.request("POST", "/jobs", body))

    async def get_job(self, job_id: UUID) -> JobResponse:
        return JobResponse.model_validate(await self.request("GET", f"/jobs/{job_id}"))

    async def assign_helper(
        self, job_id: UUID, helper_id: Optional[UUID] = None
    ) -> JobResponse:
        """Accept a job as the client's user, or assign helper_id to an own job."""
        body = {"helper_id": str(helper_id or self.user_id)}
        data = await self.request("POST", f"/jobs/{job_id}/assign", body)
        return JobResponse.model_validate(data)

    async def complete_job(self, job_id: UUID) -> JobResponse:
        data = await self.request("POST", f"/jobs/{job_id}/complete")
        return JobResponse.model_validate(data)

    async def cancel_job(self, job_id: UUID) -> JobResponse:
        data = await self.request("POST", f"/jobs/{job_id}/cancel")
        return JobResponse.model_validate(data)

    async def delete_job(self, job_id: UUID) -> None:
        await self.request("DELETE", f"/jobs/{job_id}")

    async def list_feed(self) -> List[JobResponse]:
        data = await self.request("GET", "/jobs/feed")
        return [JobResponse.model_validate(item) for item in data]

    async def search_jobs(self, **filters: Any) -> List[JobResponse]:
        params = {key: value for key, value in filters.items() if value is not None}
        data = await self.request("GET", "/jobs/search", params=params)
        return [JobResponse.model_validate(item) for item in data]

    async def list_my_jobs(
        self, user_id: Optional[UUID] = None
    ) -> List[JobListItemResponse]:
        data = await self.request("GET", f"/users/{user_id or self.user_id}/jobs")
        return [JobListItemResponse.model_validate(item) for item in data]

    async def list_my_gigs(
        self, user_id: Optional[UUID] = None
    ) -> List[JobListItemResponse]:
        data = await self.request("GET", f"/users/{user_id or self.user_id}/gigs")
        return [JobListItemResponse.model_validate(item) for item in data]

    # Ratings
    async def create_rating(
        self,
        job_id: UUID,
        rated_user_id: UUID,
        rating_type: str,
        value: int,
        review: Optional[str] = None,
    ) -> RatingResponse:
        body = {
            "job_id": str(job_id),
            "rated_user_id": str(rated_user_id),
            "rating_type": rating_type,
            "value": value,
            "review": review,
        }
        data = await self.request("POST", "/ratings", body)
        return RatingResponse.model_validate(data)

    async def list_ratings(self, user_id: UUID) -> List[RatingResponse]:
        data = await self.request("GET", f"/users/{user_id}/ratings")
        return [RatingResponse.model_validate(item) for item in data]

    # Profiles
    async def register_profile(
        self, email: str, display_name: Optional[str] = None
    ) -> ProfileResponse:
        body = {"email": email, "display_name": display_name}
        return ProfileResponse.model_validate(
            await self.request("PUT", "/profiles/me", body)
        )

    async def update_display_name(self, display_name: str) -> ProfileResponse:
        data = await self.request(
            "PATCH", "/profiles/me", {"display_name": display_name}
        )
        return ProfileResponse.model_validate(data)

    async def get_profile(self, user_id: Optional[UUID] = None) -> ProfileResponse:
        data = await self.request("GET", f"/profiles/{user_id or self.user_id}")
        return ProfileResponse.model_validate(data)

    async def get_rating_stats(self, user_id: UUID) -> RatingStatsResponse:
        data = await self.request("GET", f"/profiles/{user_id}/stats")
        return RatingStatsResponse.model_validate(data)

    # Notifications
    async def list_notifications(
        self, unread_only: bool = False
    ) -> List[NotificationResponse]:
        data = await self.request(
            "GET", "/notifications", params={"unread_only": unread_only}
        )
        return [NotificationResponse.model_validate(item) for item in data]

    async def unread_count(self) -> int:
        data = await self.request("GET", "/notifications/unread-count")
        return data["count"]

    async def mark_notification_read(
        self, notification_id: UUID
    ) -> NotificationResponse:
        data = await self.request("POST", f"/notifications/{notification_id}/read")
        return NotificationResponse.model_validate(data)

    async def mark_all_notifications_read(self) -> int:
        data = await self.request("POST", "/notifications/read-all")
        return data["count"]
