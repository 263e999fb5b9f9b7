"""
Job-related API schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt

from campusgig.config.settings import settings
from campusgig.domain.value_objects.job_sort import JobSort
from campusgig.domain.value_objects.job_status import JobStatus

from .common import TimestampMixin


class JobCreateRequest(BaseModel):
    """Job creation request schema."""

    title: str = Field(..., max_length=settings.JOB_TITLE_MAX_LENGTH)
    price: StrictInt = Field(..., description="Price in currency minor units")
    description: str = ""
    urgency: Optional[str] = Field(None, description="e.g. ASAP, Today, 3 days")
    location: Optional[str] = None
    category: Optional[str] = None


class AssignHelperRequest(BaseModel):
    """Assignment request; the helper defaults to the caller."""

    helper_id: Optional[UUID] = None


class JobResponse(TimestampMixin):
    """Job response schema."""

    id: UUID
    title: str
    description: str
    price: int
    urgency: str
    location: str
    category: str
    status: JobStatus = Field(..., description="Current job status")
    poster_id: UUID
    assigned_to: Optional[UUID] = None
    completed_at: Optional[datetime] = Field(
        None, description="Job completion timestamp"
    )


class JobListItemResponse(JobResponse):
    """Job in a my-jobs or my-gigs listing."""

    has_rated: bool = Field(
        False, description="Whether the listing owner already rated this job"
    )


class JobSearchParams(BaseModel):
    """Query parameters of job search."""

    query: Optional[str] = None
    category: Optional[str] = None
    urgency: Optional[str] = None
    location: Optional[str] = None
    status: Optional[JobStatus] = JobStatus.OPEN
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    sort_by: JobSort = JobSort.NEWEST
    limit: int = Field(100, ge=1, le=500)
