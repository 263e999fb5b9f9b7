"""Job lifecycle API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from campusgig.api.dependencies import CurrentUserDep, JobStoreDep
from campusgig.api.schemas.job import (
    AssignHelperRequest,
    JobCreateRequest,
    JobResponse,
    JobSearchParams,
)
from campusgig.application.interfaces.repositories import JobSearchCriteria
from campusgig.application.services.job_store import CreateJobRequest
from campusgig.config.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreateRequest,
    user_id: CurrentUserDep,
    job_store: JobStoreDep,
):
    """Post a new job as the caller."""
    job = await job_store.create_job(
        user_id,
        CreateJobRequest(
            title=job_data.title,
            price=job_data.price,
            description=job_data.description,
            urgency=job_data.urgency,
            location=job_data.location,
            category=job_data.category,
        ),
    )
    return JobResponse.model_validate(job)


@router.get("/feed", response_model=List[JobResponse])
async def get_feed(
    job_store: JobStoreDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """Open and in-progress jobs, newest first."""
    jobs = await job_store.list_feed(limit=limit)
    return [JobResponse.model_validate(job) for job in jobs]


@router.get("/search", response_model=List[JobResponse])
async def search_jobs(
    params: Annotated[JobSearchParams, Query()],
    job_store: JobStoreDep,
):
    jobs = await job_store.search_jobs(JobSearchCriteria(**params.model_dump()))
    return [JobResponse.model_validate(job) for job in jobs]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: UUID, job_store: JobStoreDep):
    return JobResponse.model_validate(await job_store.get_job(job_id))


@router.post("/{job_id}/assign", response_model=JobResponse)
async def assign_helper(
    job_id: UUID,
    user_id: CurrentUserDep,
    job_store: JobStoreDep,
    body: Optional[AssignHelperRequest] = None,
):
    """Accept a job as its helper, or assign a helper to your own job."""
    helper_id = body.helper_id if body and body.helper_id else user_id
    job = await job_store.assign_helper(job_id, helper_id, caller_id=user_id)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/complete", response_model=JobResponse)
async def complete_job(job_id: UUID, user_id: CurrentUserDep, job_store: JobStoreDep):
    return JobResponse.model_validate(await job_store.complete_job(job_id, user_id))


@router.post("/{job_id}/cancel", response_model=JobResponse)
async def cancel_job(job_id: UUID, user_id: CurrentUserDep, job_store: JobStoreDep):
    return JobResponse.model_validate(await job_store.cancel_job(job_id, user_id))


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(job_id: UUID, user_id: CurrentUserDep, job_store: JobStoreDep):
    await job_store.delete_job(job_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
