"""Per-user listing endpoints: posted jobs, gigs and received ratings."""

from typing import List
from uuid import UUID

from fastapi import APIRouter

from campusgig.api.dependencies import JobStoreDep, RatingLedgerDep
from campusgig.api.schemas.job import JobListItemResponse
from campusgig.api.schemas.rating import RatingResponse
from campusgig.domain.value_objects.rating_type import RatingType

router = APIRouter(prefix="/users", tags=["users"])


def with_rated_flags(jobs, rated_ids) -> List[JobListItemResponse]:
    return [
        JobListItemResponse.model_validate(job).model_copy(
            update={"has_rated": job.id in rated_ids}
        )
        for job in jobs
    ]


@router.get("/{user_id}/jobs", response_model=List[JobListItemResponse])
async def get_posted_jobs(
    user_id: UUID, job_store: JobStoreDep, rating_ledger: RatingLedgerDep
):
    """Jobs the user posted; has_rated tells whether they rated the helper."""
    jobs = await job_store.list_posted_by(user_id)
    rated = await rating_ledger.rated_job_ids(user_id, RatingType.POSTER_TO_HELPER)
    return with_rated_flags(jobs, rated)


@router.get("/{user_id}/gigs", response_model=List[JobListItemResponse])
async def get_gigs(
    user_id: UUID, job_store: JobStoreDep, rating_ledger: RatingLedgerDep
):
    """Jobs the user works on; has_rated tells whether they rated the poster."""
    jobs = await job_store.list_assigned_to(user_id)
    rated = await rating_ledger.rated_job_ids(user_id, RatingType.HELPER_TO_POSTER)
    return with_rated_flags(jobs, rated)


@router.get("/{user_id}/ratings", response_model=List[RatingResponse])
async def get_ratings(user_id: UUID, rating_ledger: RatingLedgerDep):
    ratings = await rating_ledger.list_ratings_for_user(user_id)
    return [RatingResponse.model_validate(rating) for rating in ratings]
