"""Rating API endpoints."""

from fastapi import APIRouter, status

from campusgig.api.dependencies import CurrentUserDep, RatingLedgerDep
from campusgig.api.schemas.rating import RatingCreateRequest, RatingResponse
from campusgig.application.services.rating_ledger import CreateRatingRequest

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
async def create_rating(
    rating_data: RatingCreateRequest,
    user_id: CurrentUserDep,
    rating_ledger: RatingLedgerDep,
):
    """Rate the other party of a completed job as the caller."""
    rating = await rating_ledger.create_rating(
        CreateRatingRequest(
            job_id=rating_data.job_id,
            rater_id=user_id,
            rated_user_id=rating_data.rated_user_id,
            rating_type=rating_data.rating_type,
            value=rating_data.value,
            review=rating_data.review,
        )
    )
    return RatingResponse.model_validate(rating)
