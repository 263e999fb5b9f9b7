"""Profile API endpoints."""

from uuid import UUID

from fastapi import APIRouter

from campusgig.api.dependencies import (
    CurrentUserDep,
    ProfileServiceDep,
    RatingLedgerDep,
)
from campusgig.api.schemas.profile import (
    DisplayNameUpdateRequest,
    ProfileRegisterRequest,
    ProfileResponse,
)
from campusgig.api.schemas.rating import RatingStatsResponse

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.put("/me", response_model=ProfileResponse)
async def register_profile(
    profile_data: ProfileRegisterRequest,
    user_id: CurrentUserDep,
    profile_service: ProfileServiceDep,
):
    """Create the caller's profile on first sign-in; idempotent afterwards."""
    profile = await profile_service.ensure_profile(
        user_id, profile_data.email, profile_data.display_name
    )
    return ProfileResponse.model_validate(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_display_name(
    update: DisplayNameUpdateRequest,
    user_id: CurrentUserDep,
    profile_service: ProfileServiceDep,
):
    profile = await profile_service.update_display_name(user_id, update.display_name)
    return ProfileResponse.model_validate(profile)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: UUID, profile_service: ProfileServiceDep):
    return ProfileResponse.model_validate(await profile_service.get_profile(user_id))


@router.get("/{user_id}/stats", response_model=RatingStatsResponse)
async def get_rating_stats(user_id: UUID, rating_ledger: RatingLedgerDep):
    """Rating aggregate with the average rounded to one decimal."""
    stats = await rating_ledger.get_rating_stats(user_id)
    return RatingStatsResponse.model_validate(stats)
