"""
Profile-related API schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileRegisterRequest(BaseModel):
    """First sign-in registration of the caller's profile."""

    email: str = Field(..., min_length=3, max_length=255)
    display_name: Optional[str] = None


class DisplayNameUpdateRequest(BaseModel):
    display_name: str


class ProfileResponse(BaseModel):
    """Profile response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: Optional[str] = None
    name: str = Field(..., description="Display name or registration number")
    avatar_url: Optional[str] = None
    average_rating: float
    total_ratings: int
    tasks_completed: int
    created_at: datetime
