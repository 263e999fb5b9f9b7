"""
Common API schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str
    message: str
    type: str


class CountResponse(BaseModel):
    count: int


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    updated_at: Optional[datetime] = None
