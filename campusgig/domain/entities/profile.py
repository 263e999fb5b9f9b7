"""Profile domain entity."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from campusgig.domain.exceptions.validation_error import (
    RequiredFieldError,
    ValidationError,
)

DISPLAY_NAME_MAX_LENGTH = 50
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
REGISTRATION_PATTERN = re.compile(r"[a-z]?(\d+)@", re.IGNORECASE)


@dataclass
class Profile:
    """Profile domain entity.

    average_rating, total_ratings and tasks_completed are derived fields.
    They are only ever changed by the storage layer's atomic update paths.
    """

    id: UUID
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    average_rating: float = 0.0
    total_ratings: int = 0
    tasks_completed: int = 0
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.email or not self.email.strip():
            raise RequiredFieldError("email")
        if self.display_name is not None:
            self.display_name = normalize_display_name(self.display_name)
        if not self.avatar_url:
            self.avatar_url = AVATAR_URL_TEMPLATE.format(seed=self.id)
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @property
    def name(self) -> str:
        """Name shown next to jobs; falls back to the registration number."""
        return self.display_name or registration_number(self.email)


def normalize_display_name(display_name: str) -> str:
    """Strip and validate a user-chosen display name."""
    name = (display_name or "").strip()
    if not name:
        raise ValidationError("Display name is required")
    if len(name) > DISPLAY_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Display name must be less than {DISPLAY_NAME_MAX_LENGTH} characters"
        )
    return name


def registration_number(email: Optional[str]) -> str:
    """Extract the student registration number from a campus email."""
    if not email:
        return "Student"
    match = REGISTRATION_PATTERN.search(email)
    return match.group(1) if match else "Student"
