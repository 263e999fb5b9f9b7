"""
Notification read domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class NotificationsRead:
    """Event raised when a user marks one or more notifications as read."""

    user_id: UUID
    count: int
    read_at: datetime
