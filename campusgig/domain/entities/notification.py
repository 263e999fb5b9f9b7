"""Notification domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from campusgig.domain.value_objects.notification_type import NotificationType


@dataclass
class Notification:
    """Notification created as a side effect of a marketplace mutation."""

    user_id: UUID
    type: NotificationType
    ref_id: UUID
    is_read: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.type = NotificationType(self.type)
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.user_id == user_id
