"""
Notification-related API schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from campusgig.domain.value_objects.notification_type import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: NotificationType
    ref_id: UUID
    is_read: bool
    created_at: datetime
