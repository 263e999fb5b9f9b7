"""
Notification SQLAlchemy model.
"""

from sqlalchemy import Boolean, Column, Index, String, Uuid

from .base import BaseModel


class NotificationModel(BaseModel):
    """Notification database model."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_unread", "user_id", "is_read"),
    )

    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    ref_id = Column(Uuid(as_uuid=True), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
