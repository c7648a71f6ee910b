"""
Notification Model

One row per recipient per event. Only the read flag is ever updated.
"""
from sqlalchemy import Column, Integer, String, Boolean, JSON, TIMESTAMP, ForeignKey, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy.sql import func

from model.base import Base
from model.enums import NotificationType


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Recipient
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
        comment='User who receives the notification'
    )

    type = Column(
        SAEnum(NotificationType, name="notification_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    message = Column(String(500), nullable=False)

    # Event metadata (post id, actor id, reason, ...)
    data = Column(JSON, nullable=True)

    read = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        TIMESTAMP, server_default=func.current_timestamp(),
        nullable=False, index=True
    )

    __table_args__ = (
        Index("idx_notifications_user_read", "user_id", "read"),
    )

    def __repr__(self):
        return (
            f"<Notification(id={self.id}, user={self.user_id}, "
            f"type={self.type}, read={self.read})>"
        )
