"""
Data models for in-app notifications.
Clients poll or subscribe to this table; delivery transport is handled outside the service.
"""
from sqlalchemy import Boolean, String, DateTime, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
import enum
from crediflow.core.database import Base, get_enum_values


class NotificationType(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Base):
    """Message addressed to a single user."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)  # UUID
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, values_callable=get_enum_values),
        nullable=False,
        default=NotificationType.INFO
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
