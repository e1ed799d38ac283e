from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from crediflow.notifications.models import NotificationType


class NotificationCreate(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=36, description="Recipient")
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    type: NotificationType = Field(default=NotificationType.INFO)


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
