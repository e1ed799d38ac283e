"""
FastAPI Router for in-app notifications.
"""
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from crediflow.core.database import get_db
from crediflow.core.exceptions import NotFoundError
from crediflow.notifications.schemas import NotificationCreate, NotificationResponse
from crediflow.notifications.service import list_notifications, mark_read, send_notification

router = APIRouter(tags=["Notifications"])


@router.post("", response_model=NotificationResponse, status_code=201)
def create_notification(
    data: NotificationCreate,
    db: Session = Depends(get_db),
    x_admin_id: Optional[str] = Header(default=None),
    x_correlation_id: Optional[str] = Header(default=None)
) -> NotificationResponse:
    """Sends an admin-authored message to one user."""
    correlation_id = x_correlation_id or str(uuid4())
    notification = send_notification(db, data, sender=x_admin_id or "system", correlation_id=correlation_id)
    return NotificationResponse.model_validate(notification)


@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    user_id: str,
    unread_only: bool = False,
    db: Session = Depends(get_db)
) -> List[NotificationResponse]:
    """Lists a user's notifications, newest first."""
    return [NotificationResponse.model_validate(n) for n in list_notifications(db, user_id, unread_only)]


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db)
) -> NotificationResponse:
    try:
        return NotificationResponse.model_validate(mark_read(db, notification_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
