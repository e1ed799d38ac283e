"""
In-app notifications.
Status changes on applications and payments are turned into messages for the borrower.
"""
from typing import List, Optional, Tuple
from uuid import uuid4
from sqlalchemy.orm import Session

from crediflow.applications.models import ApplicationStatus, LoanApplication
from crediflow.core.exceptions import NotFoundError
from crediflow.core.logger import logger, audit_log
from crediflow.core.utils import format_lagos_time, format_naira
from crediflow.notifications.models import Notification, NotificationType
from crediflow.notifications.schemas import NotificationCreate
from crediflow.payments.models import Payment, PaymentStatus


def status_change_message(
    loan_type: str,
    status: ApplicationStatus,
    loan_amount: float
) -> Tuple[str, str, NotificationType]:
    """Builds (title, message, type) for an application status change."""
    if status == ApplicationStatus.APPROVED:
        return (
            "Loan Approved!",
            f"Congratulations! Your {loan_type} loan has been approved.",
            NotificationType.SUCCESS
        )
    if status == ApplicationStatus.REJECTED:
        return (
            "Loan Application Update",
            f"Your {loan_type} loan application requires review.",
            NotificationType.WARNING
        )
    if status == ApplicationStatus.DISPATCHED:
        return (
            "Loan Disbursed",
            f"Your {loan_type} loan of {format_naira(loan_amount)} has been dispatched to your account.",
            NotificationType.SUCCESS
        )
    return (
        "Loan Application Updated",
        f"Your {loan_type} loan application has been {status.value}.",
        NotificationType.INFO
    )


def payment_review_message(payment: Payment) -> Tuple[str, str, NotificationType]:
    paid_on = format_lagos_time(payment.payment_date)
    amount = format_naira(payment.amount_paid)
    if payment.status == PaymentStatus.VERIFIED:
        return (
            "Payment Verified",
            f"Your payment of {amount} made on {paid_on} has been verified.",
            NotificationType.SUCCESS
        )
    return (
        "Payment Rejected",
        f"Your payment of {amount} made on {paid_on} could not be verified. Please contact support.",
        NotificationType.ERROR
    )


def _build(user_id: str, title: str, message: str, type: NotificationType) -> Notification:
    return Notification(
        id=str(uuid4()),
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        is_read=False
    )


def notify_status_change(db: Session, application: LoanApplication) -> Notification:
    """Queues a status-change notification on the session; the caller commits."""
    title, message, type = status_change_message(
        application.loan_type, ApplicationStatus(application.status), application.loan_amount
    )
    notification = _build(application.user_id, title, message, type)
    db.add(notification)
    return notification


def notify_payment_review(db: Session, payment: Payment) -> Notification:
    """Queues a payment review notification on the session; the caller commits."""
    title, message, type = payment_review_message(payment)
    notification = _build(payment.user_id, title, message, type)
    db.add(notification)
    return notification


def send_notification(
    db: Session,
    data: NotificationCreate,
    sender: str = "system",
    correlation_id: Optional[str] = None
) -> Notification:
    """Persists an admin-authored notification."""
    notification = _build(data.user_id, data.title, data.message, data.type)

    db.add(notification)
    db.commit()
    db.refresh(notification)

    audit_log(
        action="notification_sent",
        user=sender,
        resource=f"notification_id={notification.id}",
        details={"correlation_id": correlation_id, "recipient": data.user_id, "type": data.type.value}
    )

    return notification


def list_notifications(db: Session, user_id: str, unread_only: bool = False) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).all()


def mark_read(db: Session, notification_id: str) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise NotFoundError(f"Notification {notification_id} not found")

    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        logger.info(f"Notification marked as read: id={notification_id}")

    return notification
