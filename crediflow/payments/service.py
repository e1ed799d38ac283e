"""
Business logic for repayments.
Borrowers record payments against dispatched loans; admins verify or reject each one exactly once.
"""
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4
from sqlalchemy.orm import Session

from crediflow.applications.models import ApplicationStatus
from crediflow.applications.service import get_application
from crediflow.core.exceptions import InvalidStatusTransitionError, NotFoundError
from crediflow.core.logger import logger, audit_log
from crediflow.notifications.service import notify_payment_review
from crediflow.payments.models import Payment, PaymentStatus
from crediflow.payments.schemas import PaymentCreate, PaymentReviewRequest


def submit_payment(db: Session, data: PaymentCreate, correlation_id: str) -> Payment:
    """Records a pending repayment. The loan must exist, belong to the payer and be dispatched."""
    application = get_application(db, data.loan_application_id)

    if application.user_id != data.user_id:
        raise ValueError("Payment user does not match the loan applicant")

    if application.status != ApplicationStatus.DISPATCHED:
        raise InvalidStatusTransitionError(
            f"Repayments can only be recorded against a dispatched loan (status: {application.status.value})"
        )

    payment = Payment(
        id=str(uuid4()),
        loan_application_id=application.id,
        user_id=data.user_id,
        amount_paid=data.amount_paid,
        payment_date=data.payment_date or datetime.now(timezone.utc),
        status=PaymentStatus.PENDING,
        proof_reference=data.proof_reference,
        correlation_id=correlation_id
    )

    db.add(payment)
    db.commit()
    db.refresh(payment)

    audit_log(
        action="payment_submitted",
        user=data.user_id,
        resource=f"payment_id={payment.id}",
        details={
            "correlation_id": correlation_id,
            "application_id": application.id,
            "amount_paid": data.amount_paid
        }
    )

    logger.info(f"Payment recorded: id={payment.id}, application_id={application.id}")

    return payment


def get_payment(db: Session, payment_id: str) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundError(f"Payment {payment_id} not found")
    return payment


def list_payments(
    db: Session,
    application_id: Optional[str] = None,
    status: Optional[PaymentStatus] = None
) -> List[Payment]:
    query = db.query(Payment)
    if application_id is not None:
        query = query.filter(Payment.loan_application_id == application_id)
    if status is not None:
        query = query.filter(Payment.status == status)
    return query.order_by(Payment.created_at.desc()).all()


def review_payment(
    db: Session,
    payment_id: str,
    decision: PaymentReviewRequest,
    correlation_id: str
) -> Payment:
    """Applies an admin decision to a pending payment and notifies the borrower."""
    payment = get_payment(db, payment_id)

    if payment.status != PaymentStatus.PENDING:
        raise InvalidStatusTransitionError(
            f"Payment {payment_id} was already {payment.status.value}"
        )

    payment.status = decision.status
    payment.verified_by = decision.reviewed_by
    payment.verified_at = datetime.now(timezone.utc)
    notify_payment_review(db, payment)

    db.commit()
    db.refresh(payment)

    audit_log(
        action="payment_reviewed",
        user=decision.reviewed_by,
        resource=f"payment_id={payment.id}",
        details={
            "correlation_id": correlation_id,
            "status": decision.status.value,
            "amount_paid": payment.amount_paid
        }
    )

    return payment
