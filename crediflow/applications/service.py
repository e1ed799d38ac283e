"""
Business logic for loan applications.
Implements submission, lookup and the review state machine (pending -> approved/rejected, approved -> dispatched).
"""
from typing import Dict, FrozenSet, List, Optional
from uuid import uuid4
from sqlalchemy.orm import Session

from crediflow.applications.models import ApplicationStatus, LoanApplication
from crediflow.applications.schemas import LoanApplicationCreate
from crediflow.core.config import settings
from crediflow.core.exceptions import InvalidStatusTransitionError, NotFoundError
from crediflow.core.logger import logger, audit_log
from crediflow.core.utils import mask_email
from crediflow.notifications.service import notify_status_change
from crediflow.schedule.schemas import LoanTerms

ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED}),
    ApplicationStatus.APPROVED: frozenset({ApplicationStatus.DISPATCHED}),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.DISPATCHED: frozenset(),
}


def loan_terms(application: LoanApplication, annual_rate_percent: Optional[float] = None) -> LoanTerms:
    """Snapshot of the stored application as engine input."""
    return LoanTerms(
        principal=application.loan_amount,
        annual_rate_percent=(
            settings.ANNUAL_INTEREST_RATE_PERCENT if annual_rate_percent is None else annual_rate_percent
        ),
        loan_category=application.loan_type,
        payment_plan=application.payment_type,
        origination_date=application.created_at
    )


def create_application(db: Session, data: LoanApplicationCreate, correlation_id: str) -> LoanApplication:
    application = LoanApplication(
        id=str(uuid4()),
        user_id=data.user_id,
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        loan_type=data.loan_type.value,
        loan_amount=data.loan_amount,
        loan_purpose=data.loan_purpose,
        employment_status=data.employment_status,
        monthly_income=data.monthly_income,
        payment_type=data.payment_type,
        status=ApplicationStatus.PENDING,
        correlation_id=correlation_id
    )

    db.add(application)
    db.commit()
    db.refresh(application)

    audit_log(
        action="loan_application_submitted",
        user=data.user_id,
        resource=f"application_id={application.id}",
        details={
            "correlation_id": correlation_id,
            "email": mask_email(data.email),
            "loan_type": application.loan_type,
            "loan_amount": data.loan_amount,
            "payment_type": data.payment_type.value
        }
    )

    logger.info(f"Loan application persisted: id={application.id}")

    return application


def get_application(db: Session, application_id: str) -> LoanApplication:
    application = db.query(LoanApplication).filter(LoanApplication.id == application_id).first()
    if not application:
        raise NotFoundError(f"Loan application {application_id} not found")
    return application


def list_applications(
    db: Session,
    status: Optional[ApplicationStatus] = None,
    user_id: Optional[str] = None
) -> List[LoanApplication]:
    query = db.query(LoanApplication)
    if status is not None:
        query = query.filter(LoanApplication.status == status)
    if user_id is not None:
        query = query.filter(LoanApplication.user_id == user_id)
    return query.order_by(LoanApplication.created_at.desc()).all()


def update_status(
    db: Session,
    application_id: str,
    new_status: ApplicationStatus,
    reviewed_by: str,
    correlation_id: str
) -> LoanApplication:
    """
    Moves an application through the review lifecycle and notifies the applicant.
    Raises InvalidStatusTransitionError for any move the state machine does not allow.
    """
    application = get_application(db, application_id)
    current = ApplicationStatus(application.status)

    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(
            f"Cannot change application status from {current.value} to {new_status.value}"
        )

    application.status = new_status
    application.reviewed_by = reviewed_by
    notify_status_change(db, application)

    db.commit()
    db.refresh(application)

    audit_log(
        action="loan_application_status_changed",
        user=reviewed_by,
        resource=f"application_id={application.id}",
        details={
            "correlation_id": correlation_id,
            "from": current.value,
            "to": new_status.value
        }
    )

    return application
