"""
Repayment views backed by stored applications and payments.
Schedules are never persisted: each request recomputes them from the application snapshot.
"""
from typing import Dict, List
from sqlalchemy.orm import Session

from crediflow.applications.models import ApplicationStatus, LoanApplication
from crediflow.applications.service import get_application, loan_terms
from crediflow.core.logger import logger
from crediflow.payments.models import Payment, PaymentStatus
from crediflow.payments.schemas import PaymentResponse
from crediflow.repayment.schemas import (
    LoanCollection,
    PaymentRecord,
    RepaymentScheduleResponse,
    RepaymentTrackingResponse,
)
from crediflow.repayment.summary import (
    collection_progress,
    flat_total_due,
    portfolio_summary,
    schedule_total_due,
    summarize,
    verified_total,
)
from crediflow.schedule.engine import generate_schedule
from crediflow.schedule.policy import term_months


def application_repayment(db: Session, application_id: str) -> RepaymentScheduleResponse:
    """Schedule, totals and collection progress for one loan, measured against the exact schedule total."""
    application = get_application(db, application_id)
    terms = loan_terms(application)
    schedule = generate_schedule(terms)

    payments = db.query(Payment).filter(
        Payment.loan_application_id == application.id
    ).order_by(Payment.created_at.desc()).all()

    records = [PaymentRecord.model_validate(p) for p in payments]
    progress = collection_progress(schedule_total_due(schedule), verified_total(records))

    logger.info(
        f"Repayment schedule computed: application_id={application.id}, periods={len(schedule)}, "
        f"collected={progress.percentage:.2f}%"
    )

    return RepaymentScheduleResponse(
        application_id=application.id,
        loan_amount=application.loan_amount,
        loan_type=application.loan_type,
        payment_type=terms.payment_plan,
        status=ApplicationStatus(application.status).value,
        annual_rate_percent=terms.annual_rate_percent,
        term_months=term_months(terms.loan_category),
        schedule=schedule,
        summary=summarize(schedule),
        progress=progress,
        payments=[PaymentResponse.model_validate(p) for p in payments]
    )


def repayment_tracking(db: Session) -> RepaymentTrackingResponse:
    """
    Admin collection-progress view over every dispatched loan.
    Uses the flat principal * 1.10 total due, not the schedule total.
    """
    loans: List[LoanApplication] = db.query(LoanApplication).filter(
        LoanApplication.status == ApplicationStatus.DISPATCHED
    ).order_by(LoanApplication.created_at.desc()).all()

    verified: List[Payment] = db.query(Payment).filter(
        Payment.status == PaymentStatus.VERIFIED
    ).all()

    by_loan: Dict[str, List[PaymentRecord]] = {}
    for payment in verified:
        by_loan.setdefault(payment.loan_application_id, []).append(PaymentRecord.model_validate(payment))

    collections: List[LoanCollection] = []
    for loan in loans:
        loan_payments = by_loan.get(loan.id, [])
        collections.append(LoanCollection(
            application_id=loan.id,
            full_name=loan.full_name,
            email=loan.email,
            loan_amount=loan.loan_amount,
            loan_type=loan.loan_type,
            created_at=loan.created_at,
            verified_payments=len(loan_payments),
            progress=collection_progress(flat_total_due(loan.loan_amount), verified_total(loan_payments))
        ))

    return RepaymentTrackingResponse(
        portfolio=portfolio_summary(collections),
        loans=collections
    )
