"""
Aggregation over repayment schedules and recorded payments.

Two notions of "total due" coexist and are deliberately kept apart:
- schedule_total_due: the exact sum of a generated schedule, used on the borrower's repayment page.
- flat_total_due: principal plus a flat 10%, used by the admin collection-progress view.
"""
import math
from typing import Iterable, Sequence

from crediflow.payments.models import PaymentStatus
from crediflow.repayment.schemas import (
    CollectionProgress,
    LoanCollection,
    PaymentRecord,
    PortfolioSummary,
    ProgressStatus,
    RepaymentSummary,
)
from crediflow.schedule.schemas import ScheduleEntry

ADMIN_COLLECTION_MARKUP = 1.10

COMPLETED_THRESHOLD = 100.0
ON_TRACK_THRESHOLD = 50.0


def summarize(schedule: Sequence[ScheduleEntry]) -> RepaymentSummary:
    """Folds a schedule into its totals."""
    return RepaymentSummary(
        total_payment=math.fsum(entry.payment for entry in schedule),
        total_interest=math.fsum(entry.interest for entry in schedule),
        periods=len(schedule)
    )


def schedule_total_due(schedule: Sequence[ScheduleEntry]) -> float:
    return math.fsum(entry.payment for entry in schedule)


def flat_total_due(principal: float) -> float:
    """Simplified amount due used by the admin collection view."""
    return principal * ADMIN_COLLECTION_MARKUP


def verified_total(payments: Iterable[PaymentRecord]) -> float:
    """Sums only payments an admin has verified."""
    return math.fsum(
        payment.amount_paid for payment in payments
        if payment.status == PaymentStatus.VERIFIED
    )


def progress_status(percentage: float) -> ProgressStatus:
    if percentage >= COMPLETED_THRESHOLD:
        return ProgressStatus.COMPLETED
    if percentage >= ON_TRACK_THRESHOLD:
        return ProgressStatus.ON_TRACK
    return ProgressStatus.IN_PROGRESS


def collection_progress(total_due: float, total_paid: float) -> CollectionProgress:
    """
    Percentage collected, capped at 100, and the outstanding amount, floored at 0.
    A non-positive total due yields 0% rather than dividing by zero.
    """
    total_due = max(0.0, total_due)
    total_paid = max(0.0, total_paid)

    if total_due <= 0:
        percentage = 0.0
    else:
        percentage = min(COMPLETED_THRESHOLD, total_paid / total_due * 100)

    return CollectionProgress(
        total_paid=total_paid,
        total_due=total_due,
        percentage=percentage,
        remaining=max(0.0, total_due - total_paid),
        status=progress_status(percentage)
    )


def portfolio_summary(loans: Sequence[LoanCollection]) -> PortfolioSummary:
    return PortfolioSummary(
        active_loans=len(loans),
        total_disbursed=math.fsum(loan.loan_amount for loan in loans),
        total_collected=math.fsum(loan.progress.total_paid for loan in loans),
        fully_repaid=sum(1 for loan in loans if loan.progress.percentage >= COMPLETED_THRESHOLD)
    )
