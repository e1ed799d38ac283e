"""
Pydantic schemas for repayment summaries and collection progress.
"""
import enum
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from crediflow.payments.models import PaymentStatus
from crediflow.payments.schemas import PaymentResponse
from crediflow.schedule.policy import PaymentPlan
from crediflow.schedule.schemas import ScheduleEntry, round_currency


class ProgressStatus(str, enum.Enum):
    COMPLETED = "completed"
    ON_TRACK = "on_track"
    IN_PROGRESS = "in_progress"


class PaymentRecord(BaseModel):
    """Repayment as seen by the aggregation code; built from a stored Payment or supplied directly."""
    amount_paid: float = Field(..., gt=0, description="Amount paid (₦)")
    payment_date: datetime = Field(..., description="When the payment was made")
    status: PaymentStatus = Field(default=PaymentStatus.PENDING, description="Verification status")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class RepaymentSummary(BaseModel):
    """Totals folded over a schedule."""
    total_payment: float = Field(..., description="Sum of all payments")
    total_interest: float = Field(..., description="Sum of all interest")
    periods: int = Field(..., ge=0, description="Number of payments")

    @field_serializer('total_payment', 'total_interest')
    def serialize_currency(self, value: float) -> float:
        return round_currency(value)


class CollectionProgress(BaseModel):
    """How much of the amount due has been collected."""
    total_paid: float = Field(..., ge=0, description="Verified payments (₦)")
    total_due: float = Field(..., ge=0, description="Amount due (₦)")
    percentage: float = Field(..., ge=0, le=100, description="Share collected (%)")
    remaining: float = Field(..., ge=0, description="Outstanding amount (₦)")
    status: ProgressStatus = Field(..., description="completed, on_track or in_progress")

    @field_serializer('total_paid', 'total_due', 'percentage', 'remaining')
    def serialize_currency(self, value: float) -> float:
        return round_currency(value)


class RepaymentScheduleResponse(BaseModel):
    """Borrower-facing repayment page for one application."""
    application_id: str
    loan_amount: float
    loan_type: str
    payment_type: PaymentPlan
    status: str
    annual_rate_percent: float
    term_months: int
    schedule: List[ScheduleEntry]
    summary: RepaymentSummary
    progress: CollectionProgress
    payments: List[PaymentResponse]


class LoanCollection(BaseModel):
    """Collection progress of one dispatched loan in the admin tracking view."""
    application_id: str
    full_name: str
    email: str
    loan_amount: float
    loan_type: str
    created_at: datetime
    verified_payments: int = Field(..., ge=0)
    progress: CollectionProgress


class PortfolioSummary(BaseModel):
    """Headline figures across every dispatched loan."""
    active_loans: int = Field(..., ge=0)
    total_disbursed: float = Field(..., ge=0)
    total_collected: float = Field(..., ge=0)
    fully_repaid: int = Field(..., ge=0)

    @field_serializer('total_disbursed', 'total_collected')
    def serialize_currency(self, value: float) -> float:
        return round_currency(value)


class RepaymentTrackingResponse(BaseModel):
    portfolio: PortfolioSummary
    loans: List[LoanCollection]
