"""
Pydantic schemas for repayment submission and review.
"""
from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime, timezone

from crediflow.payments.models import PaymentStatus


class PaymentCreate(BaseModel):
    """Repayment submission payload."""
    loan_application_id: str = Field(..., min_length=1, max_length=36, description="Loan being repaid")
    user_id: str = Field(..., min_length=1, max_length=36, description="Borrower")
    amount_paid: float = Field(..., gt=0, le=1000000000, description="Amount paid (₦)")
    payment_date: Optional[datetime] = Field(default=None, description="Transfer date, defaults to now")
    proof_reference: Optional[str] = Field(None, max_length=500, description="Storage key of the proof of payment")

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator('payment_date')
    @classmethod
    def normalize_to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Stored timestamps are naive UTC; offsets are applied before the value reaches the database."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class PaymentReviewRequest(BaseModel):
    """Admin decision on a pending payment."""
    status: PaymentStatus = Field(..., description="verified or rejected")
    reviewed_by: str = Field(..., min_length=1, max_length=36, description="Admin user id")

    @field_validator('status')
    @classmethod
    def validate_decision(cls, v: PaymentStatus) -> PaymentStatus:
        if v == PaymentStatus.PENDING:
            raise ValueError('A review must either verify or reject the payment')
        return v


class PaymentResponse(BaseModel):
    id: str
    loan_application_id: str
    user_id: str
    amount_paid: float
    payment_date: datetime
    status: PaymentStatus
    proof_reference: Optional[str]
    verified_by: Optional[str]
    verified_at: Optional[datetime]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
