"""
Pydantic schemas for the amortization engine.
Engine values stay unrounded; currency fields are rounded to kobo only when serialized.
"""
from datetime import date, datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from crediflow.schedule.policy import (
    DEFAULT_ANNUAL_RATE_PERCENT,
    MAX_LOAN_AMOUNT,
    MIN_LOAN_AMOUNT,
    LoanCategory,
    PaymentPlan,
)


def round_currency(value: float) -> float:
    return round(value, 2)


class LoanTerms(BaseModel):
    """Immutable snapshot of everything a repayment schedule depends on."""
    principal: float = Field(..., gt=0, description="Loan principal (₦)")
    annual_rate_percent: float = Field(
        default=DEFAULT_ANNUAL_RATE_PERCENT, ge=0, description="Nominal annual rate (%)"
    )
    loan_category: str = Field(default=LoanCategory.PERSONAL.value, min_length=1, description="Loan category")
    payment_plan: PaymentPlan = Field(default=PaymentPlan.INSTALLMENT, description="installment or full")
    origination_date: date = Field(..., description="Date due dates are projected from")

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @field_validator('loan_category', mode='before')
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        if isinstance(v, LoanCategory):
            return v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('origination_date', mode='before')
    @classmethod
    def truncate_timestamp(cls, v: Any) -> Any:
        """Accepts a full timestamp (e.g. an application's created_at) and keeps its calendar date."""
        if isinstance(v, datetime):
            return v.date()
        return v


class ScheduleEntry(BaseModel):
    """One repayment period."""
    period: int = Field(..., ge=1, description="1-based period index")
    due_date: date = Field(..., description="Payment due date")
    payment: float = Field(..., gt=0, description="Amount due for the period")
    principal: float = Field(..., description="Principal repaid in the period")
    interest: float = Field(..., ge=0, description="Interest charged in the period")
    balance: float = Field(..., ge=0, description="Outstanding principal after the payment")

    model_config = ConfigDict(frozen=True)

    @field_serializer('payment', 'principal', 'interest', 'balance')
    def serialize_currency(self, value: float) -> float:
        return round_currency(value)


class QuoteRequest(BaseModel):
    """Calculator preview payload."""
    amount: float = Field(..., ge=MIN_LOAN_AMOUNT, le=MAX_LOAN_AMOUNT, description="Requested amount (₦)")
    term_months: int = Field(default=12, ge=6, le=60, multiple_of=6, description="Loan term in months")
    payment_plan: PaymentPlan = Field(default=PaymentPlan.INSTALLMENT, description="installment or full")


class QuoteResponse(BaseModel):
    """Calculator preview result."""
    amount: float = Field(..., description="Requested amount (₦)")
    annual_rate_percent: float = Field(..., description="Nominal annual rate (%)")
    term_months: int = Field(..., description="Loan term in months")
    payment_plan: PaymentPlan = Field(..., description="installment or full")
    periods: int = Field(..., description="Number of payments")
    period_payment: float = Field(..., description="Amount due every period")
    total_payment: float = Field(..., description="Sum of all payments")
    total_interest: float = Field(..., description="Sum of all interest")
    schedule: List[ScheduleEntry] = Field(..., description="Period-by-period breakdown")

    @field_serializer('period_payment', 'total_payment', 'total_interest')
    def serialize_currency(self, value: float) -> float:
        return round_currency(value)
