"""
Pydantic schemas for loan applications.
Mirrors the application form's validation rules.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime
import re

from crediflow.applications.models import ApplicationStatus, EmploymentStatus
from crediflow.repayment.schemas import RepaymentSummary
from crediflow.schedule.policy import MAX_LOAN_AMOUNT, MIN_LOAN_AMOUNT, LoanCategory, PaymentPlan


class LoanApplicationCreate(BaseModel):
    """Loan application submission payload."""
    user_id: str = Field(..., min_length=1, max_length=36, description="Applicant")
    full_name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Contact email")
    phone: str = Field(..., description="Phone number (11-15 digits)")
    loan_type: LoanCategory = Field(..., description="Loan category")
    loan_amount: float = Field(..., ge=MIN_LOAN_AMOUNT, le=MAX_LOAN_AMOUNT, description="Requested amount (₦)")
    loan_purpose: str = Field(..., min_length=1, max_length=200, description="Purpose of the loan")
    employment_status: EmploymentStatus = Field(..., description="Employment status")
    monthly_income: float = Field(..., ge=0, description="Monthly income (₦)")
    payment_type: PaymentPlan = Field(default=PaymentPlan.INSTALLMENT, description="installment or full")

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator('full_name', 'loan_purpose')
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Field cannot be blank')
        return v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        digits = re.sub(r'\D', '', v)
        if not 11 <= len(digits) <= 15:
            raise ValueError('Phone must have between 11 and 15 digits')
        return digits


class StatusUpdateRequest(BaseModel):
    """Admin review decision."""
    status: ApplicationStatus = Field(..., description="approved, rejected or dispatched")
    reviewed_by: str = Field(..., min_length=1, max_length=36, description="Admin user id")


class LoanApplicationResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    email: str
    phone: str
    loan_type: str
    loan_amount: float
    loan_purpose: str
    employment_status: EmploymentStatus
    monthly_income: float
    payment_type: PaymentPlan
    status: ApplicationStatus
    reviewed_by: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoanApplicationCreated(LoanApplicationResponse):
    """Submission result, with the repayment totals the applicant is signing up for."""
    repayment: RepaymentSummary
