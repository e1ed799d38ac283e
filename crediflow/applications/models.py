"""
Data models for loan applications.
The stored row is the source of the LoanTerms snapshot every repayment schedule is computed from.
"""
from sqlalchemy import Float, String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
import enum
from crediflow.core.database import Base, get_enum_values
from crediflow.schedule.policy import PaymentPlan


class ApplicationStatus(str, enum.Enum):
    """Review lifecycle of an application."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISPATCHED = "dispatched"


class EmploymentStatus(str, enum.Enum):
    EMPLOYED = "employed"
    SELF_EMPLOYED = "self-employed"
    CIVIL_SERVANT = "civil-servant"
    CONTRACT = "contract"
    BUSINESS_OWNER = "business-owner"


class LoanApplication(Base):
    """Entity representing a submitted loan application."""

    __tablename__ = "loan_applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)  # UUID
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    # Kept as free text so rows created under retired categories still load
    loan_type: Mapped[str] = mapped_column(String(30), nullable=False)
    loan_amount: Mapped[float] = mapped_column(Float, nullable=False)
    loan_purpose: Mapped[str] = mapped_column(String(200), nullable=False)
    employment_status: Mapped[EmploymentStatus] = mapped_column(
        Enum(EmploymentStatus, values_callable=get_enum_values),
        nullable=False
    )
    monthly_income: Mapped[float] = mapped_column(Float, nullable=False)
    payment_type: Mapped[PaymentPlan] = mapped_column(
        Enum(PaymentPlan, values_callable=get_enum_values),
        nullable=False,
        default=PaymentPlan.INSTALLMENT
    )
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, values_callable=get_enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    correlation_id: Mapped[Optional[str]] = mapped_column(String(100), index=True, nullable=True)

    def __repr__(self):
        return f"<LoanApplication(id={self.id}, loan_amount={self.loan_amount}, status={self.status})>"
