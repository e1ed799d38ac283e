"""
Data models for loan repayments.
A payment is recorded by the borrower and only counts towards collection once an admin verifies it.
"""
from sqlalchemy import Float, String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
import enum
from crediflow.core.database import Base, get_enum_values


class PaymentStatus(str, enum.Enum):
    """Verification state of a repayment."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Payment(Base):
    """Entity representing a repayment submitted against a dispatched loan."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)  # UUID
    loan_application_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    amount_paid: Mapped[float] = mapped_column(Float, nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, values_callable=get_enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True
    )
    # Storage key of the uploaded proof; the file itself lives in external storage
    proof_reference: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    verified_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    correlation_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, amount_paid={self.amount_paid}, status={self.status})>"
