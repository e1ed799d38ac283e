"""
FastAPI Router for the loan calculator.
Previews use the same engine as stored loans, so quoted totals match the eventual repayment schedule.
"""
from datetime import date
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Header

from crediflow.core.config import settings
from crediflow.core.logger import get_logger_with_correlation
from crediflow.repayment.summary import summarize
from crediflow.schedule.engine import build_schedule
from crediflow.schedule.schemas import QuoteRequest, QuoteResponse

router = APIRouter(tags=["Calculator"])


@router.post("/quote", response_model=QuoteResponse)
def quote(
    data: QuoteRequest,
    x_correlation_id: Optional[str] = Header(default=None)
) -> QuoteResponse:
    """
    Calculates the repayment for a prospective loan.

    - **amount**: Requested amount (₦50,000 to ₦5,000,000)
    - **term_months**: Term in months (6 to 60, multiples of 6)
    - **payment_plan**: `installment` (every 3 months) or `full` (lump sum)

    **Returns:**
    - Payment per period
    - Total payable amount and total interest
    - Full schedule projected from today
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        schedule = build_schedule(
            data.amount,
            settings.ANNUAL_INTEREST_RATE_PERCENT,
            data.term_months,
            data.payment_plan,
            date.today()
        )
    except ValueError as e:
        logger.warning(f"Quote rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    summary = summarize(schedule)
    logger.info(f"Quote calculated: amount={data.amount}, term={data.term_months}, periods={summary.periods}")

    return QuoteResponse(
        amount=data.amount,
        annual_rate_percent=settings.ANNUAL_INTEREST_RATE_PERCENT,
        term_months=data.term_months,
        payment_plan=data.payment_plan,
        periods=summary.periods,
        period_payment=schedule[0].payment,
        total_payment=summary.total_payment,
        total_interest=summary.total_interest,
        schedule=schedule
    )
