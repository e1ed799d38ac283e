"""
FastAPI Router for repayment tracking.
"""
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from crediflow.core.database import get_db
from crediflow.core.exceptions import NotFoundError
from crediflow.core.logger import get_logger_with_correlation
from crediflow.repayment.schemas import RepaymentScheduleResponse, RepaymentTrackingResponse
from crediflow.repayment.service import application_repayment, repayment_tracking

router = APIRouter(tags=["Repayment"])


@router.get("/applications/{application_id}/schedule", response_model=RepaymentScheduleResponse)
def get_repayment_schedule(
    application_id: str,
    db: Session = Depends(get_db)
) -> RepaymentScheduleResponse:
    """
    Borrower repayment page.

    **Returns:**
    - Period-by-period schedule (quarterly installments, or a single lump sum due in one month)
    - Total payment and total interest
    - Collection progress against the schedule total, counting verified payments only
    - Payment history
    """
    try:
        return application_repayment(db, application_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/admin/repayment-tracking", response_model=RepaymentTrackingResponse)
def get_repayment_tracking(
    db: Session = Depends(get_db),
    x_correlation_id: Optional[str] = Header(default=None)
) -> RepaymentTrackingResponse:
    """
    Admin collection overview of dispatched loans.

    Progress here is measured against principal plus a flat 10%, not the exact schedule total.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    result = repayment_tracking(db)
    logger.info(
        f"Repayment tracking: active_loans={result.portfolio.active_loans}, "
        f"fully_repaid={result.portfolio.fully_repaid}"
    )
    return result
