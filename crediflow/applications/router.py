"""
FastAPI Router for loan application endpoints.
Submission by borrowers, review and dispatch by admins.
"""
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from crediflow.applications.models import ApplicationStatus
from crediflow.applications.schemas import (
    LoanApplicationCreate,
    LoanApplicationCreated,
    LoanApplicationResponse,
    StatusUpdateRequest,
)
from crediflow.applications.service import (
    create_application,
    get_application,
    list_applications,
    loan_terms,
    update_status,
)
from crediflow.core.database import get_db
from crediflow.core.exceptions import InvalidStatusTransitionError, NotFoundError
from crediflow.core.logger import get_logger_with_correlation
from crediflow.repayment.summary import summarize
from crediflow.schedule.engine import generate_schedule

router = APIRouter(tags=["Applications"])


@router.post("", response_model=LoanApplicationCreated, status_code=201)
def submit_application(
    data: LoanApplicationCreate,
    db: Session = Depends(get_db),
    x_correlation_id: Optional[str] = Header(default=None)
) -> LoanApplicationCreated:
    """
    Submits a loan application for review.

    The response carries the repayment totals for the chosen plan, computed by the
    same engine that later drives the repayment schedule.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    logger.info(f"Submitting application: type={data.loan_type.value}, amount={data.loan_amount}")
    application = create_application(db, data, correlation_id)
    repayment = summarize(generate_schedule(loan_terms(application)))

    return LoanApplicationCreated(
        **LoanApplicationResponse.model_validate(application).model_dump(),
        repayment=repayment
    )


@router.get("", response_model=List[LoanApplicationResponse])
def list_loan_applications(
    status: Optional[ApplicationStatus] = None,
    user_id: Optional[str] = None,
    db: Session = Depends(get_db)
) -> List[LoanApplicationResponse]:
    """Lists applications, newest first. Filter by `status` and/or `user_id`."""
    return [LoanApplicationResponse.model_validate(a) for a in list_applications(db, status, user_id)]


@router.get("/{application_id}", response_model=LoanApplicationResponse)
def get_loan_application(
    application_id: str,
    db: Session = Depends(get_db)
) -> LoanApplicationResponse:
    try:
        return LoanApplicationResponse.model_validate(get_application(db, application_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{application_id}/status", response_model=LoanApplicationResponse)
def change_application_status(
    application_id: str,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    x_correlation_id: Optional[str] = Header(default=None)
) -> LoanApplicationResponse:
    """
    Admin review action.

    - pending -> approved | rejected
    - approved -> dispatched (funds sent)

    The applicant receives an in-app notification for every change.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        application = update_status(db, application_id, data.status, data.reviewed_by, correlation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        logger.warning(f"Status change refused: {str(e)}")
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Application {application.id} is now {data.status.value}")
    return LoanApplicationResponse.model_validate(application)
