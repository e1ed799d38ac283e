"""
FastAPI Router for repayment endpoints.
"""
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from crediflow.core.database import get_db
from crediflow.core.exceptions import InvalidStatusTransitionError, NotFoundError
from crediflow.core.logger import get_logger_with_correlation
from crediflow.payments.models import PaymentStatus
from crediflow.payments.schemas import PaymentCreate, PaymentResponse, PaymentReviewRequest
from crediflow.payments.service import list_payments, review_payment, submit_payment

router = APIRouter(tags=["Payments"])


@router.post("", response_model=PaymentResponse, status_code=201)
def record_payment(
    data: PaymentCreate,
    db: Session = Depends(get_db),
    x_correlation_id: Optional[str] = Header(default=None)
) -> PaymentResponse:
    """
    Records a repayment made by bank transfer. It stays `pending` until an admin reviews it.

    - **loan_application_id**: Dispatched loan being repaid
    - **amount_paid**: Amount transferred (₦)
    - **proof_reference**: Optional storage key of the uploaded receipt
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        payment = submit_payment(db, data, correlation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        logger.warning(f"Payment refused: {str(e)}")
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        logger.warning(f"Payment refused: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return PaymentResponse.model_validate(payment)


@router.get("", response_model=List[PaymentResponse])
def list_loan_payments(
    application_id: Optional[str] = None,
    status: Optional[PaymentStatus] = None,
    db: Session = Depends(get_db)
) -> List[PaymentResponse]:
    """Lists payments, newest first. Filter by `application_id` and/or `status`."""
    return [PaymentResponse.model_validate(p) for p in list_payments(db, application_id, status)]


@router.patch("/{payment_id}/review", response_model=PaymentResponse)
def review_loan_payment(
    payment_id: str,
    data: PaymentReviewRequest,
    db: Session = Depends(get_db),
    x_correlation_id: Optional[str] = Header(default=None)
) -> PaymentResponse:
    """Admin verification: marks a pending payment `verified` or `rejected`."""
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        payment = review_payment(db, payment_id, data, correlation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        logger.warning(f"Review refused: {str(e)}")
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Payment {payment.id} {data.status.value}")
    return PaymentResponse.model_validate(payment)
