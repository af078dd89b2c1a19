from fastapi import APIRouter, Depends, Query
from typing import List
from sqlmodel import Session

from app.constants.order_status import PaymentReviewStatus
from app.database import get_session
from app.models.user import User
from app.schemas.payment_schemas import PaymentMethodSummary
from app.services.payment_records import PaymentRecordService
from app.utils.token import get_current_admin

router = APIRouter()


@router.get("/wallet")
def wallet_payments_by_review_status(
    status: PaymentReviewStatus = Query(PaymentReviewStatus.PENDING),
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return PaymentRecordService(session).get_orders_by_wallet_review_status(status.value)


@router.get("/analytics", response_model=List[PaymentMethodSummary])
def payment_method_analytics(
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return PaymentRecordService(session).get_payment_method_analytics()
