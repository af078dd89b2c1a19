from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.schemas.order_schemas import OrderCreate, OrderCreatedResponse
from app.schemas.payment_schemas import PaymentProofSubmit
from app.schemas.timer_schemas import TimerStatusResponse
from app.services.order_timer import OrderTimerService
from app.services.payment_records import PaymentRecordService
from app.services.service_orders import ServiceOrderService
from app.utils.token import get_current_user

router = APIRouter()


def _require_own_order(session: Session, order_id: int, user: User):
    if not ServiceOrderService(session).customer_owns_order(order_id, user.user_id):
        raise HTTPException(status_code=404, detail="Order not found")


@router.post("", response_model=OrderCreatedResponse)
def book_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    orders = ServiceOrderService(session)
    profile = orders.get_customer_profile(current_user.user_id)
    if not profile:
        raise HTTPException(status_code=400, detail="Customer profile not found")

    data = payload.model_dump(exclude={"payment_method"})
    data["customer_id"] = profile.customer_id
    order = orders.create_order(data, payload.payment_method.value)
    return {"message": "Order booked successfully", "order_id": order.id, "status": order.status}


@router.get("")
def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return ServiceOrderService(session).list_active_orders(
        page=page, limit=limit, user_id=current_user.user_id
    )


@router.get("/{order_id}/timer-status", response_model=TimerStatusResponse)
def my_order_timer_status(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    _require_own_order(session, order_id, current_user)
    return OrderTimerService(session).get_timer_status(order_id)


@router.post("/{order_id}/payment-proof")
def submit_payment_proof(
    order_id: int,
    payload: PaymentProofSubmit,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    _require_own_order(session, order_id, current_user)
    PaymentRecordService(session).submit_payment_proof(
        order_id, payload.payment_proof, payload.reference_id
    )
    return {"message": "Payment proof submitted successfully", "payment_review_status": "pending"}
