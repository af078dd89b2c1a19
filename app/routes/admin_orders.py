# -------- ADMIN ORDERS --------
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from sqlmodel import Session

from app.constants.order_status import OrderStatus
from app.database import get_session
from app.models.user import User
from app.schemas.order_schemas import AdminOrderCreate, OrderCreatedResponse, StatusChangeResponse
from app.schemas.payment_schemas import PaymentStatusUpdate, WalletReviewRequest
from app.schemas.timer_schemas import AutoAdvanceToggle, StartTimerRequest, TimerStatusResponse
from app.services.order_event_service import get_order_timeline
from app.services.order_history import OrderHistoryService
from app.services.order_timer import OrderTimerService
from app.services.payment_records import PaymentRecordService
from app.services.service_orders import ServiceOrderService
from app.utils.token import get_current_admin


router = APIRouter()


@router.get("")
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return ServiceOrderService(session).list_active_orders(
        page=page,
        limit=limit,
        status=status.value if status else None,
    )


@router.post("", response_model=OrderCreatedResponse)
def create_order(
    payload: AdminOrderCreate,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    data = payload.model_dump(exclude={"payment_method"})
    order = ServiceOrderService(session).create_order(
        data, payload.payment_method.value, created_by="admin"
    )
    return {"message": "Order created successfully", "order_id": order.id, "status": order.status}


# ---------- stats (declared before /{order_id}) ----------

@router.get("/stats")
def order_stats(
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return ServiceOrderService(session).get_order_stats()


@router.get("/stats/distribution")
def status_distribution(
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return ServiceOrderService(session).get_status_distribution()


# ---------- timers (declared before /{order_id}) ----------

@router.get("/timers/active")
def orders_with_active_timers(
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return OrderTimerService(session).get_orders_with_active_timers()


@router.get("/timers/expired")
def orders_with_expired_timers(
    threshold_minutes: int = Query(30, ge=0),
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return OrderTimerService(session).get_orders_with_expired_timers(threshold_minutes)


@router.get("/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    order = OrderTimerService(session).get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/{order_id}/timeline")
def order_timeline(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return [
        {
            "event_type": e.event_type,
            "label": e.label,
            "meta": e.meta,
            "created_by": e.created_by,
            "created_at": e.created_at,
        }
        for e in get_order_timeline(session, order_id)
    ]


@router.post("/{order_id}/approve", response_model=StatusChangeResponse)
def approve_order(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    status = ServiceOrderService(session).approve_order(order_id)
    return {"message": "Order approved", "order_id": order_id, "status": status}


@router.post("/{order_id}/start-timer")
def start_timer(
    order_id: int,
    payload: StartTimerRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    timer_data = OrderTimerService(session).start_timer(order_id, payload.status)
    return {"message": "Timer started successfully", "timerData": timer_data}


@router.post("/{order_id}/stop-timer")
def stop_timer(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderTimerService(session).stop_timer(order_id)
    return {"message": "Timer stopped successfully"}


@router.get("/{order_id}/timer-status", response_model=TimerStatusResponse)
def timer_status(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return OrderTimerService(session).get_timer_status(order_id)


@router.post("/{order_id}/toggle-auto-advance")
def toggle_auto_advance(
    order_id: int,
    payload: AutoAdvanceToggle,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    enabled = OrderTimerService(session).toggle_auto_advance(order_id, payload.enabled)
    return {
        "message": f"Auto-advance {'enabled' if enabled else 'disabled'} successfully",
        "autoAdvanceEnabled": enabled,
    }


@router.post("/{order_id}/advance-status", response_model=StatusChangeResponse)
def advance_status(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    status = OrderTimerService(session).advance_to_next_status(order_id)
    return {"message": f"Order advanced to {status}", "order_id": order_id, "status": status}


@router.post("/{order_id}/auto-advance", response_model=StatusChangeResponse)
def auto_advance(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    status = OrderTimerService(session).auto_advance_order(order_id, created_by="admin")
    return {"message": f"Order auto-advanced to {status}", "order_id": order_id, "status": status}


# ---------- payment ----------

@router.put("/{order_id}/payment-status")
def update_payment_status(
    order_id: int,
    payload: PaymentStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    PaymentRecordService(session).update_payment_status(order_id, payload.payment_status)
    return {
        "message": "Payment status updated successfully",
        "order_id": order_id,
        "payment_status": payload.payment_status,
    }


@router.post("/{order_id}/review-payment")
def review_wallet_payment(
    order_id: int,
    payload: WalletReviewRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    payment = PaymentRecordService(session).review_wallet_payment(order_id, payload.status)
    return {
        "message": f"Mobile wallet payment {payload.status} successfully",
        "order_id": order_id,
        "payment_status": payment.payment_status,
        "payment_review_status": payment.payment_review_status,
    }


# ---------- completion ----------

@router.post("/{order_id}/complete", response_model=StatusChangeResponse)
def complete_order(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderHistoryService(session).complete_order(order_id)
    return {
        "message": "Order completed and moved to history successfully",
        "order_id": order_id,
        "status": OrderStatus.COMPLETED.value,
    }


@router.delete("/{order_id}/soft-delete")
def soft_delete_order(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderHistoryService(session).soft_delete(order_id)
    return {"message": "Order marked as deleted successfully"}
