from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.constants.order_status import HistoryType
from app.database import get_session
from app.models.user import User
from app.services.order_history import OrderHistoryService
from app.utils.token import get_current_admin

router = APIRouter()


@router.get("")
def get_history(
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return OrderHistoryService(session).get_history()


@router.get("/type/{kind}")
def get_history_by_type(
    kind: HistoryType,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    return OrderHistoryService(session).get_history_by_type(kind.value)


@router.post("/{order_id}/move-to-history")
def move_to_history(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderHistoryService(session).move_to_history(order_id)
    return {"message": "Order moved to history successfully"}


@router.post("/{order_id}/restore")
def restore_from_history(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderHistoryService(session).restore_from_history(order_id)
    return {"message": "Order restored successfully"}


@router.delete("/{order_id}")
def delete_from_history(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_admin),
):
    OrderHistoryService(session).delete_from_history(order_id)
    return {"message": "Order permanently deleted"}
