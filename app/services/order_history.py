import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, or_, update
from sqlmodel import Session, select

from app.constants.order_events import OrderEventType
from app.constants.order_status import HistoryType, OrderStatus
from app.models.order_event import OrderEvent
from app.models.payment import Payment
from app.models.service_order import ServiceOrder
from app.services.exceptions import (
    AlreadyDeletedError,
    InvalidArgumentError,
    NotEligibleError,
    NotFoundError,
)
from app.services.order_event_service import log_order_event
from app.services.order_queries import order_with_payment_query

logger = logging.getLogger(__name__)

HISTORY_ITEM_TYPE = "service_order"


def history_item(order: ServiceOrder, profile, payment: Optional[Payment]) -> dict:
    return {
        "id": order.id,
        "type": HISTORY_ITEM_TYPE,
        "service_type": order.service_type,
        "pickup_date": order.pickup_date,
        "pickup_time": order.pickup_time,
        "load_count": order.load_count,
        "status": order.status,
        "payment_method": payment.payment_method if payment else None,
        "payment_status": payment.payment_status if payment else None,
        "name": profile.name if profile else None,
        "contact": profile.contact if profile else None,
        "email": profile.email if profile else None,
        "address": profile.address if profile else None,
        "total_price": order.total_price,
        "instructions": order.instructions,
        "laundry_photos": order.laundry_photos,
        "moved_to_history_at": order.moved_to_history_at,
        "is_deleted": order.is_deleted,
        "deleted_at": order.deleted_at,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def history_timestamp(item: dict) -> datetime:
    stamps = [
        item[key]
        for key in ("moved_to_history_at", "deleted_at", "updated_at")
        if item.get(key) is not None
    ]
    return max(stamps) if stamps else datetime.min


def _in_history():
    return or_(
        ServiceOrder.moved_to_history_at.is_not(None),
        ServiceOrder.is_deleted == True,  # noqa: E712
    )


class OrderHistoryService:
    """Archive, soft delete, restore and purge of service orders."""

    def __init__(self, session: Session):
        self.session = session

    def _update_order(self, order_id: int, *conditions, **values) -> int:
        result = self.session.exec(
            update(ServiceOrder)
            .where(ServiceOrder.id == order_id, *conditions)
            .values(**values)
        )
        return result.rowcount

    def _order_exists(self, order_id: int) -> bool:
        return self.session.exec(
            select(ServiceOrder.id).where(ServiceOrder.id == order_id)
        ).first() is not None

    def move_to_history(self, order_id: int, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        updated = self._update_order(
            order_id,
            ServiceOrder.status == OrderStatus.COMPLETED.value,
            ServiceOrder.moved_to_history_at.is_(None),
            moved_to_history_at=now,
            status=OrderStatus.COMPLETED.value,
        )
        if not updated:
            self.session.rollback()
            raise NotEligibleError(
                f"Service order {order_id} not found or not eligible for history"
            )

        log_order_event(
            self.session, order_id, OrderEventType.MOVED_TO_HISTORY, "Moved to history"
        )
        self.session.commit()
        logger.info("Order %s moved to history", order_id)
        return updated

    def complete_order(self, order_id: int, now: Optional[datetime] = None) -> int:
        """Mark an order completed and archive it in one transaction."""
        now = now or datetime.utcnow()
        updated = self._update_order(
            order_id,
            ServiceOrder.status != OrderStatus.COMPLETED.value,
            ServiceOrder.is_deleted == False,  # noqa: E712
            status=OrderStatus.COMPLETED.value,
            process_stage=OrderStatus.COMPLETED.value,
            moved_to_history_at=now,
        )
        if not updated:
            self.session.rollback()
            if not self._order_exists(order_id):
                raise NotFoundError(f"Service order {order_id} not found")
            raise NotEligibleError(f"Service order {order_id} is already completed or deleted")

        log_order_event(
            self.session, order_id, OrderEventType.ORDER_COMPLETED, "Order completed"
        )
        self.session.commit()
        logger.info("Order %s completed and moved to history", order_id)
        return updated

    def soft_delete(self, order_id: int, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        updated = self._update_order(
            order_id,
            ServiceOrder.is_deleted == False,  # noqa: E712
            is_deleted=True,
            deleted_at=now,
        )
        if not updated:
            self.session.rollback()
            if not self._order_exists(order_id):
                raise NotFoundError(f"Service order {order_id} not found")
            raise AlreadyDeletedError(f"Service order {order_id} is already deleted")

        log_order_event(
            self.session, order_id, OrderEventType.SOFT_DELETED, "Order marked as deleted"
        )
        self.session.commit()
        logger.info("Order %s soft deleted", order_id)
        return updated

    def restore_from_history(self, order_id: int) -> int:
        updated = self._update_order(
            order_id,
            _in_history(),
            moved_to_history_at=None,
            is_deleted=False,
            deleted_at=None,
        )
        if not updated:
            self.session.rollback()
            raise NotFoundError(f"Service order {order_id} not found in history")

        log_order_event(
            self.session, order_id, OrderEventType.RESTORED, "Restored from history"
        )
        self.session.commit()
        logger.info("Order %s restored from history", order_id)
        return updated

    def delete_from_history(self, order_id: int) -> int:
        """Permanently remove an archived or soft-deleted order and its dependants."""
        eligible = self.session.exec(
            select(ServiceOrder.id).where(ServiceOrder.id == order_id, _in_history())
        ).first()
        if eligible is None:
            raise NotFoundError(f"Service order {order_id} not found in history")

        self.session.exec(delete(OrderEvent).where(OrderEvent.order_id == order_id))
        self.session.exec(delete(Payment).where(Payment.service_orders_id == order_id))
        result = self.session.exec(
            delete(ServiceOrder).where(ServiceOrder.id == order_id, _in_history())
        )
        if not result.rowcount:
            # restored between the check and the delete
            self.session.rollback()
            raise NotFoundError(f"Service order {order_id} not found in history")

        self.session.commit()
        logger.info("Order %s permanently deleted", order_id)
        return result.rowcount

    # ---------- reads ----------

    def _history_rows(self, *conditions, order_by=None) -> List[dict]:
        query = order_with_payment_query().where(*conditions)
        if order_by is not None:
            query = query.order_by(order_by, ServiceOrder.id.desc())

        items = []
        seen = set()
        for order, profile, payment in self.session.exec(query).all():
            if order.id in seen:
                continue
            seen.add(order.id)
            items.append(history_item(order, profile, payment))
        return items

    def get_history(self) -> List[dict]:
        items = self._history_rows(
            or_(
                ServiceOrder.status == OrderStatus.COMPLETED.value,
                ServiceOrder.is_deleted == True,  # noqa: E712
            )
        )
        # sorted here rather than by the database
        items.sort(key=history_timestamp, reverse=True)
        return items

    def get_history_by_type(self, kind: str) -> List[dict]:
        if kind == HistoryType.COMPLETED.value:
            return self._history_rows(
                ServiceOrder.moved_to_history_at.is_not(None),
                ServiceOrder.is_deleted == False,  # noqa: E712
                order_by=ServiceOrder.moved_to_history_at.desc(),
            )
        if kind == HistoryType.DELETED.value:
            return self._history_rows(
                ServiceOrder.is_deleted == True,  # noqa: E712
                order_by=ServiceOrder.deleted_at.desc(),
            )
        raise InvalidArgumentError(f"Unknown history type: {kind!r}")
