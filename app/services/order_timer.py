import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.constants.order_events import OrderEventType
from app.constants.order_status import OrderStatus
from app.models.service_order import ServiceOrder
from app.services.exceptions import ConflictError, NotFoundError
from app.services.order_event_service import log_order_event
from app.services.order_queries import (
    matches,
    not_archived,
    order_row,
    order_with_customer_query,
)
from app.services.status_progression import (
    current_auto_stage,
    next_auto_stage,
    next_full_stage,
)

logger = logging.getLogger(__name__)


def elapsed_seconds(
    timer_start: Optional[datetime],
    timer_end: Optional[datetime],
    now: Optional[datetime] = None,
) -> int:
    if timer_start is None:
        return 0
    end = timer_end or now or datetime.utcnow()
    return int((end - timer_start).total_seconds())


class OrderTimerService:
    """
    Per-order stage timer and stage advancement.

    Every write is a single UPDATE statement committed on its own.
    """

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

    def _get_order(self, order_id: int) -> ServiceOrder:
        order = self.session.get(ServiceOrder, order_id, populate_existing=True)
        if not order:
            raise NotFoundError(f"Service order {order_id} not found")
        return order

    # ---------- timer ----------

    def start_timer(self, order_id: int, stage_label: str, now: Optional[datetime] = None) -> dict:
        # Restarting overwrites a running timer's start.
        now = now or datetime.utcnow()
        timer_data = {
            "timer_start": now,
            "current_timer_status": stage_label,
            "auto_advance_enabled": True,
        }

        if not self._update_order(order_id, **timer_data):
            self.session.rollback()
            raise NotFoundError(f"Service order {order_id} not found")

        log_order_event(
            self.session,
            order_id,
            OrderEventType.TIMER_STARTED,
            f"Timer started for {stage_label}",
            meta={"stage": stage_label},
        )
        self.session.commit()
        logger.info("Timer started for order %s at stage %s", order_id, stage_label)
        return timer_data

    def stop_timer(self, order_id: int, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.utcnow()
        if not self._update_order(order_id, timer_end=now, current_timer_status=None):
            self.session.rollback()
            raise NotFoundError(f"Service order {order_id} not found")

        log_order_event(self.session, order_id, OrderEventType.TIMER_STOPPED, "Timer stopped")
        self.session.commit()
        logger.info("Timer stopped for order %s", order_id)
        return now

    def get_timer_status(self, order_id: int, now: Optional[datetime] = None) -> dict:
        order = self._get_order(order_id)
        return {
            "timer_start": order.timer_start,
            "timer_end": order.timer_end,
            "current_timer_status": order.current_timer_status,
            "auto_advance_enabled": order.auto_advance_enabled,
            "elapsed_time": elapsed_seconds(order.timer_start, order.timer_end, now),
            "is_running": order.timer_start is not None and order.timer_end is None,
        }

    def toggle_auto_advance(self, order_id: int, enabled: bool) -> bool:
        if not self._update_order(order_id, auto_advance_enabled=enabled):
            self.session.rollback()
            raise NotFoundError(f"Service order {order_id} not found")

        log_order_event(
            self.session,
            order_id,
            OrderEventType.AUTO_ADVANCE_TOGGLED,
            f"Auto-advance {'enabled' if enabled else 'disabled'}",
            meta={"enabled": enabled},
        )
        self.session.commit()
        return enabled

    # ---------- reads ----------

    def get_order_by_id(self, order_id: int) -> Optional[dict]:
        result = self.session.exec(
            order_with_customer_query().where(ServiceOrder.id == order_id)
        ).first()
        if not result:
            return None
        order, profile, user = result
        return order_row(order, profile, user)

    def _active_timer_query(self):
        return order_with_customer_query().where(
            ServiceOrder.timer_start.is_not(None),
            ServiceOrder.timer_end.is_(None),
            *not_archived(),
        )

    def get_orders_with_active_timers(self) -> List[dict]:
        results = self.session.exec(
            self._active_timer_query().order_by(ServiceOrder.timer_start, ServiceOrder.id)
        ).all()
        return [order_row(o, p, u) for o, p, u in results]

    def get_orders_with_expired_timers(
        self,
        threshold_minutes: int = 30,
        now: Optional[datetime] = None,
    ) -> List[dict]:
        now = now or datetime.utcnow()
        cutoff = now - timedelta(minutes=threshold_minutes)

        results = self.session.exec(
            self._active_timer_query()
            .where(ServiceOrder.auto_advance_enabled == True)  # noqa: E712
            .where(ServiceOrder.timer_start <= cutoff)
            .order_by(ServiceOrder.timer_start, ServiceOrder.id)
        ).all()
        return [order_row(o, p, u) for o, p, u in results]

    # ---------- stage advancement ----------

    def _write_stage(self, order: ServiceOrder, next_stage: str) -> None:
        """
        Compare-and-swap on the stage read by the caller.

        status and process_stage are always written together.
        """
        order_id, status, stage = order.id, order.status, order.process_stage
        updated = self._update_order(
            order_id,
            ServiceOrder.status == status,
            matches(ServiceOrder.process_stage, stage),
            status=next_stage,
            process_stage=next_stage,
        )
        if updated:
            return

        self.session.rollback()
        if not self._order_exists(order_id):
            raise NotFoundError(f"Service order {order_id} not found")
        raise ConflictError(
            f"Service order {order_id} changed while advancing from {status!r}"
        )

    def advance_to_next_status(self, order_id: int, created_by: str = "admin") -> str:
        order = self._get_order(order_id)
        previous = order.status
        next_status = next_full_stage(previous)

        self._write_stage(order, next_status)
        log_order_event(
            self.session,
            order_id,
            OrderEventType.STATUS_ADVANCED,
            f"Status advanced to {next_status}",
            created_by=created_by,
            meta={"from": previous, "to": next_status},
        )
        self.session.commit()
        logger.info("Order %s advanced %s -> %s", order_id, previous, next_status)
        return next_status

    def auto_advance_order(self, order_id: int, created_by: str = "system") -> str:
        order = self._get_order(order_id)
        current = current_auto_stage(order.process_stage, order.status)
        next_stage = next_auto_stage(current)
        if next_stage == OrderStatus.COMPLETED.value:
            logger.info("Order %s is completed, auto-advance skipped", order_id)
            return next_stage

        self._write_stage(order, next_stage)
        log_order_event(
            self.session,
            order_id,
            OrderEventType.STATUS_AUTO_ADVANCED,
            f"Status auto-advanced to {next_stage}",
            created_by=created_by,
            meta={"from": current, "to": next_stage},
        )
        self.session.commit()
        logger.info("Order %s auto-advanced %s -> %s", order_id, current, next_stage)
        return next_stage
