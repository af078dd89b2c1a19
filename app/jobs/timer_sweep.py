import logging
from typing import List, Optional, Tuple

from sqlmodel import Session

from app.config import settings
from app.constants.order_status import OrderStatus
from app.services.exceptions import ConflictError, NotFoundError
from app.services.order_timer import OrderTimerService

logger = logging.getLogger(__name__)


def auto_advance_expired_orders(
    session: Session,
    threshold_minutes: Optional[int] = None,
) -> List[Tuple[int, str]]:
    """
    Advance every order whose timer ran past the threshold, oldest first.

    Meant to be called by an external scheduler.
    """
    if threshold_minutes is None:
        threshold_minutes = settings.timer_expiry_minutes

    timers = OrderTimerService(session)
    advanced = []

    for row in timers.get_orders_with_expired_timers(threshold_minutes):
        order_id = row["id"]
        if row["status"] == OrderStatus.COMPLETED.value:
            continue
        try:
            advanced.append((order_id, timers.auto_advance_order(order_id)))
        except (ConflictError, NotFoundError) as e:
            logger.warning("Skipped auto-advance for order %s: %s", order_id, e)

    logger.info("Auto-advanced %s orders with expired timers", len(advanced))
    return advanced


def run():
    from app.database import engine

    with Session(engine) as session:
        auto_advance_expired_orders(session)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
