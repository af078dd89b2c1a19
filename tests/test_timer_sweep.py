from datetime import datetime, timedelta

from app.jobs.timer_sweep import auto_advance_expired_orders
from app.services.order_history import OrderHistoryService
from app.services.order_timer import OrderTimerService

NOW = datetime.utcnow()


def test_sweep_advances_expired_orders_oldest_first(session, make_order, reload):
    timers = OrderTimerService(session)
    newer = make_order()
    older = make_order()
    fresh = make_order()
    timers.start_timer(newer.id, "washing", now=NOW - timedelta(minutes=40))
    timers.start_timer(older.id, "washing", now=NOW - timedelta(minutes=90))
    timers.start_timer(fresh.id, "washing", now=NOW - timedelta(minutes=5))

    advanced = auto_advance_expired_orders(session, threshold_minutes=30)

    assert advanced == [(older.id, "washing"), (newer.id, "washing")]
    assert reload(fresh.id).status == "pending"


def test_sweep_uses_configured_threshold(session, make_order, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "timer_expiry_minutes", 10)
    timers = OrderTimerService(session)
    order = make_order()
    timers.start_timer(order.id, "washing", now=NOW - timedelta(minutes=15))

    assert auto_advance_expired_orders(session) == [(order.id, "washing")]


def test_sweep_skips_orders_that_vanish(session, make_order, monkeypatch):
    timers = OrderTimerService(session)
    kept = make_order()
    purged = make_order()
    timers.start_timer(purged.id, "washing", now=NOW - timedelta(hours=2))
    timers.start_timer(kept.id, "washing", now=NOW - timedelta(hours=1))

    real_query = OrderTimerService.get_orders_with_expired_timers

    def expired_then_purge(self, threshold_minutes=30, now=None):
        rows = real_query(self, threshold_minutes, now)
        history = OrderHistoryService(session)
        history.soft_delete(purged.id)
        history.delete_from_history(purged.id)
        return rows

    monkeypatch.setattr(OrderTimerService, "get_orders_with_expired_timers", expired_then_purge)

    assert auto_advance_expired_orders(session, threshold_minutes=30) == [(kept.id, "washing")]


def test_sweep_leaves_completed_orders_alone(session, make_order, reload):
    timers = OrderTimerService(session)
    order = make_order()
    timers.start_timer(order.id, "washing", now=NOW - timedelta(hours=2))
    for _ in range(6):
        timers.advance_to_next_status(order.id)

    assert auto_advance_expired_orders(session, threshold_minutes=30) == []
    assert timers.auto_advance_order(order.id) == "completed"
    saved = reload(order.id)
    assert saved.status == saved.process_stage == "completed"
