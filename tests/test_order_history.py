from datetime import datetime, timedelta

import pytest

from app.models.order_event import OrderEvent
from app.models.payment import Payment
from app.services.exceptions import (
    AlreadyDeletedError,
    InvalidArgumentError,
    NotEligibleError,
    NotFoundError,
)
from app.services.order_history import OrderHistoryService, history_timestamp
from app.services.order_timer import OrderTimerService
from sqlmodel import select

T0 = datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def history(session):
    return OrderHistoryService(session)


def _complete(session, order_id):
    timers = OrderTimerService(session)
    for _ in range(6):
        timers.advance_to_next_status(order_id)


def test_move_to_history_requires_completed(history, make_order, reload):
    order = make_order()
    before = reload(order.id).model_dump()

    with pytest.raises(NotEligibleError):
        history.move_to_history(order.id)

    assert reload(order.id).model_dump() == before


def test_move_to_history_archives_completed_order(session, history, make_order, reload):
    order = make_order()
    _complete(session, order.id)

    history.move_to_history(order.id, now=T0)

    saved = reload(order.id)
    assert saved.moved_to_history_at == T0
    assert saved.status == "completed"
    with pytest.raises(NotEligibleError):
        history.move_to_history(order.id)


def test_move_to_history_missing_order(history):
    with pytest.raises(NotEligibleError):
        history.move_to_history(999)


def test_complete_order_archives_in_one_step(history, make_order, reload):
    order = make_order()

    history.complete_order(order.id, now=T0)

    saved = reload(order.id)
    assert saved.status == saved.process_stage == "completed"
    assert saved.moved_to_history_at == T0
    with pytest.raises(NotEligibleError):
        history.complete_order(order.id)
    with pytest.raises(NotFoundError):
        history.complete_order(999)


def test_complete_order_rejects_soft_deleted(history, make_order, reload):
    order = make_order()
    history.soft_delete(order.id, now=T0)

    with pytest.raises(NotEligibleError):
        history.complete_order(order.id)

    saved = reload(order.id)
    assert saved.status == "pending"
    assert saved.moved_to_history_at is None


def test_soft_delete_twice(history, make_order, reload):
    order = make_order()

    history.soft_delete(order.id, now=T0)

    saved = reload(order.id)
    assert saved.is_deleted is True
    assert saved.deleted_at == T0
    with pytest.raises(AlreadyDeletedError):
        history.soft_delete(order.id)
    with pytest.raises(NotFoundError):
        history.soft_delete(999)


def test_restore_clears_both_markers(history, make_order, reload):
    order = make_order()
    history.complete_order(order.id, now=T0)
    history.soft_delete(order.id, now=T0)

    history.restore_from_history(order.id)

    saved = reload(order.id)
    assert saved.moved_to_history_at is None
    assert saved.is_deleted is False
    assert saved.deleted_at is None
    with pytest.raises(NotFoundError):
        history.restore_from_history(order.id)


def test_delete_from_history_only_for_history_orders(session, history, make_order):
    live = make_order()

    with pytest.raises(NotFoundError):
        history.delete_from_history(live.id)
    with pytest.raises(NotFoundError):
        history.delete_from_history(999)


def test_delete_from_history_purges_dependants(session, history, make_order, reload):
    order = make_order(payment_method="gcash")
    history.soft_delete(order.id)

    history.delete_from_history(order.id)

    assert reload(order.id) is None
    assert session.exec(select(Payment).where(Payment.service_orders_id == order.id)).first() is None
    assert session.exec(select(OrderEvent).where(OrderEvent.order_id == order.id)).first() is None


def test_history_lists_completed_and_deleted_once(session, history, make_order):
    archived = make_order()
    history.complete_order(archived.id, now=T0)
    deleted = make_order()
    history.soft_delete(deleted.id, now=T0 + timedelta(hours=1))
    both = make_order()
    history.complete_order(both.id, now=T0 - timedelta(days=1))
    history.soft_delete(both.id, now=T0 + timedelta(hours=2))
    make_order()  # still active

    items = history.get_history()

    assert len(items) == 3
    assert sorted(item["id"] for item in items) == sorted([archived.id, deleted.id, both.id])
    assert all(item["type"] == "service_order" for item in items)
    first = next(item for item in items if item["id"] == archived.id)
    assert first["payment_method"] == "cash"
    assert first["payment_status"] == "unpaid"
    assert first["name"] == "Ana Reyes"


def test_history_sorted_by_most_recent_timestamp():
    old = datetime(2025, 1, 1)
    items = [
        {"id": 1, "moved_to_history_at": old, "deleted_at": None, "updated_at": old},
        {"id": 2, "moved_to_history_at": old, "deleted_at": old + timedelta(days=5), "updated_at": old},
        {"id": 3, "moved_to_history_at": None, "deleted_at": None, "updated_at": old + timedelta(days=2)},
    ]

    items.sort(key=history_timestamp, reverse=True)

    assert [item["id"] for item in items] == [2, 3, 1]


def test_history_by_type(history, make_order):
    archived = make_order()
    history.complete_order(archived.id, now=T0)
    deleted = make_order()
    history.soft_delete(deleted.id, now=T0)
    archived_then_deleted = make_order()
    history.complete_order(archived_then_deleted.id, now=T0)
    history.soft_delete(archived_then_deleted.id, now=T0 + timedelta(minutes=5))

    completed = [item["id"] for item in history.get_history_by_type("completed")]
    removed = [item["id"] for item in history.get_history_by_type("deleted")]

    assert completed == [archived.id]
    assert removed == [archived_then_deleted.id, deleted.id]
    with pytest.raises(InvalidArgumentError):
        history.get_history_by_type("cancelled")
