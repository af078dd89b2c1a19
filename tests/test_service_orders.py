import pytest

from app.services.exceptions import InvalidArgumentError, NotEligibleError, NotFoundError
from app.services.order_history import OrderHistoryService
from app.services.service_orders import ServiceOrderService


def test_create_order_starts_pending_without_timer(make_order):
    order = make_order(laundry_photos=["uploads/a.jpg"])

    assert order.status == order.process_stage == "pending"
    assert order.timer_start is None
    assert order.timer_end is None
    assert order.laundry_photos == ["uploads/a.jpg"]


def test_create_order_with_bad_method_leaves_nothing(session, customer):
    orders = ServiceOrderService(session)

    with pytest.raises(InvalidArgumentError):
        orders.create_order(
            {"customer_id": customer.customer_id, "service_type": "wash", "total_price": 50.0},
            "iou",
        )

    assert orders.list_active_orders()["total_items"] == 0


def test_approve_only_pending(session, make_order, reload):
    orders = ServiceOrderService(session)
    order = make_order()

    assert orders.approve_order(order.id) == "approved"
    assert reload(order.id).process_stage == "approved"
    with pytest.raises(NotEligibleError):
        orders.approve_order(order.id)
    with pytest.raises(NotFoundError):
        orders.approve_order(999)


def test_list_active_orders_paginates_and_filters(session, make_order):
    orders = ServiceOrderService(session)
    created = [make_order() for _ in range(3)]
    OrderHistoryService(session).soft_delete(created[0].id)
    orders.approve_order(created[1].id)

    page = orders.list_active_orders(page=1, limit=1)
    approved = orders.list_active_orders(status="approved")

    assert page["total_items"] == 2
    assert page["total_pages"] == 2
    assert len(page["results"]) == 1
    assert [row["id"] for row in approved["results"]] == [created[1].id]


def test_customer_owns_order(session, make_order, customer, admin_user):
    orders = ServiceOrderService(session)
    order = make_order()

    assert orders.customer_owns_order(order.id, customer.user_id)
    assert not orders.customer_owns_order(order.id, admin_user.user_id)


def test_order_stats_count_active_orders_per_stage(session, make_order):
    orders = ServiceOrderService(session)
    history = OrderHistoryService(session)
    make_order(total_price=100.0)
    approved = make_order(total_price=50.0)
    archived = make_order()
    deleted = make_order()
    orders.approve_order(approved.id)
    history.complete_order(archived.id)
    history.soft_delete(deleted.id)

    stats = orders.get_order_stats()

    assert stats["total_orders"] == 2
    assert stats["pending_orders"] == 1
    assert stats["approved_orders"] == 1
    assert stats["washing_orders"] == stats["completed_orders"] == 0
    assert stats["total_revenue"] == 150.0


def test_order_stats_on_empty_table(session):
    stats = ServiceOrderService(session).get_order_stats()

    assert stats["total_orders"] == 0
    assert stats["ready_orders"] == 0
    assert stats["total_revenue"] == 0.0


def test_status_distribution_most_common_first(session, make_order):
    orders = ServiceOrderService(session)
    created = [make_order() for _ in range(3)]
    orders.approve_order(created[0].id)
    OrderHistoryService(session).soft_delete(created[1].id)

    assert orders.get_status_distribution() == [
        {"status": "approved", "count": 1},
        {"status": "pending", "count": 1},
    ]


def test_timestamps_are_stored_naive(session, make_order, reload):
    order = make_order()
    OrderHistoryService(session).soft_delete(order.id)

    saved = reload(order.id)

    assert saved.created_at.tzinfo is None
    assert saved.deleted_at.tzinfo is None
