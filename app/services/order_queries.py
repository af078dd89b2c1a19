from typing import Optional

from sqlmodel import select

from app.models.customer_profile import CustomerProfile
from app.models.payment import Payment
from app.models.service_order import ServiceOrder
from app.models.user import User


def order_with_customer_query():
    return (
        select(ServiceOrder, CustomerProfile, User)
        .outerjoin(CustomerProfile, CustomerProfile.customer_id == ServiceOrder.customer_id)
        .outerjoin(User, User.user_id == CustomerProfile.user_id)
    )


def order_with_payment_query():
    return (
        select(ServiceOrder, CustomerProfile, Payment)
        .outerjoin(CustomerProfile, CustomerProfile.customer_id == ServiceOrder.customer_id)
        .outerjoin(Payment, Payment.service_orders_id == ServiceOrder.id)
    )


def not_archived():
    return (
        ServiceOrder.moved_to_history_at.is_(None),
        ServiceOrder.is_deleted == False,  # noqa: E712
    )


def matches(column, value):
    if value is None:
        return column.is_(None)
    return column == value


def order_row(
    order: ServiceOrder,
    profile: Optional[CustomerProfile] = None,
    user: Optional[User] = None,
    payment: Optional[Payment] = None,
) -> dict:
    """Flat read view of an order with its customer, account and payment columns."""
    row = order.model_dump()
    row.update(
        {
            "first_name": profile.first_name if profile else None,
            "last_name": profile.last_name if profile else None,
            "name": profile.name if profile else None,
            "contact": profile.contact if profile else None,
            "email": profile.email if profile else None,
            "address": profile.address if profile else None,
            "user_id": profile.user_id if profile else None,
        }
    )
    if user is not None:
        row["user_email"] = user.email
        row["role"] = user.role
    if payment is not None:
        row.update(
            {
                "payment_method": payment.payment_method,
                "payment_status": payment.payment_status,
                "payment_proof": payment.payment_proof,
                "reference_id": payment.reference_id,
                "payment_review_status": payment.payment_review_status,
            }
        )
    return row
