import logging
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, func, select

from app.constants.order_events import OrderEventType
from app.constants.order_status import (
    PaymentMethod,
    PaymentReviewStatus,
    PaymentStatus,
)
from app.models.payment import Payment
from app.models.service_order import ServiceOrder
from app.services.exceptions import (
    InvalidArgumentError,
    NotEligibleError,
    NotFoundError,
)
from app.services.order_event_service import log_order_event
from app.services.order_queries import not_archived, order_row, order_with_payment_query

logger = logging.getLogger(__name__)

REVIEW_STATUSES = {s.value for s in PaymentReviewStatus}
PAYMENT_METHODS = {m.value for m in PaymentMethod}


def _validate_review_status(status: str) -> None:
    if status not in REVIEW_STATUSES:
        raise InvalidArgumentError(f"Invalid payment review status: {status!r}")


class PaymentRecordService:
    def __init__(self, session: Session):
        self.session = session

    def _update_payment(self, order_id: int, *conditions, **values) -> int:
        result = self.session.exec(
            update(Payment)
            .where(Payment.service_orders_id == order_id, *conditions)
            .values(**values)
        )
        return result.rowcount

    def get_by_order(self, order_id: int) -> Optional[Payment]:
        return self.session.exec(
            select(Payment).where(Payment.service_orders_id == order_id)
        ).first()

    def add(self, payment_data: dict) -> Payment:
        """Stage a new payment row in the session without committing."""
        data = dict(payment_data)
        if data.get("payment_method") not in PAYMENT_METHODS:
            raise InvalidArgumentError(
                f"Invalid payment method: {data.get('payment_method')!r}"
            )
        if data.get("payment_status") is None:
            data["payment_status"] = PaymentStatus.UNPAID.value
        if data.get("payment_review_status") is None:
            data["payment_review_status"] = PaymentReviewStatus.PENDING.value

        if self.get_by_order(data["service_orders_id"]):
            raise NotEligibleError(
                f"Payment already exists for order {data['service_orders_id']}"
            )

        payment = Payment(**data)
        self.session.add(payment)
        self.session.flush()
        return payment

    def create(self, payment_data: dict) -> int:
        try:
            payment = self.add(payment_data)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return payment.id

    def update_payment_status(self, order_id: int, status: str) -> int:
        updated = self._update_payment(order_id, payment_status=status)
        if not updated:
            self.session.rollback()
            raise NotFoundError(f"Payment record for order {order_id} not found")

        log_order_event(
            self.session,
            order_id,
            OrderEventType.PAYMENT_STATUS_UPDATED,
            f"Payment status set to {status}",
            created_by="admin",
            meta={"payment_status": status},
        )
        self.session.commit()
        return updated

    def submit_payment_proof(self, order_id: int, proof: str, reference_number: str) -> int:
        """
        Attach wallet proof of payment.

        Re-submission always puts the payment back into review. Orders paid
        by another method are reported as not found.
        """
        updated = self._update_payment(
            order_id,
            Payment.payment_method == PaymentMethod.MOBILE_WALLET.value,
            payment_proof=proof,
            reference_id=reference_number,
            payment_review_status=PaymentReviewStatus.PENDING.value,
        )
        if not updated:
            self.session.rollback()
            raise NotFoundError(
                f"Mobile wallet payment for order {order_id} not found"
            )

        log_order_event(
            self.session,
            order_id,
            OrderEventType.PAYMENT_PROOF_SUBMITTED,
            "Payment proof submitted",
            created_by="customer",
            meta={"reference_id": reference_number},
        )
        self.session.commit()
        logger.info("Payment proof submitted for order %s", order_id)
        return updated

    def update_wallet_review_status(self, order_id: int, status: str) -> int:
        _validate_review_status(status)

        updated = self._update_payment(
            order_id,
            Payment.payment_method == PaymentMethod.MOBILE_WALLET.value,
            payment_review_status=status,
        )
        if not updated:
            self.session.rollback()
            raise NotFoundError(
                f"Mobile wallet payment for order {order_id} not found"
            )
        self.session.commit()
        return updated

    def review_wallet_payment(self, order_id: int, status: str) -> Payment:
        """Admin decision on a wallet payment; approval also marks it paid."""
        if status not in (
            PaymentReviewStatus.APPROVED.value,
            PaymentReviewStatus.REJECTED.value,
        ):
            raise InvalidArgumentError(f"Review decision must be approved or rejected, got {status!r}")

        values = {"payment_review_status": status}
        if status == PaymentReviewStatus.APPROVED.value:
            values["payment_status"] = PaymentStatus.PAID.value

        updated = self._update_payment(
            order_id,
            Payment.payment_method == PaymentMethod.MOBILE_WALLET.value,
            **values,
        )
        if not updated:
            self.session.rollback()
            raise NotFoundError(
                f"Mobile wallet payment for order {order_id} not found"
            )

        log_order_event(
            self.session,
            order_id,
            OrderEventType.PAYMENT_REVIEWED,
            f"Mobile wallet payment {status}",
            created_by="admin",
            meta=values,
        )
        self.session.commit()
        logger.info("Wallet payment for order %s %s", order_id, status)
        return self.get_by_order(order_id)

    def get_orders_by_wallet_review_status(self, status: str) -> List[dict]:
        _validate_review_status(status)

        results = self.session.exec(
            order_with_payment_query()
            .where(Payment.payment_method == PaymentMethod.MOBILE_WALLET.value)
            .where(Payment.payment_review_status == status)
            .where(*not_archived())
            .order_by(ServiceOrder.created_at.desc(), ServiceOrder.id.desc())
        ).all()
        return [order_row(o, p, payment=pay) for o, p, pay in results]

    def get_payment_method_analytics(self) -> List[dict]:
        count = func.count(Payment.id).label("count")
        results = self.session.exec(
            select(
                Payment.payment_method,
                count,
                func.coalesce(func.sum(Payment.total_price), 0).label("total_revenue"),
            )
            .select_from(Payment)
            .join(ServiceOrder, ServiceOrder.id == Payment.service_orders_id)
            .where(*not_archived())
            .group_by(Payment.payment_method)
            .order_by(count.desc(), Payment.payment_method)
        ).all()

        return [
            {
                "payment_method": method,
                "count": n,
                "total_revenue": float(revenue),
            }
            for method, n, revenue in results
        ]
