import logging
from typing import List, Optional

from sqlalchemy import case, update
from sqlmodel import Session, func, select

from app.constants.order_events import OrderEventType
from app.constants.order_status import OrderStatus
from app.models.customer_profile import CustomerProfile
from app.models.service_order import ServiceOrder
from app.services.exceptions import NotEligibleError, NotFoundError
from app.services.order_event_service import log_order_event
from app.services.order_queries import not_archived, order_row, order_with_payment_query
from app.services.payment_records import PaymentRecordService
from app.utils.pagination import paginate

logger = logging.getLogger(__name__)


class ServiceOrderService:
    def __init__(self, session: Session):
        self.session = session

    def create_order(self, order_data: dict, payment_method: str, created_by: str = "customer") -> ServiceOrder:
        """
        Book a new order together with its payment row.

        The payment copies the order total at creation time.
        """
        data = dict(order_data)
        data.update(
            status=OrderStatus.PENDING.value,
            process_stage=OrderStatus.PENDING.value,
        )
        try:
            order = ServiceOrder(**data)
            self.session.add(order)
            self.session.flush()  # get order.id for the payment

            PaymentRecordService(self.session).add(
                {
                    "service_orders_id": order.id,
                    "payment_method": payment_method,
                    "total_price": order.total_price,
                }
            )
            log_order_event(
                self.session,
                order.id,
                OrderEventType.ORDER_PLACED,
                "Order placed",
                created_by=created_by,
                meta={"payment_method": payment_method},
            )
            self.session.commit()
        except Exception:
            # Rollback entire transaction if any part fails
            self.session.rollback()
            raise

        self.session.refresh(order)
        logger.info("Order %s created with %s payment", order.id, payment_method)
        return order

    def approve_order(self, order_id: int) -> str:
        result = self.session.exec(
            update(ServiceOrder)
            .where(
                ServiceOrder.id == order_id,
                ServiceOrder.status == OrderStatus.PENDING.value,
            )
            .values(
                status=OrderStatus.APPROVED.value,
                process_stage=OrderStatus.APPROVED.value,
            )
        )
        if not result.rowcount:
            self.session.rollback()
            exists = self.session.exec(
                select(ServiceOrder.id).where(ServiceOrder.id == order_id)
            ).first()
            if exists is None:
                raise NotFoundError(f"Service order {order_id} not found")
            raise NotEligibleError(f"Service order {order_id} is not pending")

        log_order_event(
            self.session, order_id, OrderEventType.ORDER_APPROVED, "Order approved", created_by="admin"
        )
        self.session.commit()
        logger.info("Order %s approved", order_id)
        return OrderStatus.APPROVED.value

    def customer_owns_order(self, order_id: int, user_id: int) -> bool:
        return self.session.exec(
            select(ServiceOrder.id)
            .join(CustomerProfile, CustomerProfile.customer_id == ServiceOrder.customer_id)
            .where(ServiceOrder.id == order_id, CustomerProfile.user_id == user_id)
        ).first() is not None

    def get_customer_profile(self, user_id: int) -> Optional[CustomerProfile]:
        return self.session.exec(
            select(CustomerProfile).where(CustomerProfile.user_id == user_id)
        ).first()

    def list_active_orders(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> dict:
        query = order_with_payment_query().where(*not_archived())
        if status:
            query = query.where(ServiceOrder.status == status)
        if user_id is not None:
            query = query.where(CustomerProfile.user_id == user_id)

        return paginate(
            session=self.session,
            query=query.order_by(ServiceOrder.created_at.desc(), ServiceOrder.id.desc()),
            page=page,
            limit=limit,
            serialize=lambda row: order_row(row[0], row[1], payment=row[2]),
        )

    # ---------- stats ----------

    def get_order_stats(self) -> dict:
        """Counts per stage and revenue over active orders."""
        columns = [func.count(ServiceOrder.id).label("total_orders")]
        columns += [
            func.coalesce(
                func.sum(case((ServiceOrder.status == stage.value, 1), else_=0)), 0
            ).label(f"{stage.value}_orders")
            for stage in OrderStatus
        ]
        columns.append(
            func.coalesce(func.sum(ServiceOrder.total_price), 0).label("total_revenue")
        )

        row = self.session.exec(select(*columns).where(*not_archived())).one()
        stats = {key: int(value) for key, value in row._mapping.items()}
        stats["total_revenue"] = float(row.total_revenue)
        return stats

    def get_status_distribution(self) -> List[dict]:
        count = func.count(ServiceOrder.id).label("count")
        results = self.session.exec(
            select(ServiceOrder.status, count)
            .where(*not_archived())
            .group_by(ServiceOrder.status)
            .order_by(count.desc(), ServiceOrder.status)
        ).all()
        return [{"status": status, "count": n} for status, n in results]
