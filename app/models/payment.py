from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Payment(SQLModel, table=True):
    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)

    # one payment row per order
    service_orders_id: int = Field(
        foreign_key="service_orders.id", unique=True, index=True, ondelete="CASCADE"
    )

    payment_method: str  # cash | gcash | card
    total_price: float
    payment_status: str = Field(default="unpaid")  # paid | unpaid

    # mobile wallet only
    payment_proof: Optional[str] = None
    reference_id: Optional[str] = None
    payment_review_status: str = Field(default="pending")  # pending | approved | rejected

    created_at: datetime = Field(default_factory=datetime.utcnow)
