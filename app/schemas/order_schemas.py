from typing import List, Optional

from pydantic import BaseModel, Field

from app.constants.order_status import PaymentMethod


class OrderCreate(BaseModel):
    service_type: str
    pickup_date: Optional[str] = None
    pickup_time: Optional[str] = None
    load_count: int = Field(default=1, ge=1)
    total_price: float = Field(default=0, ge=0)
    instructions: Optional[str] = None
    laundry_photos: Optional[List[str]] = None
    payment_method: PaymentMethod = PaymentMethod.CASH


class AdminOrderCreate(OrderCreate):
    customer_id: int


class OrderCreatedResponse(BaseModel):
    message: str
    order_id: int
    status: str


class StatusChangeResponse(BaseModel):
    message: str
    order_id: int
    status: str
