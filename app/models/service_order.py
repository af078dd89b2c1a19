from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime


class ServiceOrder(SQLModel, table=True):
    __tablename__ = "service_orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: Optional[int] = Field(
        default=None, foreign_key="customers_profiles.customer_id", index=True
    )

    service_type: str
    pickup_date: Optional[str] = None
    pickup_time: Optional[str] = None
    load_count: int = Field(default=1)
    total_price: float = Field(default=0)
    instructions: Optional[str] = None
    laundry_photos: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))

    status: str = Field(default="pending", index=True)
    process_stage: Optional[str] = Field(default="pending")

    # timer
    timer_start: Optional[datetime] = Field(default=None, index=True)
    timer_end: Optional[datetime] = None
    current_timer_status: Optional[str] = None
    auto_advance_enabled: bool = Field(default=False)

    # archive / soft delete
    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = None
    moved_to_history_at: Optional[datetime] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow},
    )
