from sqlmodel import SQLModel, Field
from typing import Optional


class CustomerProfile(SQLModel, table=True):
    __tablename__ = "customers_profiles"

    customer_id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.user_id", index=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
