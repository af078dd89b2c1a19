from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    __tablename__ = "users"

    user_id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True)
    role: str = Field(default="user")  # user | admin
    created_at: datetime = Field(default_factory=datetime.utcnow)
