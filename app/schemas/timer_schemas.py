from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StartTimerRequest(BaseModel):
    status: str


class AutoAdvanceToggle(BaseModel):
    enabled: bool


class TimerStatusResponse(BaseModel):
    timer_start: Optional[datetime] = None
    timer_end: Optional[datetime] = None
    current_timer_status: Optional[str] = None
    auto_advance_enabled: bool
    elapsed_time: int
    is_running: bool
