from typing import Optional

from app.constants.order_status import (
    AUTO_ADVANCE_TRANSITIONS,
    FULL_TRANSITIONS,
    OrderStatus,
)
from app.services.exceptions import InvalidTransitionError


def next_full_stage(current: Optional[str]) -> str:
    """
    Next stage for a manual advance.

    Unknown stages and the final stage are rejected alike.
    """
    if current not in FULL_TRANSITIONS:
        raise InvalidTransitionError(f"Cannot advance order status from {current!r}")
    return FULL_TRANSITIONS[current]


def current_auto_stage(process_stage: Optional[str], status: Optional[str]) -> str:
    # completed is terminal and never re-enters the timer sequence
    if OrderStatus.COMPLETED.value in (process_stage, status):
        return OrderStatus.COMPLETED.value
    for stage in (process_stage, status):
        if stage in AUTO_ADVANCE_TRANSITIONS:
            return stage
    return OrderStatus.PENDING.value


def next_auto_stage(current: str) -> str:
    """Next stage for a timer driven advance, clamped at ready."""
    if current == OrderStatus.COMPLETED.value:
        return current
    return AUTO_ADVANCE_TRANSITIONS.get(current, OrderStatus.READY.value)
