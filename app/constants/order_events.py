from enum import Enum


class OrderEventType(str, Enum):
    ORDER_PLACED = "order_placed"
    ORDER_APPROVED = "order_approved"
    TIMER_STARTED = "timer_started"
    TIMER_STOPPED = "timer_stopped"
    AUTO_ADVANCE_TOGGLED = "auto_advance_toggled"
    STATUS_ADVANCED = "status_advanced"
    STATUS_AUTO_ADVANCED = "status_auto_advanced"
    PAYMENT_STATUS_UPDATED = "payment_status_updated"
    PAYMENT_PROOF_SUBMITTED = "payment_proof_submitted"
    PAYMENT_REVIEWED = "payment_reviewed"
    ORDER_COMPLETED = "order_completed"
    MOVED_TO_HISTORY = "moved_to_history"
    SOFT_DELETED = "soft_deleted"
    RESTORED = "restored"
