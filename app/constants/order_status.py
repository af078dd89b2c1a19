from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    WASHING = "washing"
    DRYING = "drying"
    FOLDING = "folding"
    READY = "ready"
    COMPLETED = "completed"


# manual advance, admin driven
FULL_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.APPROVED,
    OrderStatus.WASHING,
    OrderStatus.DRYING,
    OrderStatus.FOLDING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)

# timer driven, skips approval and stops at ready
AUTO_ADVANCE_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.WASHING,
    OrderStatus.DRYING,
    OrderStatus.FOLDING,
    OrderStatus.READY,
)


def _transition_table(sequence):
    return {
        current.value: following.value
        for current, following in zip(sequence, sequence[1:])
    }


FULL_TRANSITIONS = _transition_table(FULL_SEQUENCE)

# ready loops onto itself
AUTO_ADVANCE_TRANSITIONS = {
    **_transition_table(AUTO_ADVANCE_SEQUENCE),
    OrderStatus.READY.value: OrderStatus.READY.value,
}


class PaymentMethod(str, Enum):
    CASH = "cash"
    MOBILE_WALLET = "gcash"
    CARD = "card"


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class PaymentReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class HistoryType(str, Enum):
    COMPLETED = "completed"
    DELETED = "deleted"
