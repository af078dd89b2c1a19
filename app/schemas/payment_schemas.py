from typing import Literal, Optional

from pydantic import BaseModel


class PaymentStatusUpdate(BaseModel):
    payment_status: Literal["paid", "unpaid"]


class WalletReviewRequest(BaseModel):
    status: Literal["approved", "rejected"]
    admin_notes: Optional[str] = None


class PaymentProofSubmit(BaseModel):
    payment_proof: str
    reference_id: str


class PaymentMethodSummary(BaseModel):
    payment_method: str
    count: int
    total_revenue: float
