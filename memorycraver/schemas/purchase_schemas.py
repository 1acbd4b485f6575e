import uuid
from typing import List, Optional

from pydantic import Field

from memorycraver.schemas.base import CamelModel

# Upper bound for a single checkout, in rupees
MAX_ORDER_AMOUNT = 1_000_000


class CreateOrderSchema(CamelModel):
    chapter_id: uuid.UUID
    amount: float = Field(le=MAX_ORDER_AMOUNT, allow_inf_nan=False)
    book_id: Optional[uuid.UUID] = None


class CreateBulkOrderSchema(CamelModel):
    chapter_ids: List[uuid.UUID]
    total_amount: float = Field(le=MAX_ORDER_AMOUNT, allow_inf_nan=False)
    book_id: uuid.UUID


class RazorpayVerifyBase(CamelModel):
    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)


class VerifyPaymentSchema(RazorpayVerifyBase):
    chapter_id: uuid.UUID


class VerifyBulkPaymentSchema(RazorpayVerifyBase):
    chapter_ids: List[uuid.UUID]
