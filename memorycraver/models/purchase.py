import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field

from memorycraver.constants.payment_status import PaymentStatus


class Purchase(SQLModel, table=True):
    __tablename__ = "purchases"
    __table_args__ = (
        # at most one completed purchase per (user, chapter)
        Index(
            "uq_purchases_user_chapter_completed",
            "user_id",
            "chapter_id",
            unique=True,
            postgresql_where=text("payment_status = 'completed'"),
            sqlite_where=text("payment_status = 'completed'"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    user_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)
    chapter_id: uuid.UUID = Field(foreign_key="chapters.id", index=True)

    amount_paid: float = Field(ge=0)

    gateway_order_id: str = Field(index=True)
    gateway_payment_id: Optional[str] = None

    payment_status: str = Field(default=PaymentStatus.pending.value, index=True)

    purchased_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
