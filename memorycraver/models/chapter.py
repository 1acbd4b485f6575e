import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Chapter(SQLModel, table=True):
    __tablename__ = "chapters"
    __table_args__ = (
        UniqueConstraint("book_id", "chapter_number", name="unique_chapter_number_per_book"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # NULL = standalone chapter
    book_id: Optional[uuid.UUID] = Field(default=None, foreign_key="books.id", index=True)

    title: str
    description: str = ""
    chapter_number: int = Field(gt=0)
    price: float = Field(default=0, ge=0)
    is_free: bool = Field(default=False)
    is_published: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_purchasable(self) -> bool:
        return self.is_published and not self.is_free and self.price > 0
