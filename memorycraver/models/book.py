import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Book(SQLModel, table=True):
    __tablename__ = "books"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str
    author_note: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_published: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
