import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class EmailNotificationLog(SQLModel, table=True):
    __tablename__ = "email_notifications_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    chapter_id: uuid.UUID = Field(foreign_key="chapters.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="profiles.id")
    email: str
    notification_type: str = "chapter_published"
    success: bool
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
