import uuid
from typing import Optional

from memorycraver.schemas.base import CamelModel


class ChapterNotificationSchema(CamelModel):
    chapter_id: uuid.UUID
    book_id: Optional[uuid.UUID] = None
