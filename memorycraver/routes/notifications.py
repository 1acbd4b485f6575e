from fastapi import APIRouter, Depends
from sqlmodel import Session

from memorycraver.database import get_session
from memorycraver.dependencies.admin import require_author
from memorycraver.models.profile import Profile
from memorycraver.schemas.notification_schemas import ChapterNotificationSchema
from memorycraver.services.chapter_notification_service import notify_chapter_published

router = APIRouter()


@router.post("/chapter-published")
def send_chapter_notification(
    payload: ChapterNotificationSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_author),
):
    return notify_chapter_published(
        session=session,
        chapter_id=payload.chapter_id,
        book_id=payload.book_id,
        sender=current_user,
    )
