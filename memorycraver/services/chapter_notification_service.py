import logging
import time
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from memorycraver.config import settings
from memorycraver.errors import HandlerError
from memorycraver.models.book import Book
from memorycraver.models.chapter import Chapter
from memorycraver.models.email_log import EmailNotificationLog
from memorycraver.models.profile import Profile
from memorycraver.services.email_service import EmailDeliveryError, chunked, send_email
from memorycraver.utils.template import render_template

logger = logging.getLogger(__name__)

BATCH_SIZE = 50
BATCH_DELAY_SECONDS = 1


def notification_recipients(session: Session, exclude_user_id: Optional[uuid.UUID] = None):
    query = select(Profile).where(Profile.email_notifications_enabled == True)  # noqa: E712
    if exclude_user_id is not None:
        query = query.where(Profile.id != exclude_user_id)
    return session.exec(query.order_by(Profile.created_at)).all()


def chapter_url(chapter: Chapter, book_id: Optional[uuid.UUID]) -> str:
    if book_id:
        return f"{settings.SITE_URL}/book/{book_id}/chapter/{chapter.chapter_number}"
    return f"{settings.SITE_URL}/chapter/{chapter.id}"


def notify_chapter_published(
    *,
    session: Session,
    chapter_id: uuid.UUID,
    book_id: Optional[uuid.UUID],
    sender: Profile,
) -> dict:
    chapter = session.get(Chapter, chapter_id)
    if not chapter:
        raise HandlerError("Chapter not found")

    logger.info(f"Processing notification for chapter: {chapter.title}")

    recipients = notification_recipients(session, exclude_user_id=sender.id)
    if not recipients:
        logger.info("No recipients to notify")
        return {"success": True, "message": "No recipients to notify", "sent": 0}

    book = session.get(Book, chapter.book_id) if chapter.book_id else None
    link = chapter_url(chapter, book_id or chapter.book_id)

    sent = 0
    failed = 0

    batches = list(chunked(recipients, BATCH_SIZE))
    for index, batch in enumerate(batches):
        for recipient in batch:
            html = render_template(
                "user_emails/chapter_published.html",
                full_name=recipient.full_name,
                chapter=chapter,
                book_title=book.title if book else "Standalone Chapter",
                chapter_url=link,
                unsubscribe_url=f"{settings.SITE_URL}/settings?unsubscribe=true",
                store_name=settings.STORE_NAME,
                year=datetime.utcnow().year,
            )

            log = EmailNotificationLog(
                chapter_id=chapter.id,
                user_id=recipient.id,
                email=recipient.email,
                notification_type="chapter_published",
                success=True,
            )

            try:
                send_email(
                    to=recipient.email,
                    to_name=recipient.full_name,
                    subject=f"New Chapter Published: {chapter.title}",
                    html=html,
                )
                sent += 1
            except EmailDeliveryError as e:
                failed += 1
                log.success = False
                log.error_message = str(e)
                logger.warning(f"Failed to send to {recipient.email}: {e}")

            session.add(log)

        session.commit()

        # stay under Brevo's rate limit
        if index < len(batches) - 1:
            time.sleep(BATCH_DELAY_SECONDS)

    logger.info(f"Chapter {chapter.id} notification: sent {sent}, failed {failed}")

    return {
        "success": True,
        "sent": sent,
        "failed": failed,
        "total": len(recipients),
        "chapterTitle": chapter.title,
    }
