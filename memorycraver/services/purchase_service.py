import logging
import math
import time
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from memorycraver.config import settings
from memorycraver.constants.payment_status import (
    PaymentStatus,
    STALE_STATUSES,
    can_transition,
)
from memorycraver.errors import HandlerError
from memorycraver.models.chapter import Chapter
from memorycraver.models.profile import Profile
from memorycraver.models.purchase import Purchase
from memorycraver.services import razorpay_gateway

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = 0.01


def _load_chapters(session: Session, chapter_ids: List[uuid.UUID]) -> List[Chapter]:
    if len(set(chapter_ids)) != len(chapter_ids):
        raise HandlerError("Duplicate chapter IDs")

    chapters = session.exec(
        select(Chapter).where(Chapter.id.in_(chapter_ids))
    ).all()

    if len(chapters) != len(chapter_ids):
        raise HandlerError(
            "Chapter not found" if len(chapter_ids) == 1 else "Some chapters not found"
        )

    # keep request order
    by_id = {chapter.id: chapter for chapter in chapters}
    return [by_id[chapter_id] for chapter_id in chapter_ids]


def owned_chapter_ids(
    session: Session, user_id: uuid.UUID, chapter_ids: List[uuid.UUID]
) -> List[uuid.UUID]:
    rows = session.exec(
        select(Purchase.chapter_id).where(
            Purchase.user_id == user_id,
            Purchase.chapter_id.in_(chapter_ids),
            Purchase.payment_status == PaymentStatus.completed.value,
        )
    ).all()
    return list(dict.fromkeys(rows))


def expected_total(chapters: List[Chapter]) -> float:
    return round(sum(chapter.price for chapter in chapters), 2)


def _receipt_for(chapters: List[Chapter], book_id: Optional[uuid.UUID]) -> str:
    stamp = int(time.time() * 1000)
    if len(chapters) == 1:
        return f"ch_{chapters[0].id.hex[:8]}_{stamp}"
    prefix = book_id.hex[:8] if book_id else chapters[0].id.hex[:8]
    return f"bulk_{prefix}_{stamp}"


def create_purchase_order(
    *,
    session: Session,
    user: Profile,
    chapter_ids: List[uuid.UUID],
    claimed_amount: float,
    book_id: Optional[uuid.UUID] = None,
) -> dict:
    """
    Open a gateway order for one or more chapters and record a pending
    purchase per chapter.

    The stale-row deletion, the gateway call and the inserts share one
    transaction: nothing is committed unless the gateway order exists.
    """

    if not chapter_ids:
        raise HandlerError("Invalid chapter IDs")

    if claimed_amount is None or not math.isfinite(claimed_amount) or claimed_amount <= 0:
        raise HandlerError("Invalid amount")

    chapters = _load_chapters(session, chapter_ids)

    if book_id is not None and any(ch.book_id != book_id for ch in chapters):
        raise HandlerError("Some chapters do not belong to this book")

    unavailable = [ch for ch in chapters if not ch.is_purchasable]
    if unavailable:
        raise HandlerError(
            "Chapter is not available for purchase",
            unavailableIds=[str(ch.id) for ch in unavailable],
        )

    total = expected_total(chapters)
    # compared in paise to keep float noise out of the tolerance check
    gap = abs(razorpay_gateway.to_subunits(total) - razorpay_gateway.to_subunits(claimed_amount))
    if gap > razorpay_gateway.to_subunits(AMOUNT_TOLERANCE):
        raise HandlerError(f"Amount mismatch: expected {total}, got {claimed_amount}")

    already_owned = owned_chapter_ids(session, user.id, chapter_ids)
    if already_owned:
        raise HandlerError(
            "Chapter already purchased"
            if len(chapter_ids) == 1
            else "Some chapters are already purchased",
            alreadyOwned=True,
            alreadyOwnedIds=[str(chapter_id) for chapter_id in already_owned],
        )

    # Replace earlier pending / failed attempts for the same chapters
    stale = session.exec(
        select(Purchase).where(
            Purchase.user_id == user.id,
            Purchase.chapter_id.in_(chapter_ids),
            Purchase.payment_status.in_(STALE_STATUSES),
        )
    ).all()

    for purchase in stale:
        session.delete(purchase)

    try:
        order = razorpay_gateway.create_gateway_order(
            total,
            receipt=_receipt_for(chapters, book_id),
            notes={
                "user_id": str(user.id),
                "chapter_count": len(chapters),
            },
        )

        for chapter in chapters:
            session.add(Purchase(
                user_id=user.id,
                chapter_id=chapter.id,
                amount_paid=chapter.price,
                gateway_order_id=order["id"],
                payment_status=PaymentStatus.pending.value,
            ))

        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        f"Created order {order['id']} for user {user.id}: "
        f"{len(chapters)} chapter(s), total {total} "
        f"({len(stale)} stale purchase row(s) replaced)"
    )

    return {
        "orderId": order["id"],
        "amount": total,
        "currency": settings.CURRENCY,
        "keyId": settings.RAZORPAY_KEY_ID,
    }


def mark_order_failed(session: Session, user: Profile, gateway_order_id: str) -> int:
    purchases = session.exec(
        select(Purchase).where(
            Purchase.gateway_order_id == gateway_order_id,
            Purchase.user_id == user.id,
        )
    ).all()

    failed = 0
    for purchase in purchases:
        if not can_transition(purchase.payment_status, PaymentStatus.failed.value):
            continue
        purchase.payment_status = PaymentStatus.failed.value
        purchase.updated_at = datetime.utcnow()
        session.add(purchase)
        failed += 1

    session.commit()
    return failed


def _complete_purchase(
    session: Session, purchase: Purchase, gateway_payment_id: str
) -> bool:
    """
    Complete one purchase row in its own transaction.

    When the unique completed-purchase index rejects the row (the chapter is
    already owned through another order) the row is marked failed instead and
    False is returned; the captured payment needs a refund.
    """
    purchase_id = purchase.id
    purchase.payment_status = PaymentStatus.completed.value
    purchase.gateway_payment_id = gateway_payment_id
    purchase.updated_at = datetime.utcnow()
    session.add(purchase)

    try:
        session.commit()
        return True
    except IntegrityError:
        session.rollback()

    purchase = session.get(Purchase, purchase_id)
    purchase.payment_status = PaymentStatus.failed.value
    purchase.gateway_payment_id = gateway_payment_id
    purchase.updated_at = datetime.utcnow()
    session.add(purchase)
    session.commit()

    logger.warning(
        f"Payment {gateway_payment_id} on order {purchase.gateway_order_id} covers chapter "
        f"{purchase.chapter_id} that user {purchase.user_id} already owns; marked failed for refund"
    )
    return False


def verify_purchase_payment(
    *,
    session: Session,
    user: Profile,
    gateway_order_id: str,
    gateway_payment_id: str,
    signature: str,
    chapter_ids: List[uuid.UUID],
) -> int:
    """
    Reconcile a gateway payment callback.

    A bad signature fails every open purchase of the order and raises.
    A good one completes the purchases matching (order, user, chapters) and
    returns how many of them are now completed. Rows for chapters the user
    already owns through another order are marked failed; the rest still
    complete.
    """

    if not chapter_ids:
        raise HandlerError("Missing required fields")

    if not razorpay_gateway.verify_payment_signature(
        gateway_order_id, gateway_payment_id, signature
    ):
        failed = mark_order_failed(session, user, gateway_order_id)
        logger.warning(
            f"Invalid payment signature for order {gateway_order_id} "
            f"(user {user.id}); {failed} purchase row(s) marked failed"
        )
        raise HandlerError("Invalid payment signature", success=False)

    purchases = session.exec(
        select(Purchase).where(
            Purchase.gateway_order_id == gateway_order_id,
            Purchase.user_id == user.id,
            Purchase.chapter_id.in_(chapter_ids),
        )
    ).all()

    if not purchases:
        raise HandlerError("Purchase not found", success=False)

    unlocked = 0
    already_owned = []
    for purchase in purchases:
        # already completed rows are a retried callback
        if purchase.payment_status == PaymentStatus.completed.value:
            unlocked += 1
        elif not can_transition(purchase.payment_status, PaymentStatus.completed.value):
            continue
        elif _complete_purchase(session, purchase, gateway_payment_id):
            unlocked += 1
        else:
            already_owned.append(str(purchase.chapter_id))

    if not unlocked:
        raise HandlerError(
            "Chapter already purchased",
            success=False,
            alreadyOwned=True,
            alreadyOwnedIds=already_owned,
        )

    logger.info(
        f"Payment {gateway_payment_id} verified for order {gateway_order_id}: "
        f"{unlocked} chapter(s) unlocked for user {user.id}"
        + (f", {len(already_owned)} already owned" if already_owned else "")
    )

    return unlocked


def purchase_status(
    session: Session, user: Profile, chapter_id: uuid.UUID
) -> Optional[Purchase]:
    """Latest purchase row of the chapter for the user, completed rows first."""
    purchases = session.exec(
        select(Purchase)
        .where(Purchase.user_id == user.id, Purchase.chapter_id == chapter_id)
        .order_by(Purchase.purchased_at.desc())
    ).all()

    for purchase in purchases:
        if purchase.payment_status == PaymentStatus.completed.value:
            return purchase
    return purchases[0] if purchases else None


def list_owned_purchases(session: Session, user: Profile) -> List[Purchase]:
    return session.exec(
        select(Purchase)
        .where(
            Purchase.user_id == user.id,
            Purchase.payment_status == PaymentStatus.completed.value,
        )
        .order_by(Purchase.purchased_at.desc())
    ).all()
