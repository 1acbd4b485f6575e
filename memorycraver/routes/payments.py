import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from memorycraver.constants.payment_status import PaymentStatus
from memorycraver.database import get_session
from memorycraver.models.profile import Profile
from memorycraver.schemas.purchase_schemas import (
    CreateBulkOrderSchema,
    CreateOrderSchema,
    VerifyBulkPaymentSchema,
    VerifyPaymentSchema,
)
from memorycraver.services.purchase_service import (
    create_purchase_order,
    list_owned_purchases,
    purchase_status,
    verify_purchase_payment,
)
from memorycraver.utils.token import get_current_user

router = APIRouter()


@router.post("/create-order")
def create_order(
    payload: CreateOrderSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    return create_purchase_order(
        session=session,
        user=current_user,
        chapter_ids=[payload.chapter_id],
        claimed_amount=payload.amount,
        book_id=payload.book_id,
    )


@router.post("/create-bulk-order")
def create_bulk_order(
    payload: CreateBulkOrderSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    return create_purchase_order(
        session=session,
        user=current_user,
        chapter_ids=payload.chapter_ids,
        claimed_amount=payload.total_amount,
        book_id=payload.book_id,
    )


@router.post("/verify-payment")
def verify_payment(
    payload: VerifyPaymentSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    verify_purchase_payment(
        session=session,
        user=current_user,
        gateway_order_id=payload.razorpay_order_id,
        gateway_payment_id=payload.razorpay_payment_id,
        signature=payload.razorpay_signature,
        chapter_ids=[payload.chapter_id],
    )
    return {"success": True}


@router.post("/verify-bulk-payment")
def verify_bulk_payment(
    payload: VerifyBulkPaymentSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    unlocked = verify_purchase_payment(
        session=session,
        user=current_user,
        gateway_order_id=payload.razorpay_order_id,
        gateway_payment_id=payload.razorpay_payment_id,
        signature=payload.razorpay_signature,
        chapter_ids=payload.chapter_ids,
    )
    return {"success": True, "chaptersUnlocked": unlocked}


@router.get("/chapters/{chapter_id}/status")
def get_chapter_purchase_status(
    chapter_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    purchase = purchase_status(session, current_user, chapter_id)

    return {
        "chapterId": str(chapter_id),
        "owned": purchase is not None and purchase.payment_status == PaymentStatus.completed.value,
        "paymentStatus": purchase.payment_status if purchase else None,
        "orderId": purchase.gateway_order_id if purchase else None,
    }


@router.get("/my-chapters")
def get_my_chapters(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    purchases = list_owned_purchases(session, current_user)

    return [
        {
            "chapterId": str(purchase.chapter_id),
            "amountPaid": purchase.amount_paid,
            "paymentId": purchase.gateway_payment_id,
            "purchasedAt": purchase.purchased_at,
        }
        for purchase in purchases
    ]
