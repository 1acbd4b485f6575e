from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from memorycraver.database import get_session
from memorycraver.models.profile import Profile
from memorycraver.schemas.user_schemas import NotificationPreferenceSchema
from memorycraver.utils.token import get_current_user

router = APIRouter()


@router.get("/me")
def get_my_profile(current_user: Profile = Depends(get_current_user)):
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "fullName": current_user.full_name,
        "role": current_user.role,
        "emailNotificationsEnabled": current_user.email_notifications_enabled,
        "createdAt": current_user.created_at,
    }


@router.get("/me/notifications")
def get_notification_preference(current_user: Profile = Depends(get_current_user)):
    return {"emailNotificationsEnabled": current_user.email_notifications_enabled}


@router.put("/me/notifications")
def update_notification_preference(
    payload: NotificationPreferenceSchema,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    current_user.email_notifications_enabled = payload.enabled
    current_user.updated_at = datetime.utcnow()

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return {"emailNotificationsEnabled": current_user.email_notifications_enabled}
