import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from memorycraver.database import get_session
from memorycraver.dependencies.admin import require_service_role
from memorycraver.errors import HandlerError
from memorycraver.models.profile import Profile
from memorycraver.schemas.user_schemas import AdminResetPasswordSchema
from memorycraver.utils.hash import hash_password

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/reset-password")
def admin_reset_password(
    payload: AdminResetPasswordSchema,
    session: Session = Depends(get_session),
    _: str = Depends(require_service_role),
):
    profile = session.get(Profile, payload.user_id)

    if not profile:
        raise HandlerError("User not found", success=False)

    profile.password_hash = hash_password(payload.new_password)
    profile.updated_at = datetime.utcnow()
    session.add(profile)
    session.commit()

    logger.info(f"Password updated by service role for {profile.id}")
    return {"success": True}
