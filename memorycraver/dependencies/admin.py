import hmac

from fastapi import Depends
from memorycraver.config import settings
from memorycraver.errors import HandlerError
from memorycraver.models.profile import Profile, UserRole
from memorycraver.utils.token import get_bearer_token, get_current_user


def require_service_role(token: str = Depends(get_bearer_token)):
    if not hmac.compare_digest(token.encode("utf-8"), settings.SERVICE_ROLE_KEY.encode("utf-8")):
        raise HandlerError("Service role required")
    return token


def require_author(current_user: Profile = Depends(get_current_user)):
    if current_user.role not in (UserRole.author.value, UserRole.admin.value):
        raise HandlerError("Author access required")
    return current_user
