import uuid
from jose import jwt, JWTError
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session
from memorycraver.config import settings
from memorycraver.database import get_session
from memorycraver.errors import HandlerError
from memorycraver.models.profile import Profile

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = datetime.utcnow() + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str):
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return payload
    except JWTError:
        return None


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HandlerError("Missing authorization header")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    session: Session = Depends(get_session)
) -> Profile:
    payload = decode_access_token(token)

    if payload is None:
        raise HandlerError("Unauthorized")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise HandlerError("Unauthorized")

    user = session.get(Profile, user_id)

    if user is None:
        raise HandlerError("Unauthorized")

    return user
