import logging

from fastapi import APIRouter, Depends
from pydantic import EmailStr
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from memorycraver.database import get_session
from memorycraver.errors import HandlerError
from memorycraver.models.author_profile import AuthorProfile
from memorycraver.models.profile import Profile, UserRole
from memorycraver.schemas.user_schemas import (
    LoginSchema,
    ResetPasswordSchema,
    SignUpSchema,
    Token,
    VerifySecurityAnswerSchema,
)
from memorycraver.utils.hash import (
    hash_password,
    hash_security_answer,
    verify_password,
    verify_security_answer,
)
from memorycraver.utils.token import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_by_email(session: Session, email: str):
    return session.exec(
        select(Profile).where(Profile.email == email.lower())
    ).first()


@router.post("/complete-sign-up")
def complete_sign_up(payload: SignUpSchema, session: Session = Depends(get_session)):
    logger.info(f"Signup request received for: {payload.email}")

    if _profile_by_email(session, payload.email):
        raise HandlerError("Email already registered")

    profile = Profile(
        email=payload.email.lower(),
        full_name=payload.full_name,
        role=payload.role,
        password_hash=hash_password(payload.password),
        security_question=payload.security_question,
        security_answer_hash=hash_security_answer(payload.security_answer),
        email_notifications_enabled=True,
    )

    session.add(profile)
    session.commit()
    session.refresh(profile)

    if profile.role == UserRole.author.value:
        try:
            session.add(AuthorProfile(user_id=profile.id, bio="", custom_links=[]))
            session.commit()
        except SQLAlchemyError:
            # profile itself is already stored
            session.rollback()
            logger.exception(f"Author profile creation failed for {profile.id}")

    return {
        "success": True,
        "message": "Signup completed successfully",
        "userId": str(profile.id),
    }


@router.post("/login", response_model=Token)
def login(payload: LoginSchema, session: Session = Depends(get_session)):
    profile = _profile_by_email(session, payload.email)

    if not profile or not verify_password(payload.password, profile.password_hash):
        raise HandlerError("Invalid email or password")

    token = create_access_token({"sub": str(profile.id), "role": profile.role})
    return Token(access_token=token, token_type="bearer")


@router.get("/security-question")
def get_security_question(email: EmailStr, session: Session = Depends(get_session)):
    profile = _profile_by_email(session, email)

    if not profile or not profile.security_question:
        raise HandlerError("User not found")

    return {"securityQuestion": profile.security_question}


@router.post("/verify-security-answer")
def check_security_answer(
    payload: VerifySecurityAnswerSchema,
    session: Session = Depends(get_session),
):
    profile = _profile_by_email(session, payload.email)

    valid = bool(profile) and verify_security_answer(
        payload.security_answer, profile.security_answer_hash
    )
    return {"valid": valid}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordSchema, session: Session = Depends(get_session)):
    profile = _profile_by_email(session, payload.email)

    if not profile or not verify_security_answer(
        payload.security_answer, profile.security_answer_hash
    ):
        raise HandlerError("Incorrect security answer", success=False)

    profile.password_hash = hash_password(payload.new_password)
    session.add(profile)
    session.commit()

    logger.info(f"Password reset via security question for {profile.id}")
    return {"success": True}
