import uuid
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from memorycraver.schemas.base import CamelModel

MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes
MAX_SECRET_LENGTH = 72


class SignUpSchema(CamelModel):
    email: EmailStr
    full_name: str = Field(min_length=1)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_SECRET_LENGTH)
    security_question: str = Field(min_length=1)
    security_answer: str = Field(min_length=1, max_length=MAX_SECRET_LENGTH)
    role: Literal["reader", "author"] = "reader"


class LoginSchema(CamelModel):
    email: EmailStr
    password: str = Field(max_length=MAX_SECRET_LENGTH)


class Token(BaseModel):
    access_token: str
    token_type: str


class VerifySecurityAnswerSchema(CamelModel):
    email: EmailStr
    security_answer: str = Field(max_length=MAX_SECRET_LENGTH)


class ResetPasswordSchema(CamelModel):
    email: EmailStr
    security_answer: str = Field(max_length=MAX_SECRET_LENGTH)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_SECRET_LENGTH)


class AdminResetPasswordSchema(CamelModel):
    user_id: uuid.UUID
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_SECRET_LENGTH)


class NotificationPreferenceSchema(CamelModel):
    enabled: bool
