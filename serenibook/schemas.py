from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from .models import User
from .shared.validators import validate_email, validate_password

Role = Literal["PROFESSIONAL", "CLIENT"]


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


# ============================================================================
# Registration
# ============================================================================


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    role: Role

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return validate_password(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return v


class RegisteredUser(BaseModel):
    id: int
    name: Optional[str]
    email: str
    role: str


class RegisterResponse(BaseModel):
    success: bool = True
    user: RegisteredUser


class EmailRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class EmailExistsResponse(BaseModel):
    exists: bool


# ============================================================================
# Session
# ============================================================================


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class SessionUser(BaseModel):
    id: int
    email: str
    name: Optional[str]
    role: str
    hasProfile: bool
    emailVerified: bool

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            hasProfile=bool(user.has_profile),
            emailVerified=user.email_verified,
        )


class SessionResponse(BaseModel):
    user: SessionUser
    expires: datetime


class LoginResponse(SessionResponse):
    success: bool = True
    token: str


class SyncSessionResponse(BaseModel):
    success: bool = True
    message: str
    cached: bool = False
    user: Optional[SessionUser] = None


# ============================================================================
# Password reset
# ============================================================================


class ResetPasswordRequest(BaseModel):
    token: str
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return validate_password(v)


class TokenValidityResponse(BaseModel):
    valid: bool


# ============================================================================
# Email verification
# ============================================================================


class VerificationSendResponse(BaseModel):
    success: bool = True
    alreadyVerified: bool = False
    message: str


class EmailStatusResponse(BaseModel):
    id: int
    email: str
    emailVerified: bool
