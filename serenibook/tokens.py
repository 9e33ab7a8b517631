"""Single-use tokens for email verification and password reset"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from .config import RESET_TOKEN_TTL_MINUTES, VERIFICATION_TOKEN_TTL_HOURS
from .models import ResetToken, User, VerificationToken
from .security_utils import generate_secure_token

logger = logging.getLogger(__name__)


def create_verification_token(db: Session, email: str) -> VerificationToken:
    """Replace any pending verification token for an email with a fresh one.

    The caller commits.
    """
    db.query(VerificationToken).filter(VerificationToken.identifier == email).delete()
    token = VerificationToken(
        identifier=email,
        token=generate_secure_token(),
        expires=datetime.utcnow() + timedelta(hours=VERIFICATION_TOKEN_TTL_HOURS),
    )
    db.add(token)
    return token


def consume_verification_token(db: Session, token: Optional[str]) -> User:
    """Mark the token's email as verified and delete the token"""
    if not token:
        raise HTTPException(status_code=400, detail="Verification token is missing")

    record = db.query(VerificationToken).filter(VerificationToken.token == token).first()
    if not record:
        # Deleted on use, so a replayed link lands here too
        raise HTTPException(status_code=400, detail="Invalid or already used verification link")

    if record.expires < datetime.utcnow():
        db.delete(record)
        db.commit()
        raise HTTPException(
            status_code=400, detail="Verification link has expired. Please request a new one."
        )

    user = db.query(User).filter(User.email == record.identifier).first()
    if not user:
        db.delete(record)
        db.commit()
        raise HTTPException(status_code=400, detail="Invalid or already used verification link")

    if user.email_verified_at is None:
        user.email_verified_at = datetime.utcnow()
    db.delete(record)
    db.commit()
    db.refresh(user)
    return user


def create_reset_token(db: Session, user: User) -> ResetToken:
    token = ResetToken(
        user_id=user.id,
        token=generate_secure_token(),
        expires_at=datetime.utcnow() + timedelta(minutes=RESET_TOKEN_TTL_MINUTES),
        used=False,
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    return token


def get_valid_reset_token(db: Session, token: Optional[str]) -> ResetToken:
    """Look up a reset token, rejecting missing, unknown, expired and used ones"""
    if not token:
        raise HTTPException(status_code=400, detail="Reset token is missing")

    record = db.query(ResetToken).filter(ResetToken.token == token).first()
    if not record:
        raise HTTPException(status_code=400, detail="Invalid reset link")

    if record.expires_at < datetime.utcnow():
        raise HTTPException(
            status_code=400, detail="Reset link has expired. Please request a new one."
        )

    if record.used:
        raise HTTPException(status_code=400, detail="This reset link has already been used")

    return record
