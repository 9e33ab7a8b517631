"""
Email Verification Routes
Sends confirmation links and consumes them
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..email_service import send_verification_email
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import EmailStatusResponse, VerificationSendResponse
from ..security_utils import mask_email
from ..tokens import consume_verification_token, create_verification_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/verify-email", tags=["Email Verification"])

rate_limit_verification_send = create_rate_limiter(
    limit=5,
    window_seconds=3600,  # 1 hour
    key_prefix="verification_send",
    use_ip=True,
)


@router.post("/send", response_model=VerificationSendResponse)
async def send_verification(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_verification_send),
):
    """Send a new confirmation link to the current user's address"""
    logger.info(f"📧 Verification link requested by user {current_user.id}")

    if current_user.email_verified:
        logger.info(f"ℹ️ User {current_user.id} already verified")
        return VerificationSendResponse(alreadyVerified=True, message="Email already verified")

    verification = create_verification_token(db, current_user.email)
    db.commit()

    try:
        await send_verification_email(current_user.email, current_user.name, verification.token)
    except Exception as e:
        logger.error(f"❌ Failed to send verification email to {mask_email(current_user.email)}: {e}")
        raise HTTPException(
            status_code=500, detail="Failed to send verification email. Please try again."
        ) from e

    logger.info(f"✅ Verification email sent to {mask_email(current_user.email)}")
    return VerificationSendResponse(message="Verification email sent")


@router.get("/confirm", response_model=EmailStatusResponse)
async def confirm_verification(
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Consume a confirmation link"""
    user = consume_verification_token(db, token)
    logger.info(f"✅ Email verified for user {user.id}")
    return EmailStatusResponse(id=user.id, email=user.email, emailVerified=True)
