import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..email_service import send_verification_email
from ..models import User
from ..rate_limiter import create_rate_limiter, get_client_ip
from ..schemas import (
    EmailExistsResponse,
    EmailRequest,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
)
from ..security_utils import hash_password, log_security_event, mask_email
from ..tokens import create_verification_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/register", tags=["Registration"])

# Rate limiters
rate_limit_register = create_rate_limiter(
    limit=10,
    window_seconds=3600,  # 1 hour
    key_prefix="register",
    use_ip=True,
)
rate_limit_check_email = create_rate_limiter(
    limit=30,
    window_seconds=60,
    key_prefix="register_check_email",
    use_ip=True,
)


@router.post("", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_register),
):
    """Create an account and send the email confirmation link"""
    logger.info(f"📝 Registration attempt for {mask_email(data.email)} as {data.role}")

    if db.query(User).filter(User.email == data.email).first():
        logger.info(f"ℹ️ Registration rejected, email already used: {mask_email(data.email)}")
        raise HTTPException(status_code=400, detail="An account already exists with this email")

    user = User(
        email=data.email,
        name=data.name,
        password_hash=hash_password(data.password),
        role=data.role,
        has_profile=False,
        is_first_visit=True,
    )
    db.add(user)
    try:
        db.flush()
        verification = create_verification_token(db, user.email)
        db.commit()
    except IntegrityError as e:
        # Concurrent registration with the same email
        db.rollback()
        raise HTTPException(
            status_code=400, detail="An account already exists with this email"
        ) from e
    db.refresh(user)

    log_security_event(
        "register", user_id=user.id, ip_address=get_client_ip(request), details={"role": user.role}
    )

    try:
        await send_verification_email(user.email, user.name, verification.token)
        logger.info(f"✅ Verification email sent to {mask_email(user.email)}")
    except Exception as e:
        # The account exists either way; the user can ask for a new link
        logger.error(f"❌ Failed to send verification email to {mask_email(user.email)}: {e}")

    return RegisterResponse(
        success=True,
        user=RegisteredUser(id=user.id, name=user.name, email=user.email, role=user.role),
    )


@router.post("/check-email", response_model=EmailExistsResponse)
async def check_email(
    data: EmailRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check_email),
):
    """Tell the sign-up form whether an address is already registered"""
    exists = db.query(User.id).filter(User.email == data.email).first() is not None
    return EmailExistsResponse(exists=exists)
