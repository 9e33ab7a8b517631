import logging
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..auth import (
    clear_session_cookie,
    create_session_token,
    decode_session_token,
    extract_session_token,
    get_current_user,
    security,
    set_session_cookie,
    verify_user_access,
)
from ..cache import processed_requests
from ..database import get_db
from ..email_service import send_password_reset_email
from ..models import ResetToken, User
from ..rate_limiter import create_rate_limiter, get_client_ip
from ..schemas import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    SessionResponse,
    SessionUser,
    SuccessResponse,
    SyncSessionResponse,
    TokenValidityResponse,
)
from ..security_utils import hash_password, log_security_event, mask_email, verify_password
from ..tokens import create_reset_token, get_valid_reset_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

NO_STORE = "no-store, max-age=0"
INVALID_CREDENTIALS = "Invalid email or password"

# Rate limiters
rate_limit_login = create_rate_limiter(
    limit=10,
    window_seconds=300,  # 5 minutes
    key_prefix="login",
    use_ip=True,
)
rate_limit_password_reset = create_rate_limiter(
    limit=5,
    window_seconds=3600,  # 1 hour
    key_prefix="password_reset",
    use_ip=True,
)


def token_expiry(token: str) -> datetime:
    claims = decode_session_token(token)
    return datetime.utcfromtimestamp(claims["exp"])


def issue_session(response: Response, user: User) -> tuple[str, datetime]:
    """Sign a fresh session for the user and attach it as a cookie"""
    token = create_session_token(user)
    set_session_cookie(response, token)
    return token, token_expiry(token)


# ============================================================================
# SESSION
# ============================================================================


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_login),
):
    """Check credentials and open a session"""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"🚫 Failed login for {mask_email(data.email)}")
        log_security_event(
            "failed_login", ip_address=get_client_ip(request), details={"email": mask_email(data.email)}
        )
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    token, expires = issue_session(response, user)
    log_security_event("login", user_id=user.id, ip_address=get_client_ip(request))
    logger.info(f"✅ User {user.id} signed in")

    return LoginResponse(user=SessionUser.from_user(user), expires=expires, token=token)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response):
    clear_session_cookie(response)
    return SuccessResponse(message="Signed out")


@router.get("/session", response_model=SessionResponse)
async def get_session(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    current_user: User = Depends(get_current_user),
):
    """Current session, with flags read from the database rather than the token"""
    response.headers["Cache-Control"] = NO_STORE
    token = extract_session_token(request, credentials)
    return SessionResponse(user=SessionUser.from_user(current_user), expires=token_expiry(token))


@router.post("/sync-session", response_model=SyncSessionResponse)
async def sync_session(
    response: Response,
    userId: Optional[int] = Query(None),
    requestId: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
):
    """
    Re-issue the session token after the user's flags changed
    (profile completed, email verified). Clients may fire this several times
    in a row; repeats of a request id within 30 seconds are acknowledged
    without re-issuing.
    """
    response.headers["Cache-Control"] = NO_STORE

    if userId is not None:
        verify_user_access(userId, current_user)

    request_id = requestId or uuid.uuid4().hex
    if not processed_requests.mark_if_new(f"{current_user.id}:{request_id}"):
        return SyncSessionResponse(message="Session already synchronized", cached=True)

    issue_session(response, current_user)
    logger.info(f"🔄 Session synchronized for user {current_user.id} (request {request_id})")

    return SyncSessionResponse(
        message="Session synchronized", user=SessionUser.from_user(current_user)
    )


# ============================================================================
# PASSWORD RESET
# ============================================================================


@router.post("/forgot-password", response_model=SuccessResponse)
async def forgot_password(
    data: EmailRequest,
    request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_password_reset),
):
    """Email a reset link. The answer is the same whether or not the account exists."""
    generic = SuccessResponse(
        message="If an account exists with this email, you will receive a reset link."
    )

    user = db.query(User).filter(User.email == data.email).first()
    if not user:
        logger.info(f"ℹ️ Password reset requested for unknown email {mask_email(data.email)}")
        return generic

    reset_token = create_reset_token(db, user)
    log_security_event("password_reset_requested", user_id=user.id, ip_address=get_client_ip(request))

    try:
        await send_password_reset_email(user.email, user.name, reset_token.token)
        logger.info(f"✅ Password reset email sent to {mask_email(user.email)}")
    except Exception as e:
        logger.error(f"❌ Failed to send password reset email to {mask_email(user.email)}: {e}")

    return generic


@router.get("/verify-token", response_model=TokenValidityResponse)
async def verify_reset_token(
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Let the reset page check a link before showing the form"""
    get_valid_reset_token(db, token)
    return TokenValidityResponse(valid=True)


@router.post("/reset-password", response_model=SuccessResponse)
async def reset_password(
    data: ResetPasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Set a new password from a reset link"""
    reset_token = get_valid_reset_token(db, data.token)
    user = db.query(User).filter(User.id == reset_token.user_id).first()
    if not user:
        raise HTTPException(status_code=400, detail="Invalid reset link")

    try:
        user.password_hash = hash_password(data.password)
        # Every outstanding link for this user dies with the one being used
        db.query(ResetToken).filter(
            ResetToken.user_id == user.id, ResetToken.used.is_(False)
        ).update({ResetToken.used: True}, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"❌ Password reset failed for user {user.id}")
        raise

    log_security_event("password_reset", user_id=user.id, ip_address=get_client_ip(request))
    logger.info(f"✅ Password reset for user {user.id}")
    return SuccessResponse(message="Your password has been reset. You can now sign in.")
