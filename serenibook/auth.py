import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import (
    SECRET_KEY,
    SESSION_ALGORITHM,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_DAYS,
)
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

# auto_error=False so the session cookie can be used when no header is sent
security = HTTPBearer(auto_error=False)


def session_claims(user: User) -> dict[str, Any]:
    """Identity and flags carried by a session, derived from the user row"""
    return {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "hasProfile": bool(user.has_profile),
        "emailVerified": user.email_verified,
    }


def create_session_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed session token for a user"""
    to_encode = session_claims(user)
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(days=SESSION_MAX_AGE_DAYS))
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """Verify a session token and return its claims"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[SESSION_ALGORITHM])
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Session token expired")
        raise HTTPException(
            status_code=401,
            detail="Session has expired. Please sign in again.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Invalid session token: {e}")
        raise HTTPException(status_code=401, detail="Invalid session") from e


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


def extract_session_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the session token"""
    token = extract_session_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please sign in.",
        )

    claims = decode_session_token(token)
    user_id = claims.get("sub")
    if not user_id or not str(user_id).isdigit():
        logger.error(f"❌ Session token missing user ID claim. Claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid session")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        logger.warning(f"⚠️ Session for unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Invalid session")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def verify_user_access(user_id: int, current_user: User) -> None:
    """Verify the authenticated user has access to the requested resource"""
    if current_user.id != user_id:
        logger.warning(f"🚫 Access denied: User {current_user.id} tried to access user {user_id}")
        raise HTTPException(status_code=403, detail="You can only access your own user data")


async def get_authorized_user(user_id: int, current_user: User = Depends(get_current_user)) -> User:
    """Dependency for /users/{user_id} routes: the session must belong to user_id"""
    verify_user_access(user_id, current_user)
    return current_user


def require_role(user: User, role: str) -> None:
    if user.role != role:
        logger.warning(f"🚫 User {user.id} with role {user.role} attempted a {role} operation")
        raise HTTPException(
            status_code=403, detail=f"This operation is only available to {role.lower()} accounts"
        )
