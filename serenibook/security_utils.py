"""
Security Utilities
Password hashing, token generation, free-text sanitization and audit logging
"""

import html
import logging
import secrets
from datetime import datetime
from typing import Any, Optional

import bleach
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt with a cost suited to interactive logins
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


# ============================================================================
# PASSWORDS
# ============================================================================


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.error(f"❌ Unreadable password hash: {e}")
        return False


def generate_secure_token(nbytes: int = 32) -> str:
    """Random hex token for emailed links (2 chars per byte)"""
    return secrets.token_hex(nbytes)


# ============================================================================
# FREE TEXT
# ============================================================================


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """
    Strip every HTML tag from free text (bios, descriptions, notes).

    Profiles are rendered on public pages, so no markup is kept. The result is
    plain text: entities produced by bleach are decoded again.
    """
    if value is None:
        return None
    return html.unescape(bleach.clean(value, tags=[], attributes={}, strip=True)).strip()


# ============================================================================
# AUDIT LOGGING
# ============================================================================


def _mask(part: str) -> str:
    keep = 2 if len(part) > 2 else 1
    return f"{part[:keep]}***"


def mask_email(email: str) -> str:
    """Email as it may appear in logs: camille@example.com -> ca***@ex***.com"""
    if not email or "@" not in email:
        return "***@***.***"
    local, domain = email.split("@", 1)
    host, _, tld = domain.rpartition(".")
    if not host:
        host, tld = domain, "***"
    return f"{_mask(local)}@{_mask(host.split('.')[0])}.{tld}"


def log_security_event(
    event_type: str,
    user_id: Optional[int] = None,
    ip_address: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
):
    """Audit trail entry for sign-ins, sign-ups and password changes"""
    entry = {
        "at": datetime.utcnow().isoformat(),
        "event": event_type,
        "user": user_id,
        "ip": ip_address,
    }
    if details:
        entry.update(details)
    logger.info(f"🔐 SECURITY_EVENT {entry}")
