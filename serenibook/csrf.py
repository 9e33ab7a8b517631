"""
Double-submit cookie protection for cookie-authenticated writes

The browser receives a readable `csrf_token` cookie and must echo its value in the
X-CSRF-Token header on POST/PUT/PATCH/DELETE. Only requests that would be
authenticated by the session cookie are checked. A bearer token is never attached
by the browser on its own, so those requests pass, as do requests with no session.

Set CSRF_ENABLED=false in environment to disable.
"""

import logging
import os
import secrets
from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE

logger = logging.getLogger(__name__)

CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 86400

PROTECTED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

# Reachable without a session, or authorized by something other than the cookie
EXEMPT_PATHS: tuple[str, ...] = (
    "/auth/login",
    "/register",
    "/auth/forgot-password",
    "/auth/reset-password",  # the emailed token authorizes it
    "/health",
    "/docs",
    "/openapi.json",
    "/csrf-token",
)

REFRESH_HINT = "Please refresh the page and try again."


def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def is_path_exempt(path: str) -> bool:
    """Exact match, or a sub-path of an exempt prefix"""
    return any(path == exempt or path.startswith(exempt + "/") for exempt in EXEMPT_PATHS)


def uses_cookie_session(request: Request) -> bool:
    """True when the request would be authenticated by the session cookie"""
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return False
    return SESSION_COOKIE_NAME in request.cookies


def set_csrf_cookie(response: Response, token: str) -> None:
    # Readable by the frontend so it can echo the value in the header
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        path="/",
        secure=SESSION_COOKIE_SECURE,
        httponly=False,
        samesite="strict",
    )


def csrf_failure(request: Request) -> Optional[str]:
    """Why a protected request must be refused, or None when it may proceed"""
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    header_token = request.headers.get(CSRF_HEADER_NAME)

    if not cookie_token:
        return "cookie missing"
    if not header_token:
        return "header missing"
    if not secrets.compare_digest(cookie_token, header_token):
        return "mismatch"
    return None


FAILURE_MESSAGES = {
    "cookie missing": f"CSRF token missing. {REFRESH_HINT}",
    "header missing": f"CSRF token header missing. {REFRESH_HINT}",
    "mismatch": f"CSRF token invalid. {REFRESH_HINT}",
}


class CSRFMiddleware(BaseHTTPMiddleware):
    """Refuses unprotected cookie-session writes and hands out the token cookie"""

    def must_check(self, request: Request) -> bool:
        return (
            request.method in PROTECTED_METHODS
            and not is_path_exempt(request.url.path)
            and uses_cookie_session(request)
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        target = f"{request.method} {request.url.path}"

        if self.must_check(request):
            failure = csrf_failure(request)
            if failure:
                logger.warning(f"🚫 CSRF check failed ({failure}) for {target}")
                return JSONResponse(status_code=403, content={"detail": FAILURE_MESSAGES[failure]})
            logger.debug(f"✅ CSRF check passed for {target}")

        response = await call_next(request)

        if CSRF_COOKIE_NAME not in request.cookies:
            set_csrf_cookie(response, new_csrf_token())
            logger.debug("🔑 CSRF cookie issued")

        return response


async def csrf_token_handler(request: Request, response: Response):
    """
    Current CSRF token, issued on the spot when the browser has none.
    The frontend calls this on load before its first write.
    """
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if not token:
        token = new_csrf_token()
        set_csrf_cookie(response, token)
    return {"csrf_token": token}
