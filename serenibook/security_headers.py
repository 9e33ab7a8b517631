"""
Response hardening for the JSON API

Every response (except excluded paths such as /health and the docs) gets a locked
down CSP, frame and sniffing protection, a restrictive Permissions-Policy and, in
production, HSTS. Responses are not cacheable unless the route chose its own
Cache-Control.
"""

import logging
import os
from typing import Callable, Iterable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

DEFAULT_CACHE_CONTROL = "no-store, no-cache, must-revalidate"

# Nothing is ever rendered from an API response
CSP_DIRECTIVES = (
    "default-src 'none'",
    "frame-ancestors 'none'",
    "base-uri 'none'",
    "form-action 'self'",
)

DISABLED_BROWSER_FEATURES = (
    "accelerometer",
    "camera",
    "geolocation",
    "gyroscope",
    "magnetometer",
    "microphone",
    "payment",
    "usb",
)


def build_security_headers(production: bool = IS_PRODUCTION) -> dict[str, str]:
    headers = {
        "Content-Security-Policy": "; ".join(CSP_DIRECTIVES),
        "Permissions-Policy": ", ".join(f"{feature}=()" for feature in DISABLED_BROWSER_FEATURES),
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Cross-Origin-Opener-Policy": "same-origin",
        "X-Permitted-Cross-Domain-Policies": "none",
    }
    if production:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ())
        self.headers = build_security_headers()
        logger.debug(f"🛡️ Security headers: {sorted(self.headers)}")

    def is_excluded(self, path: str) -> bool:
        return bool(self.exclude_paths) and path.startswith(self.exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        if self.is_excluded(request.url.path):
            return response

        response.headers.update(self.headers)
        # Routes such as /auth/session set their own value
        response.headers.setdefault("Cache-Control", DEFAULT_CACHE_CONTROL)
        return response
