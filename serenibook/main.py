import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from . import models  # noqa: F401 - registers tables on Base
from .csrf import CSRF_ENABLED, CSRFMiddleware, csrf_token_handler
from .database import Base, engine
from .domain.availability import router as availability_router
from .domain.catalog import router as services_router
from .domain.onboarding import router as onboarding_router
from .domain.profiles import router as users_router
from .routes import auth_router, registration_router, verification_router
from .security_headers import SECURITY_HEADERS_ENABLED, SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("passlib").setLevel(logging.ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    try:
        from .rate_limiter import get_redis_client

        if get_redis_client() is None:
            logger.info("Redis not configured - rate limits are kept per process")
        else:
            logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed - rate limits are kept per process: {e}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="SereniBook API", version=__version__, lifespan=lifespan)


def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors to {field, message} pairs"""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc)
    logger.warning(f"Validation error for {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"detail": "Invalid data", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

if CSRF_ENABLED:
    app.add_middleware(CSRFMiddleware)
    logger.info("CSRF protection enabled")
else:
    logger.info("CSRF protection disabled")


# CORS Configuration
# Cookies are sent cross-origin, so origins must be listed explicitly
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in ALLOWED_ORIGINS if origin.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Authorization", "Content-Type", "X-CSRF-Token"],
    expose_headers=["Retry-After", "X-Token-Expired"],
)

app.include_router(registration_router)
app.include_router(auth_router)
app.include_router(verification_router)
app.include_router(users_router)
app.include_router(onboarding_router)
app.include_router(services_router)
app.include_router(availability_router)


@app.get("/")
def root():
    return {"message": "SereniBook API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/csrf-token")
async def get_csrf_token(request: Request, response: Response):
    """
    Get a CSRF token for the frontend.
    The token is also set as a cookie.
    Frontend should include this token in X-CSRF-Token header for state-changing requests.
    """
    return await csrf_token_handler(request, response)
