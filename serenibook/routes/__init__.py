from .auth import router as auth_router
from .registration import router as registration_router
from .verification import router as verification_router

__all__ = ["auth_router", "registration_router", "verification_router"]
