"""Service catalog domain - the services a professional offers"""

from .router import router

__all__ = ["router"]
