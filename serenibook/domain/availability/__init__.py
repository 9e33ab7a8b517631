"""Availability domain - recurring weekly time slots"""

from .router import router

__all__ = ["router"]
