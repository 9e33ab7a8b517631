"""User profile domain - identity summary, personal and role profile updates"""

from .router import router

__all__ = ["router"]
