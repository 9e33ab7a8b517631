"""Onboarding domain - wizard steps and one-shot profile creation"""

from .router import router

__all__ = ["router"]
