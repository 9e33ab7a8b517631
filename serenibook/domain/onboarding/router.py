"""Onboarding router - FastAPI endpoints for the profile-completion wizard"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import OnboardingRequest, OnboardingResponse, OnboardingStepsResponse
from .service import OnboardingService, get_steps

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


def get_onboarding_service(db: Session = Depends(get_db)) -> OnboardingService:
    """Dependency injection for OnboardingService"""
    return OnboardingService(db)


@router.get("/steps", response_model=OnboardingStepsResponse)
async def get_onboarding_steps(role: str = Query(...)):
    """Ordered wizard steps for a role"""
    steps = get_steps(role)
    return OnboardingStepsResponse(role=role.upper(), steps=steps)


@router.post("", response_model=OnboardingResponse)
async def complete_onboarding(
    data: OnboardingRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Submit every wizard step at once and create the role profile"""
    return service.complete(current_user, data, background_tasks)
