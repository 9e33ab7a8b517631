"""Profile router - FastAPI endpoints for /users/{user_id}"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_authorized_user
from ...database import get_db
from ...models import User
from ...schemas import EmailStatusResponse, SuccessResponse
from .schemas import (
    AutoConfirmResponse,
    AutoConfirmUpdate,
    ClientProfileUpdate,
    PersonalInfoUpdate,
    ProfessionalProfileUpdate,
    ProfileResponse,
    UserSummaryResponse,
)
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/{user_id}", response_model=None)
async def get_user(
    response: Response,
    check: Optional[str] = Query(None),
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
) -> UserSummaryResponse | EmailStatusResponse:
    """Identity summary; ?check=emailVerified returns only the verification status"""
    response.headers["Cache-Control"] = "no-store, max-age=0"
    if check == "emailVerified":
        return EmailStatusResponse(
            id=current_user.id, email=current_user.email, emailVerified=current_user.email_verified
        )
    return service.get_summary(current_user)


@router.get("/{user_id}/email-status", response_model=EmailStatusResponse)
async def get_email_status(response: Response, current_user: User = Depends(get_authorized_user)):
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return EmailStatusResponse(
        id=current_user.id, email=current_user.email, emailVerified=current_user.email_verified
    )


@router.post("/{user_id}/first-visit", response_model=SuccessResponse)
async def complete_first_visit(
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Called once the dashboard welcome tour has been shown"""
    service.mark_first_visit_done(current_user)
    return SuccessResponse()


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_profile(current_user)


@router.patch("/{user_id}/personal-info", response_model=ProfileResponse)
async def update_personal_info(
    data: PersonalInfoUpdate,
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_personal_info(current_user, data)


@router.patch("/{user_id}/client-profile", response_model=ProfileResponse)
async def update_client_profile(
    data: ClientProfileUpdate,
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_client_profile(current_user, data)


@router.patch("/{user_id}/professional-profile", response_model=ProfileResponse)
async def update_professional_profile(
    data: ProfessionalProfileUpdate,
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_professional_profile(current_user, data)


@router.patch("/{user_id}/settings/auto-confirm", response_model=AutoConfirmResponse)
async def update_auto_confirm(
    data: AutoConfirmUpdate,
    current_user: User = Depends(get_authorized_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Whether new bookings are confirmed without manual review"""
    enabled = service.set_auto_confirm(current_user, data.autoConfirmBookings)
    return AutoConfirmResponse(autoConfirmBookings=enabled)
