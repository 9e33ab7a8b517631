"""Availability router - FastAPI endpoints for /users/{user_id}/availability"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_authorized_user
from ...database import get_db
from ...models import User
from ...schemas import SuccessResponse
from .schemas import AvailabilityResponse, TimeSlotCreate, TimeSlotResponse, TimeSlotUpdate
from .service import AvailabilityService, slot_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("", response_model=AvailabilityResponse)
async def get_availability(
    current_user: User = Depends(get_authorized_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Weekly slots ordered by day then start time, with the auto-confirm setting"""
    return service.get_availability(current_user)


@router.post("", response_model=TimeSlotResponse, status_code=201)
async def add_time_slot(
    data: TimeSlotCreate,
    current_user: User = Depends(get_authorized_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return slot_to_response(service.add_slot(current_user, data))


@router.patch("/{availability_id}", response_model=TimeSlotResponse)
async def update_time_slot(
    availability_id: int,
    data: TimeSlotUpdate,
    current_user: User = Depends(get_authorized_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return slot_to_response(service.update_slot(current_user, availability_id, data))


@router.delete("/{availability_id}", response_model=SuccessResponse)
async def delete_time_slot(
    availability_id: int,
    current_user: User = Depends(get_authorized_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    service.delete_slot(current_user, availability_id)
    return SuccessResponse()
