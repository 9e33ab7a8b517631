"""Availability service - Business logic for weekly slots"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Availability, Professional, User
from ...shared.validators import time_to_minutes
from .repository import AvailabilityRepository
from .schemas import AvailabilityResponse, TimeSlotBase, TimeSlotResponse

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def slot_to_response(slot: Availability) -> TimeSlotResponse:
    return TimeSlotResponse(
        id=slot.id,
        dayOfWeek=slot.day_of_week,
        startTime=slot.start_time,
        endTime=slot.end_time,
    )


def slots_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open intervals: a slot ending at 12:00 does not overlap one starting at 12:00"""
    a0, a1, b0, b1 = map(time_to_minutes, (start_a, end_a, start_b, end_b))
    return a0 < b1 and b0 < a1


class AvailabilityService:
    """Service layer for availability business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def _professional(self, user: User) -> Professional:
        professional = self.repo.get_professional(self.db, user.id)
        if not professional:
            raise HTTPException(status_code=404, detail="Professional profile not found")
        return professional

    def _check_conflicts(
        self, professional: Professional, data: TimeSlotBase, exclude_id: Optional[int] = None
    ) -> None:
        same_day = self.repo.get_slots_for_day(
            self.db, professional.id, data.dayOfWeek, exclude_id=exclude_id
        )
        for slot in same_day:
            if slot.start_time == data.startTime and slot.end_time == data.endTime:
                raise HTTPException(status_code=400, detail="This time slot already exists")
            if slots_overlap(slot.start_time, slot.end_time, data.startTime, data.endTime):
                raise HTTPException(
                    status_code=400,
                    detail=(
                        f"This time slot overlaps {slot.start_time}-{slot.end_time} "
                        f"on {DAY_NAMES[slot.day_of_week]}"
                    ),
                )

    def get_availability(self, user: User) -> AvailabilityResponse:
        professional = self._professional(user)
        slots = self.repo.get_slots(self.db, professional.id)
        return AvailabilityResponse(
            timeSlots=[slot_to_response(s) for s in slots],
            autoConfirmBookings=bool(professional.auto_confirm_bookings),
        )

    def _fields(self, data: TimeSlotBase) -> dict:
        return {
            "day_of_week": data.dayOfWeek,
            "start_time": data.startTime,
            "end_time": data.endTime,
        }

    def add_slot(self, user: User, data: TimeSlotBase) -> Availability:
        professional = self._professional(user)
        self._check_conflicts(professional, data)
        try:
            slot = self.repo.create_slot(self.db, professional.id, **self._fields(data))
        except IntegrityError as e:
            # Same slot inserted by a concurrent request
            self.db.rollback()
            raise HTTPException(status_code=400, detail="This time slot already exists") from e
        logger.info(
            f"🗓️ Slot {DAY_NAMES[slot.day_of_week]} {slot.start_time}-{slot.end_time} "
            f"added for professional {professional.id}"
        )
        return slot

    def update_slot(self, user: User, slot_id: int, data: TimeSlotBase) -> Availability:
        professional = self._professional(user)
        slot = self.repo.get_slot(self.db, slot_id, professional.id)
        if not slot:
            raise HTTPException(status_code=404, detail="Time slot not found")

        self._check_conflicts(professional, data, exclude_id=slot.id)
        try:
            return self.repo.update_slot(self.db, slot, **self._fields(data))
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="This time slot already exists") from e

    def delete_slot(self, user: User, slot_id: int) -> None:
        professional = self._professional(user)
        slot = self.repo.get_slot(self.db, slot_id, professional.id)
        if not slot:
            raise HTTPException(status_code=404, detail="Time slot not found")
        self.repo.delete_slot(self.db, slot)
        logger.info(f"🗑️ Slot {slot_id} removed for professional {professional.id}")
