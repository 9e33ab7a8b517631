"""Availability schemas - Pydantic models for weekly time slots"""

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import time_to_minutes, validate_time


class TimeSlotBase(BaseModel):
    dayOfWeek: int = Field(..., ge=0, le=6)  # 0 = Sunday
    startTime: str
    endTime: str

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v):
        return validate_time(v)

    @model_validator(mode="after")
    def check_order(self):
        if time_to_minutes(self.endTime) <= time_to_minutes(self.startTime):
            raise ValueError("End time must be after start time")
        return self


class TimeSlotCreate(TimeSlotBase):
    """Schema for adding a weekly slot"""


class TimeSlotUpdate(TimeSlotBase):
    """Schema for moving an existing weekly slot"""


class TimeSlotResponse(BaseModel):
    id: int
    dayOfWeek: int
    startTime: str
    endTime: str


class AvailabilityResponse(BaseModel):
    timeSlots: list[TimeSlotResponse]
    autoConfirmBookings: bool
