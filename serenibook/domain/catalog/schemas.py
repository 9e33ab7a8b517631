"""Service catalog schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...security_utils import sanitize_text

HEX_COLOR_LENGTHS = (4, 7)


class ServiceBase(BaseModel):
    name: str
    description: str
    duration: int = Field(..., ge=5, le=480)  # Minutes
    price: float = Field(..., ge=0)
    color: Optional[str] = None
    maxParticipants: int = Field(1, ge=1)
    type: Optional[str] = None
    location: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = sanitize_text(v)
        if len(v) < 3:
            raise ValueError("Name must be at least 3 characters long")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        v = sanitize_text(v)
        if len(v) < 10:
            raise ValueError("Description must be at least 10 characters long")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        if not v:
            return None
        v = v.strip()
        if not v.startswith("#") or len(v) not in HEX_COLOR_LENGTHS:
            raise ValueError("Color must be a hex value like #1aa385")
        try:
            int(v[1:], 16)
        except ValueError as e:
            raise ValueError("Color must be a hex value like #1aa385") from e
        return v.lower()


class ServiceCreate(ServiceBase):
    """Schema for creating a new service"""


class ServiceUpdate(ServiceBase):
    """Schema for updating a service; the whole form is sent back"""


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: str
    duration: int
    price: float
    color: Optional[str]
    maxParticipants: int
    type: Optional[str]
    location: Optional[str]
    active: bool
