"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...security_utils import sanitize_text
from ...shared.validators import (
    validate_fr_phone,
    validate_postal_code,
    validate_siret,
    validate_website,
)


def _min_length(value: str, length: int, label: str) -> str:
    value = value.strip()
    if len(value) < length:
        raise ValueError(f"{label} must be at least {length} characters long")
    return value


def _clean_list(values: list[str]) -> list[str]:
    return [v.strip() for v in values if v and v.strip()]


class PersonalInfoUpdate(BaseModel):
    """Schema for the personal information step / settings page"""

    name: str
    phone: str
    companyName: Optional[str] = None
    siret: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _min_length(v, 2, "Name")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_fr_phone(v)

    @field_validator("siret")
    @classmethod
    def check_siret(cls, v):
        return validate_siret(v)

    @field_validator("website")
    @classmethod
    def check_website(cls, v):
        return validate_website(v)


class ClientProfileUpdate(BaseModel):
    name: str
    phone: str
    address: str
    city: str
    postalCode: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _min_length(v, 2, "Name")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_fr_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _min_length(v, 5, "Address")

    @field_validator("city")
    @classmethod
    def validate_city(cls, v):
        return _min_length(v, 2, "City")

    @field_validator("postalCode")
    @classmethod
    def validate_postal(cls, v):
        return validate_postal_code(v)


class ProfessionalProfileUpdate(BaseModel):
    type: str
    otherTypeDetails: Optional[str] = None
    yearsExperience: int = Field(..., ge=0, le=80)
    bio: str
    approach: str
    address: str
    city: str
    postalCode: str
    specialties: list[str] = []
    certifications: list[str] = []

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v):
        return _min_length(sanitize_text(v), 10, "Bio")

    @field_validator("approach")
    @classmethod
    def validate_approach(cls, v):
        return _min_length(sanitize_text(v), 10, "Approach")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _min_length(v, 5, "Address")

    @field_validator("city")
    @classmethod
    def validate_city(cls, v):
        return _min_length(v, 2, "City")

    @field_validator("postalCode")
    @classmethod
    def validate_postal(cls, v):
        return validate_postal_code(v)

    @field_validator("specialties", "certifications")
    @classmethod
    def clean_lists(cls, v):
        return _clean_list(v)


class AutoConfirmUpdate(BaseModel):
    autoConfirmBookings: bool


# ============================================================================
# Responses
# ============================================================================


class UserSummaryResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    role: str
    hasProfile: bool
    isFirstVisit: bool
    emailVerified: bool
    hasProfessionalProfile: bool
    hasClientProfile: bool


class NotificationSettingsResponse(BaseModel):
    emailEnabled: bool
    smsEnabled: bool
    marketingEmails: bool


class ProfessionalProfileResponse(BaseModel):
    id: int
    type: str
    otherTypeDetails: Optional[str]
    yearsExperience: Optional[int]
    phone: Optional[str]
    address: Optional[str]
    city: Optional[str]
    postalCode: Optional[str]
    bio: Optional[str]
    approach: Optional[str]
    specialties: list[str]
    certifications: list[str]
    languages: list[str]
    companyName: Optional[str]
    siret: Optional[str]
    website: Optional[str]
    autoConfirmBookings: bool
    notificationSettings: Optional[NotificationSettingsResponse] = None


class ClientProfileResponse(BaseModel):
    id: int
    phone: Optional[str]
    address: Optional[str]
    city: Optional[str]
    postalCode: Optional[str]
    notes: Optional[str]
    preferredLanguage: str


class ProfileResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    role: str
    hasProfile: bool
    emailVerified: bool
    createdAt: Optional[datetime] = None
    professional: Optional[ProfessionalProfileResponse] = None
    client: Optional[ClientProfileResponse] = None


class AutoConfirmResponse(BaseModel):
    success: bool = True
    autoConfirmBookings: bool
