"""Onboarding domain schemas - one aggregate payload per role"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...schemas import Role
from ...security_utils import sanitize_text
from ...shared.validators import (
    validate_fr_phone,
    validate_postal_code,
    validate_siret,
    validate_website,
)

BIO_MIN_LENGTH = 100
BIO_MAX_LENGTH = 500


class PersonalInfoStep(BaseModel):
    name: Optional[str] = None
    phone: str
    address: Optional[str] = None
    city: Optional[str] = None
    postalCode: Optional[str] = None
    companyName: Optional[str] = None
    siret: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_fr_phone(v)

    @field_validator("postalCode")
    @classmethod
    def validate_postal(cls, v):
        return validate_postal_code(v) if v else None

    @field_validator("siret")
    @classmethod
    def check_siret(cls, v):
        return validate_siret(v)

    @field_validator("website")
    @classmethod
    def check_website(cls, v):
        return validate_website(v)


class ActivityStep(BaseModel):
    type: str
    otherTypeDetails: Optional[str] = None
    yearsExperience: int = Field(0, ge=0, le=80)
    specialties: list[str] = []
    certifications: list[str] = []

    @field_validator("specialties", "certifications")
    @classmethod
    def clean_lists(cls, v):
        return [item.strip() for item in v if item and item.strip()]


class BioStep(BaseModel):
    bio: str
    approach: str

    @field_validator("bio", "approach")
    @classmethod
    def validate_length(cls, v, info):
        v = sanitize_text(v)
        label = "Bio" if info.field_name == "bio" else "Approach"
        if len(v) < BIO_MIN_LENGTH:
            raise ValueError(f"{label} must be at least {BIO_MIN_LENGTH} characters long")
        if len(v) > BIO_MAX_LENGTH:
            raise ValueError(f"{label} must be at most {BIO_MAX_LENGTH} characters long")
        return v


class PreferencesStep(BaseModel):
    languages: list[str] = ["fr"]
    preferredLanguage: str = "fr"
    emailNotifications: bool = True
    smsNotifications: bool = False
    marketingEmails: bool = False
    autoConfirmBookings: bool = False
    notes: Optional[str] = None

    @field_validator("languages")
    @classmethod
    def clean_languages(cls, v):
        cleaned = [lang.strip().lower() for lang in v if lang and lang.strip()]
        return cleaned or ["fr"]

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v):
        return sanitize_text(v) or None


class OnboardingRequest(BaseModel):
    role: Role
    personalInfo: PersonalInfoStep
    activity: Optional[ActivityStep] = None
    bio: Optional[BioStep] = None
    preferences: PreferencesStep = PreferencesStep()

    @model_validator(mode="after")
    def require_professional_steps(self):
        if self.role == "PROFESSIONAL":
            if self.activity is None:
                raise ValueError("Activity information is required for professionals")
            if self.bio is None:
                raise ValueError("Bio information is required for professionals")
        return self


class OnboardingStepsResponse(BaseModel):
    role: Role
    steps: list[str]


class OnboardingResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    redirect: str
