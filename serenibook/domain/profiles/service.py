"""Profile service - Business logic for users and their role profiles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import require_role
from ...models import Client, Professional, User, UserRole
from ...shared.activity import map_activity_type, other_type_details
from .repository import ProfileRepository
from .schemas import (
    ClientProfileResponse,
    ClientProfileUpdate,
    NotificationSettingsResponse,
    PersonalInfoUpdate,
    ProfessionalProfileResponse,
    ProfessionalProfileUpdate,
    ProfileResponse,
    UserSummaryResponse,
)

logger = logging.getLogger(__name__)


def professional_to_response(professional: Professional) -> ProfessionalProfileResponse:
    settings = professional.notification_settings
    return ProfessionalProfileResponse(
        id=professional.id,
        type=professional.type,
        otherTypeDetails=professional.other_type_details,
        yearsExperience=professional.years_experience,
        phone=professional.phone,
        address=professional.address,
        city=professional.city,
        postalCode=professional.postal_code,
        bio=professional.bio,
        approach=professional.description,
        specialties=professional.specialties or [],
        certifications=professional.certifications or [],
        languages=professional.languages or [],
        companyName=professional.company_name,
        siret=professional.siret,
        website=professional.website,
        autoConfirmBookings=bool(professional.auto_confirm_bookings),
        notificationSettings=(
            NotificationSettingsResponse(
                emailEnabled=settings.email_enabled,
                smsEnabled=settings.sms_enabled,
                marketingEmails=settings.marketing_emails,
            )
            if settings
            else None
        ),
    )


def client_to_response(client: Client) -> ClientProfileResponse:
    return ClientProfileResponse(
        id=client.id,
        phone=client.phone,
        address=client.address,
        city=client.city,
        postalCode=client.postal_code,
        notes=client.notes,
        preferredLanguage=client.preferred_language,
    )


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_summary(self, user: User) -> UserSummaryResponse:
        professional = self.repo.get_professional(self.db, user.id)
        client = self.repo.get_client(self.db, user.id)
        return UserSummaryResponse(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            hasProfile=bool(user.has_profile),
            isFirstVisit=bool(user.is_first_visit),
            emailVerified=user.email_verified,
            hasProfessionalProfile=professional is not None,
            hasClientProfile=client is not None,
        )

    def mark_first_visit_done(self, user: User) -> None:
        if user.is_first_visit:
            user.is_first_visit = False
            self.repo.save(self.db, user)
            logger.info(f"👋 First visit completed for user {user.id}")

    def get_profile(self, user: User) -> ProfileResponse:
        full_user = self.repo.get_user_with_profiles(self.db, user.id)
        if not full_user:
            raise HTTPException(status_code=404, detail="User not found")

        return ProfileResponse(
            id=full_user.id,
            email=full_user.email,
            name=full_user.name,
            role=full_user.role,
            hasProfile=bool(full_user.has_profile),
            emailVerified=full_user.email_verified,
            createdAt=full_user.created_at,
            professional=(
                professional_to_response(full_user.professional_profile)
                if full_user.professional_profile
                else None
            ),
            client=(
                client_to_response(full_user.client_profile) if full_user.client_profile else None
            ),
        )

    def update_personal_info(self, user: User, data: PersonalInfoUpdate) -> ProfileResponse:
        """Update the user's name and the contact details of their role profile"""
        logger.info(f"📝 Updating personal info for user {user.id}")
        user.name = data.name

        if user.role == UserRole.PROFESSIONAL.value:
            profile = self.repo.get_professional(self.db, user.id)
            if not profile:
                profile = self.repo.new_professional(self.db, user.id)
                user.has_profile = True
                logger.info(f"🆕 Professional profile created from personal info for user {user.id}")

            updates = {"phone": data.phone}
            # Empty strings clear the optional business fields
            if data.companyName is not None:
                updates["company_name"] = data.companyName.strip() or None
            if data.siret is not None:
                updates["siret"] = data.siret or None
            if data.website is not None:
                updates["website"] = data.website or None
            self.repo.apply(profile, **updates)
        else:
            profile = self.repo.get_client(self.db, user.id)
            if not profile:
                profile = self.repo.new_client(self.db, user.id)
                user.has_profile = True
                logger.info(f"🆕 Client profile created from personal info for user {user.id}")
            self.repo.apply(profile, phone=data.phone)

        self.repo.save(self.db, user, profile)
        return self.get_profile(user)

    def update_client_profile(self, user: User, data: ClientProfileUpdate) -> ProfileResponse:
        require_role(user, UserRole.CLIENT.value)

        client = self.repo.get_client(self.db, user.id)
        if not client:
            client = self.repo.new_client(self.db, user.id)
            user.has_profile = True
            logger.info(f"🆕 Client profile created for user {user.id}")

        user.name = data.name
        self.repo.apply(
            client,
            phone=data.phone,
            address=data.address,
            city=data.city,
            postal_code=data.postalCode,
        )
        self.repo.save(self.db, user, client)
        return self.get_profile(user)

    def update_professional_profile(
        self, user: User, data: ProfessionalProfileUpdate
    ) -> ProfileResponse:
        require_role(user, UserRole.PROFESSIONAL.value)

        professional = self.repo.get_professional(self.db, user.id)
        if not professional:
            professional = self.repo.new_professional(self.db, user.id)
            user.has_profile = True
            logger.info(f"🆕 Professional profile created for user {user.id}")

        self.repo.apply(
            professional,
            type=map_activity_type(data.type).value,
            other_type_details=other_type_details(data.type, data.otherTypeDetails),
            years_experience=data.yearsExperience,
            bio=data.bio,
            description=data.approach,
            address=data.address,
            city=data.city,
            postal_code=data.postalCode,
            specialties=data.specialties,
            certifications=data.certifications,
        )
        self.repo.save(self.db, user, professional)
        return self.get_profile(user)

    def set_auto_confirm(self, user: User, enabled: bool) -> bool:
        professional: Optional[Professional] = self.repo.get_professional(self.db, user.id)
        if not professional:
            raise HTTPException(status_code=404, detail="Professional profile not found")

        professional.auto_confirm_bookings = enabled
        self.repo.save(self.db, professional)
        logger.info(f"⚙️ Auto-confirm set to {enabled} for professional {professional.id}")
        return bool(professional.auto_confirm_bookings)
