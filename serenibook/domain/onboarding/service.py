"""Onboarding service - Creates the role profile in a single transaction"""

import logging
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...email_service import send_welcome_email
from ...models import Client, NotificationSettings, Professional, User, UserRole
from ...security_utils import mask_email
from ...shared.activity import map_activity_type, other_type_details
from .schemas import OnboardingRequest, OnboardingResponse

logger = logging.getLogger(__name__)

ONBOARDING_REDIRECT = "/dashboard?fromOnboarding=true"

ONBOARDING_STEPS = {
    UserRole.PROFESSIONAL.value: ["account", "personal_info", "activity", "bio", "preferences"],
    UserRole.CLIENT.value: ["account", "personal_info", "preferences"],
}


def get_steps(role: str) -> list[str]:
    steps = ONBOARDING_STEPS.get((role or "").upper())
    if steps is None:
        raise HTTPException(status_code=400, detail="Unknown role")
    return list(steps)


async def send_welcome(email: str, name: Optional[str], role: str) -> None:
    try:
        await send_welcome_email(email, name, role)
    except Exception as e:
        logger.error(f"❌ Failed to send welcome email to {mask_email(email)}: {e}")


class OnboardingService:
    """Service layer for the onboarding wizard"""

    def __init__(self, db: Session):
        self.db = db

    def _existing_profile_id(self, user: User):
        if user.role == UserRole.PROFESSIONAL.value:
            profile = self.db.query(Professional.id).filter(Professional.user_id == user.id).first()
        else:
            profile = self.db.query(Client.id).filter(Client.user_id == user.id).first()
        return profile[0] if profile else None

    def _build_professional(self, user: User, data: OnboardingRequest) -> Professional:
        info = data.personalInfo
        activity = data.activity
        prefs = data.preferences

        professional = Professional(
            user_id=user.id,
            type=map_activity_type(activity.type).value,
            other_type_details=other_type_details(activity.type, activity.otherTypeDetails),
            years_experience=activity.yearsExperience,
            specialties=activity.specialties,
            certifications=activity.certifications,
            phone=info.phone,
            address=info.address,
            city=info.city,
            postal_code=info.postalCode,
            company_name=(info.companyName or "").strip() or None,
            siret=info.siret or None,
            website=info.website or None,
            bio=data.bio.bio,
            description=data.bio.approach,
            languages=prefs.languages,
            auto_confirm_bookings=prefs.autoConfirmBookings,
        )
        professional.notification_settings = NotificationSettings(
            email_enabled=prefs.emailNotifications,
            sms_enabled=prefs.smsNotifications,
            marketing_emails=prefs.marketingEmails,
        )
        return professional

    def _build_client(self, user: User, data: OnboardingRequest) -> Client:
        info = data.personalInfo
        return Client(
            user_id=user.id,
            phone=info.phone,
            address=info.address,
            city=info.city,
            postal_code=info.postalCode,
            notes=data.preferences.notes,
            preferred_language=data.preferences.preferredLanguage,
        )

    def complete(
        self,
        user: User,
        data: OnboardingRequest,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> OnboardingResponse:
        """Create the role profile, set has_profile and update the name together"""
        logger.info(f"🧭 Onboarding submitted by user {user.id} ({data.role})")

        if data.role != user.role:
            logger.warning(f"⚠️ User {user.id} with role {user.role} submitted {data.role} onboarding")
            raise HTTPException(status_code=400, detail="Role does not match your account")

        existing_id = self._existing_profile_id(user)
        if existing_id is not None:
            logger.info(f"ℹ️ Profile already exists for user {user.id}, onboarding skipped")
            if not user.has_profile:
                user.has_profile = True
                self.db.commit()
            return OnboardingResponse(
                message="Profile already exists",
                data={"profileId": existing_id, "role": user.role},
                redirect=ONBOARDING_REDIRECT,
            )

        try:
            if user.role == UserRole.PROFESSIONAL.value:
                profile = self._build_professional(user, data)
            else:
                profile = self._build_client(user, data)
            self.db.add(profile)

            user.has_profile = True
            if data.personalInfo.name:
                user.name = data.personalInfo.name

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.exception(f"❌ Onboarding failed for user {user.id}")
            raise HTTPException(status_code=500, detail="Failed to create profile") from e

        self.db.refresh(profile)
        logger.info(f"✅ Onboarding completed for user {user.id}, profile {profile.id}")
        if background_tasks is not None:
            background_tasks.add_task(send_welcome, user.email, user.name, user.role)
        return OnboardingResponse(
            message="Profile created",
            data={"profileId": profile.id, "role": user.role},
            redirect=ONBOARDING_REDIRECT,
        )

