"""Profile repository - Database operations for users and their role profiles"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Client, Professional, ProfessionalType, User


class ProfileRepository:
    """Repository for user profile database operations"""

    @staticmethod
    def get_user_with_profiles(db: Session, user_id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(
                joinedload(User.professional_profile).joinedload(
                    Professional.notification_settings
                ),
                joinedload(User.client_profile),
            )
            .filter(User.id == user_id)
            .first()
        )

    @staticmethod
    def get_professional(db: Session, user_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.user_id == user_id).first()

    @staticmethod
    def get_client(db: Session, user_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.user_id == user_id).first()

    @staticmethod
    def new_professional(db: Session, user_id: int) -> Professional:
        """Add an empty professional profile to the session (not committed)"""
        professional = Professional(
            user_id=user_id,
            type=ProfessionalType.OTHER.value,
            specialties=[],
            certifications=[],
            languages=["fr"],
            auto_confirm_bookings=False,
        )
        db.add(professional)
        return professional

    @staticmethod
    def new_client(db: Session, user_id: int) -> Client:
        """Add an empty client profile to the session (not committed)"""
        client = Client(user_id=user_id, preferred_language="fr")
        db.add(client)
        return client

    @staticmethod
    def apply(model, **updates) -> None:
        for key, value in updates.items():
            if hasattr(model, key):
                setattr(model, key, value)

    @staticmethod
    def save(db: Session, *instances) -> None:
        db.commit()
        for instance in instances:
            db.refresh(instance)
