"""Availability repository - Database operations for weekly slots"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Availability, Professional


class AvailabilityRepository:
    """Repository for availability database operations"""

    @staticmethod
    def get_professional(db: Session, user_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.user_id == user_id).first()

    @staticmethod
    def get_slots(db: Session, professional_id: int) -> list[Availability]:
        return (
            db.query(Availability)
            .filter(Availability.professional_id == professional_id)
            .order_by(Availability.day_of_week.asc(), Availability.start_time.asc())
            .all()
        )

    @staticmethod
    def get_slots_for_day(
        db: Session, professional_id: int, day_of_week: int, exclude_id: Optional[int] = None
    ) -> list[Availability]:
        query = db.query(Availability).filter(
            Availability.professional_id == professional_id,
            Availability.day_of_week == day_of_week,
        )
        if exclude_id is not None:
            query = query.filter(Availability.id != exclude_id)
        return query.all()

    @staticmethod
    def get_slot(db: Session, slot_id: int, professional_id: int) -> Optional[Availability]:
        return (
            db.query(Availability)
            .filter(Availability.id == slot_id, Availability.professional_id == professional_id)
            .first()
        )

    @staticmethod
    def create_slot(db: Session, professional_id: int, **slot_data) -> Availability:
        slot = Availability(professional_id=professional_id, **slot_data)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def update_slot(db: Session, slot: Availability, **updates) -> Availability:
        for key, value in updates.items():
            setattr(slot, key, value)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def delete_slot(db: Session, slot: Availability) -> None:
        db.delete(slot)
        db.commit()
