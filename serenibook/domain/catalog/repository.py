"""Service catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Professional, Service


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_professional(db: Session, user_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.user_id == user_id).first()

    @staticmethod
    def get_services(db: Session, professional_id: int) -> list[Service]:
        return (
            db.query(Service)
            .filter(Service.professional_id == professional_id)
            .order_by(Service.name.asc())
            .all()
        )

    @staticmethod
    def get_service(db: Session, service_id: int, professional_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.professional_id == professional_id)
            .first()
        )

    @staticmethod
    def create_service(db: Session, professional_id: int, **service_data) -> Service:
        service = Service(professional_id=professional_id, active=True, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def count_bookings(db: Session, service_id: int) -> int:
        return db.query(Booking).filter(Booking.service_id == service_id).count()

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
