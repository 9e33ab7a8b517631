"""Service catalog service - Business logic for a professional's services"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Professional, Service, User
from .repository import ServiceRepository
from .schemas import ServiceBase, ServiceResponse

logger = logging.getLogger(__name__)


def service_to_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        name=service.name,
        description=service.description,
        duration=service.duration,
        price=service.price,
        color=service.color,
        maxParticipants=service.max_participants,
        type=service.type,
        location=service.location,
        active=bool(service.active),
    )


class CatalogService:
    """Service layer for service catalog business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def _professional(self, user: User) -> Professional:
        professional = self.repo.get_professional(self.db, user.id)
        if not professional:
            raise HTTPException(status_code=404, detail="Professional profile not found")
        return professional

    def _service(self, service_id: int, professional: Professional) -> Service:
        service = self.repo.get_service(self.db, service_id, professional.id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    @staticmethod
    def _fields(data: ServiceBase) -> dict:
        return {
            "name": data.name,
            "description": data.description,
            "duration": data.duration,
            "price": data.price,
            "color": data.color,
            "max_participants": data.maxParticipants,
            "type": data.type,
            "location": data.location,
        }

    def list_services(self, user: User) -> list[Service]:
        professional = self._professional(user)
        return self.repo.get_services(self.db, professional.id)

    def create_service(self, user: User, data: ServiceBase) -> Service:
        professional = self._professional(user)
        logger.info(f"📥 Creating service '{data.name}' for professional {professional.id}")
        return self.repo.create_service(self.db, professional.id, **self._fields(data))

    def update_service(self, user: User, service_id: int, data: ServiceBase) -> Service:
        professional = self._professional(user)
        service = self._service(service_id, professional)
        return self.repo.update_service(self.db, service, **self._fields(data))

    def delete_service(self, user: User, service_id: int) -> Optional[Service]:
        """Delete a service, or deactivate it when bookings still point at it.

        Returns the deactivated service, or None when the row was deleted.
        """
        professional = self._professional(user)
        service = self._service(service_id, professional)

        bookings = self.repo.count_bookings(self.db, service.id)
        if bookings:
            logger.info(
                f"🗃️ Service {service.id} has {bookings} booking(s), deactivating instead of deleting"
            )
            return self.repo.update_service(self.db, service, active=False)

        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service {service_id} deleted")
        return None
