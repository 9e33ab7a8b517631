"""Service catalog router - FastAPI endpoints for /users/{user_id}/services"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_authorized_user
from ...database import get_db
from ...models import User
from ...schemas import SuccessResponse
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService, service_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    current_user: User = Depends(get_authorized_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """The professional's services, ordered by name"""
    return [service_to_response(s) for s in service.list_services(current_user)]


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_authorized_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(service.create_service(current_user, data))


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(get_authorized_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(service.update_service(current_user, service_id, data))


@router.delete("/{service_id}", response_model=ServiceResponse | SuccessResponse)
async def delete_service(
    service_id: int,
    current_user: User = Depends(get_authorized_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete a service; one with bookings is deactivated and returned instead"""
    deactivated = service.delete_service(current_user, service_id)
    if deactivated is not None:
        return service_to_response(deactivated)
    return SuccessResponse()
