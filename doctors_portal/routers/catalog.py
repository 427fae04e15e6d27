from fastapi import APIRouter
from typing import List, Optional

from doctors_portal.schemas import ServiceNameOut, ServiceOut
from doctors_portal.services.availability_service import available_services, list_service_names

router = APIRouter(tags=["services"])


@router.get("/service", response_model=List[ServiceNameOut])
async def route_list_services():
    """Service names only (for booking forms)."""
    return await list_service_names()


@router.get("/available", response_model=List[ServiceOut])
async def route_available(date: Optional[str] = None):
    """Every service with the slots still open on `date`."""
    return await available_services(date)
