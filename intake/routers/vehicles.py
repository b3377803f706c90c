# intake/routers/vehicles.py
"""Read-only vehicle endpoints: listing and plate lookup."""

from fastapi import APIRouter, Depends
from intake.dependencies import get_search_service, get_store
from intake.schemas.search import VehicleCriteria
from intake.schemas.vehicle import Vehicle, VehicleLookupOut
from intake.services.entity_store import EntityStore
from intake.services.search_service import SearchService

router = APIRouter()


@router.get("/vehicles", response_model=list[Vehicle], summary="List vehicles")
async def list_vehicles(make: str = None, store: EntityStore = Depends(get_store)):
    vehicles = await store.list_vehicles()
    if make:
        vehicles = [v for v in vehicles if v.make.casefold() == make.casefold()]
    return vehicles


@router.get("/vehicles/lookup/{plate}", response_model=VehicleLookupOut, summary="Look up a plate number")
async def lookup_vehicle(plate: str, service: SearchService = Depends(get_search_service)):
    results = await service.search_by_field(VehicleCriteria(value=plate))
    if not results.vehicles:
        return VehicleLookupOut(plate=plate, status="unknown", registered=False)
    return VehicleLookupOut(plate=plate, status="known", registered=True, matches=results.vehicles)
