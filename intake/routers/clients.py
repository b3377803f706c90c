# intake/routers/clients.py
"""Read-only client endpoints backed by the configured entity store."""

from fastapi import APIRouter, Depends, HTTPException
from intake.dependencies import get_search_service, get_store
from intake.schemas.client import Client
from intake.schemas.vehicle import Vehicle
from intake.services.entity_store import EntityStore
from intake.services.search_service import SearchService

router = APIRouter()


@router.get("/clients", response_model=list[Client], summary="List clients")
async def list_clients(store: EntityStore = Depends(get_store)):
    return await store.list_clients()


@router.get("/clients/{client_id}", response_model=Client, summary="Get one client")
async def get_client(client_id: str, store: EntityStore = Depends(get_store)):
    client = await store.get_client_by_id(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail=f"Client '{client_id}' not found")
    return client


@router.get("/clients/{client_id}/vehicles", response_model=list[Vehicle], summary="Vehicles owned by a client")
async def get_client_vehicles(client_id: str, service: SearchService = Depends(get_search_service)):
    return await service.get_vehicles_for_client(client_id)
