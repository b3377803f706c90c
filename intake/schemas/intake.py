# intake/schemas/intake.py
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional

from intake.schemas.client import Client
from intake.schemas.vehicle import Vehicle


class FlowSnapshot(BaseModel):
    state: str
    found_clients: list[Client] = []
    found_vehicles: list[Vehicle] = []
    show_client_modal: bool = False
    show_vehicle_modal: bool = False
    search_error: Optional[str] = None
    search_loading: bool = False
    last_patch: dict[str, Any] = {}

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class IntakeSessionOut(BaseModel):
    session_id: str
    form: dict[str, Any]
    owner_search: FlowSnapshot
    vehicle_search: FlowSnapshot

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class IntakeSessionCreate(BaseModel):
    form: dict[str, Any] = Field(default_factory=dict)


class CandidateSelection(BaseModel):
    id: str
