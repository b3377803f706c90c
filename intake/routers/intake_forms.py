# intake/routers/intake_forms.py
"""
Intake-form sessions: the owner-search and vehicle-search flows over HTTP.

POST   /intake                              open a form (optional initial fields)
GET    /intake/{sid}                        form + both flow snapshots
PATCH  /intake/{sid}/form                   edit form fields
DELETE /intake/{sid}                        abandon the form
POST   /intake/{sid}/owner-search           search by an owner-side field
POST   /intake/{sid}/vehicle-search         search by license plate
POST   /intake/{sid}/{flow}/select-client   pick a client from the open list
POST   /intake/{sid}/{flow}/select-vehicle  pick a vehicle from the open list
POST   /intake/{sid}/{flow}/cancel          dismiss the open list
POST   /intake/{sid}/{flow}/clear           reset the flow
"""

from enum import Enum
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from intake.dependencies import get_session_registry
from intake.schemas.intake import CandidateSelection, IntakeSessionCreate, IntakeSessionOut
from intake.schemas.search import SearchField
from intake.services.errors import CandidateNotAvailable, SessionNotFound
from intake.services.intake_sessions import IntakeSession, IntakeSessionRegistry
from intake.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


class FlowName(str, Enum):
    OWNER_SEARCH = "owner-search"
    VEHICLE_SEARCH = "vehicle-search"


class OwnerSearchRequest(BaseModel):
    field: SearchField


def _session(session_id: str, registry: IntakeSessionRegistry) -> IntakeSession:
    try:
        return registry.get(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/intake", response_model=IntakeSessionOut, status_code=201, summary="Open an intake form")
async def open_session(body: Optional[IntakeSessionCreate] = Body(default=None),
                       registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = registry.open(body.form if body else None)
    return session.to_out()


@router.get("/intake/{session_id}", response_model=IntakeSessionOut)
async def get_session(session_id: str, registry: IntakeSessionRegistry = Depends(get_session_registry)):
    return _session(session_id, registry).to_out()


@router.patch("/intake/{session_id}/form", response_model=IntakeSessionOut, summary="Edit form fields")
async def update_form(session_id: str, fields: dict[str, Any],
                      registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    session.form.apply(fields)
    return session.to_out()


@router.delete("/intake/{session_id}", summary="Abandon an intake form")
async def close_session(session_id: str, registry: IntakeSessionRegistry = Depends(get_session_registry)):
    _session(session_id, registry)
    registry.close(session_id)
    return {"status": "closed", "session_id": session_id}


@router.post("/intake/{session_id}/owner-search", response_model=IntakeSessionOut,
             summary="Search the owner side using the form's field value")
async def owner_search(session_id: str, body: OwnerSearchRequest,
                       registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    try:
        await session.owner_search.handle_search_by_field(body.field)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return session.to_out()


@router.post("/intake/{session_id}/vehicle-search", response_model=IntakeSessionOut,
             summary="Search vehicles using the form's license plate")
async def vehicle_search(session_id: str, registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    await session.vehicle_search.handle_search_by_field(SearchField.LICENSE_PLATE)
    return session.to_out()


@router.post("/intake/{session_id}/{flow}/select-client", response_model=IntakeSessionOut)
async def select_client(session_id: str, flow: FlowName, body: CandidateSelection,
                        registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    search_flow = session.flow(flow.value)
    try:
        await search_flow.handle_client_select(search_flow.find_client(body.id))
    except CandidateNotAvailable as e:
        logger.warning(f"[INTAKE] {session_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_out()


@router.post("/intake/{session_id}/{flow}/select-vehicle", response_model=IntakeSessionOut)
async def select_vehicle(session_id: str, flow: FlowName, body: CandidateSelection,
                         registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    search_flow = session.flow(flow.value)
    try:
        await search_flow.handle_vehicle_select(search_flow.find_vehicle(body.id))
    except CandidateNotAvailable as e:
        logger.warning(f"[INTAKE] {session_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_out()


@router.post("/intake/{session_id}/{flow}/cancel", response_model=IntakeSessionOut)
async def cancel_selection(session_id: str, flow: FlowName,
                           registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    session.flow(flow.value).cancel_selection()
    return session.to_out()


@router.post("/intake/{session_id}/{flow}/clear", response_model=IntakeSessionOut)
async def clear_search(session_id: str, flow: FlowName,
                       registry: IntakeSessionRegistry = Depends(get_session_registry)):
    session = _session(session_id, registry)
    session.flow(flow.value).clear_search_results()
    return session.to_out()
