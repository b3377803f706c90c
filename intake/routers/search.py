# intake/routers/search.py
"""
Stateless search endpoint.
POST /search: one field/value lookup, returns matching vehicles and clients.
EmptyQuery and SearchFailure are mapped to 422 / 503 by the handlers in main.py.
"""

from fastapi import APIRouter, Depends
from intake.dependencies import get_search_service
from intake.schemas.search import SearchRequest, SearchResults, criteria_for
from intake.services.search_service import SearchService

router = APIRouter()


@router.post("/search", response_model=SearchResults, summary="Search clients/vehicles by one field")
async def search(body: SearchRequest, service: SearchService = Depends(get_search_service)):
    return await service.search_by_field(criteria_for(body.field, body.value))
