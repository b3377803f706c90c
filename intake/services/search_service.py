# intake/services/search_service.py
"""
Search dispatcher for intake forms.

  licensePlate          → scan vehicles, then resolve each distinct owner id
  ownerName / companyName / taxId / email / phone
                        → scan clients, then fetch each matched client's vehicles

Read-only against the store. Any store failure aborts the whole search and is
re-raised as SearchFailure carrying the searched field. Owner ids that do not
resolve to a client are skipped.
"""

from typing import Optional, Union

from intake.config import settings
from intake.schemas.client import Client
from intake.schemas.search import ClientCriteria, SearchField, SearchResults, VehicleCriteria, criteria_for
from intake.schemas.vehicle import Vehicle
from intake.services.entity_store import EntityStore
from intake.services.errors import EmptyQuery, SearchFailure, StoreUnavailable
from intake.services.field_matcher import match_clients, match_vehicles
from intake.utils.logger import get_logger

logger = get_logger(__name__)

Criteria = Union[VehicleCriteria, ClientCriteria]


def validate_criteria(criteria: Criteria):
    if not criteria.value or not criteria.value.strip():
        raise EmptyQuery(SearchField(criteria.field).value)


class SearchService:
    def __init__(self, store: EntityStore, deduplicate_owner_vehicles: Optional[bool] = None):
        self.store = store
        self.deduplicate_owner_vehicles = (
            settings.DEDUPLICATE_OWNER_VEHICLES
            if deduplicate_owner_vehicles is None else deduplicate_owner_vehicles
        )

    async def search_by_field(self, criteria: Criteria, value: Optional[str] = None) -> SearchResults:
        """
        Run one search. Accepts a criteria variant, or a field name plus value.
        Raises EmptyQuery for a blank value, SearchFailure when the store errors.
        """
        if value is not None or not isinstance(criteria, (VehicleCriteria, ClientCriteria)):
            criteria = criteria_for(criteria, value or "")
        validate_criteria(criteria)

        field = SearchField(criteria.field).value
        logger.debug(f"[SEARCH] field={field} value={criteria.value!r}")
        try:
            if isinstance(criteria, VehicleCriteria):
                results = await self._search_by_license_plate(criteria)
            else:
                results = await self._search_by_client_field(criteria)
        except StoreUnavailable as e:
            logger.error(f"[SEARCH] field={field} aborted: {e}")
            raise SearchFailure(field, e.__cause__ or e) from e

        logger.info(f"[SEARCH] field={field} value={criteria.value!r} → "
                    f"{len(results.vehicles)} vehicle(s), {len(results.clients)} client(s)")
        return results

    async def _from_store(self, operation: str, *args):
        """Await one store read. Whatever the store raises surfaces as StoreUnavailable."""
        try:
            return await getattr(self.store, operation)(*args)
        except StoreUnavailable:
            raise
        except Exception as e:
            raise StoreUnavailable(f"{operation}: {e}") from e

    async def get_vehicles_for_client(self, client_id: str) -> list[Vehicle]:
        try:
            vehicles = await self._from_store("get_vehicles_by_owner_id", client_id)
        except StoreUnavailable as e:
            logger.error(f"[SEARCH] Vehicles for client {client_id} unavailable: {e}")
            raise SearchFailure("vehicles", e) from e
        logger.debug(f"[SEARCH] client={client_id} owns {len(vehicles)} vehicle(s)")
        return vehicles

    async def _search_by_license_plate(self, criteria: VehicleCriteria) -> SearchResults:
        vehicles = match_vehicles(criteria, await self._from_store("list_vehicles"))

        owner_ids: list[str] = []
        for vehicle in vehicles:
            for owner_id in vehicle.owner_ids:
                if owner_id not in owner_ids:
                    owner_ids.append(owner_id)

        clients: list[Client] = []
        for owner_id in owner_ids:
            client = await self._from_store("get_client_by_id", owner_id)
            if client is None:
                logger.debug(f"[SEARCH] Dangling owner id {owner_id} skipped")
                continue
            clients.append(client)

        return SearchResults(vehicles=vehicles, clients=clients)

    async def _search_by_client_field(self, criteria: ClientCriteria) -> SearchResults:
        clients = match_clients(criteria, await self._from_store("list_clients"))

        vehicles: list[Vehicle] = []
        seen: set[str] = set()
        for client in clients:
            for vehicle in await self._from_store("get_vehicles_by_owner_id", client.id):
                if self.deduplicate_owner_vehicles:
                    if vehicle.id in seen:
                        continue
                    seen.add(vehicle.id)
                vehicles.append(vehicle)

        return SearchResults(vehicles=vehicles, clients=clients)
