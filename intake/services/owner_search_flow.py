# intake/services/owner_search_flow.py
"""
Owner-side resolution flow: search by ownerName, companyName, taxId, email or phone.

  0 clients  → NO_MATCH, message only
  1 client   → client patch applied at once (referral source forced to the
               regular-customer value), then the client's vehicles are offered
  >1 clients → client list opened, patch applied on pick

The vehicle list opens whenever the resolved client owns at least one vehicle,
including exactly one. The vehicle flow auto-applies a lone owner instead.
"""

from intake.config import settings
from intake.schemas.client import Client
from intake.schemas.search import CLIENT_FIELDS, SearchField
from intake.schemas.vehicle import Vehicle
from intake.services.errors import SearchFailure
from intake.services.search_flow import FlowState, Modal, SearchFlow
from intake.utils.logger import get_logger

logger = get_logger(__name__)

NO_CLIENTS_MESSAGE = "No clients found matching the given data"


class OwnerSearchFlow(SearchFlow):
    tag = "OWNER-FLOW"

    async def handle_search_by_field(self, field):
        field = SearchField(field)
        if field not in CLIENT_FIELDS:
            raise ValueError(f"Owner search does not support field '{field.value}'")

        results = await self._run_search(field)
        if results is None:
            return

        clients = results.clients
        self.found_clients = clients
        if not clients:
            self.state = FlowState.NO_MATCH
            self.search_error = NO_CLIENTS_MESSAGE
            logger.info(f"[{self.tag}] No client for {field.value}")
        elif len(clients) == 1:
            self.state = FlowState.SINGLE_MATCH
            await self._resolve_client(clients[0])
        else:
            self.state = FlowState.MULTI_MATCH
            self.modal = Modal.CLIENT
            logger.info(f"[{self.tag}] {len(clients)} clients match {field.value}, awaiting pick")

    async def handle_client_select(self, client: Client):
        self.find_client(client.id)
        await self._resolve_client(client)

    async def handle_vehicle_select(self, vehicle: Vehicle):
        self.find_vehicle(vehicle.id)
        self._apply_vehicle(vehicle)
        self.modal = None
        self.state = FlowState.RESOLVED

    async def _resolve_client(self, client: Client):
        # A newer pick, search or reset drops this client's vehicle list
        generation = self._next_generation()
        self._apply_client(client, referralSource=settings.REGULAR_CUSTOMER_REFERRAL)
        self.modal = None
        self.found_vehicles = []
        self.state = FlowState.RESOLVED

        try:
            vehicles = await self.service.get_vehicles_for_client(client.id)
        except SearchFailure as e:
            # Client patch stays applied; the vehicle list is simply not offered
            logger.warning(f"[{self.tag}] Could not load vehicles of {client.id}: {e}")
            return

        if not self.is_current(generation):
            logger.debug(f"[{self.tag}] Dropping stale vehicle list for {client.id}")
            return
        if not vehicles:
            logger.info(f"[{self.tag}] Client {client.id} has no registered vehicles")
            return

        self.found_vehicles = vehicles
        self.modal = Modal.VEHICLE
