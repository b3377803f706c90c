# intake/services/vehicle_search_flow.py
"""
Vehicle-side resolution flow: search by licensePlate.

  0 vehicles  → NO_MATCH, message only
  1 vehicle   → vehicle patch applied at once, then its owners decide:
                  0 → informational message (vehicle patch stays)
                  1 → owner patch applied automatically
                 >1 → owner list opened
  >1 vehicles → vehicle list opened; on pick the vehicle patch is applied and
                owners are taken from the clients this search already fetched

A picked vehicle that lists owner ids none of which are in that client pool is
logged and otherwise ignored.
"""

from intake.schemas.client import Client
from intake.schemas.search import SearchField
from intake.schemas.vehicle import Vehicle
from intake.services.search_flow import FlowState, Modal, SearchFlow
from intake.utils.logger import get_logger

logger = get_logger(__name__)

NO_VEHICLE_MESSAGE = "No vehicle found with that license plate"
NO_OWNER_MESSAGE = "Vehicle has no assigned owner"


class VehicleSearchFlow(SearchFlow):
    tag = "VEHICLE-FLOW"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._client_pool: list[Client] = []

    async def handle_search_by_field(self, field=SearchField.LICENSE_PLATE):
        field = SearchField(field)
        if field != SearchField.LICENSE_PLATE:
            raise ValueError(f"Vehicle search does not support field '{field.value}'")

        results = await self._run_search(field)
        if results is None:
            return

        vehicles = results.vehicles
        self.found_vehicles = vehicles
        self.found_clients = results.clients
        self._client_pool = list(results.clients)

        if not vehicles:
            self.state = FlowState.NO_MATCH
            self.search_error = NO_VEHICLE_MESSAGE
            logger.info(f"[{self.tag}] No vehicle for plate {self.form.get(field.value)!r}")
        elif len(vehicles) == 1:
            self.state = FlowState.SINGLE_MATCH
            self._resolve_vehicle(vehicles[0], from_pool=False)
        else:
            self.state = FlowState.MULTI_MATCH
            self.modal = Modal.VEHICLE
            logger.info(f"[{self.tag}] {len(vehicles)} vehicles match, awaiting pick")

    async def handle_vehicle_select(self, vehicle: Vehicle):
        self.find_vehicle(vehicle.id)
        self._resolve_vehicle(vehicle, from_pool=True)

    async def handle_client_select(self, client: Client):
        self.find_client(client.id)
        self._apply_client(client)
        self.modal = None
        self.state = FlowState.RESOLVED

    def clear_search_results(self):
        super().clear_search_results()
        self._client_pool = []

    def _owners_of(self, vehicle: Vehicle) -> list[Client]:
        return [c for c in self._client_pool if c.id in vehicle.owner_ids]

    def _resolve_vehicle(self, vehicle: Vehicle, from_pool: bool):
        self._apply_vehicle(vehicle)
        self.modal = None

        owners = self._owners_of(vehicle)
        self.found_clients = owners

        if not owners:
            self.state = FlowState.RESOLVED
            if from_pool and vehicle.owner_ids:
                logger.warning(f"[{self.tag}] Owners {vehicle.owner_ids} of {vehicle.id} "
                               f"not among fetched clients, owner left empty")
            else:
                self.search_error = NO_OWNER_MESSAGE
        elif len(owners) == 1:
            self._apply_client(owners[0])
            self.state = FlowState.RESOLVED
        else:
            # State keeps the vehicle cardinality until an owner is picked
            self.modal = Modal.CLIENT
            logger.info(f"[{self.tag}] Vehicle {vehicle.id} has {len(owners)} owners, awaiting pick")
