# intake/services/search_flow.py
"""
Shared machinery for the two intake-form resolution flows.

A flow is an explicit state value plus a single `modal` slot, so at most one
disambiguation list is ever open. Each search bumps a generation counter;
results that arrive for an older generation are dropped, which keeps the most
recent search authoritative when searches overlap.

    IDLE → SEARCHING → FAILED | NO_MATCH | SINGLE_MATCH | MULTI_MATCH → RESOLVED
    clear_search_results() → IDLE from anywhere
"""

from enum import Enum
from typing import Any, Optional

from intake.schemas.client import Client
from intake.schemas.intake import FlowSnapshot
from intake.schemas.search import SearchField, SearchResults, criteria_for
from intake.schemas.vehicle import Vehicle
from intake.services.errors import CandidateNotAvailable, EmptyQuery, SearchFailure
from intake.services.form_mapper import map_client_to_form_data, map_vehicle_to_form_data
from intake.services.intake_form import IntakeForm
from intake.services.search_service import SearchService
from intake.utils.logger import get_logger

logger = get_logger(__name__)

EMPTY_FIELD_MESSAGE = "Search field is empty"
SEARCH_FAILED_MESSAGE = "Search failed, please try again"


class FlowState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    FAILED = "failed"
    NO_MATCH = "no_match"
    SINGLE_MATCH = "single_match"
    MULTI_MATCH = "multi_match"
    RESOLVED = "resolved"


class Modal(str, Enum):
    CLIENT = "client"
    VEHICLE = "vehicle"


class SearchFlow:
    tag = "FLOW"

    def __init__(self, service: SearchService, form: IntakeForm):
        self.service = service
        self.form = form
        self.state = FlowState.IDLE
        self.modal: Optional[Modal] = None
        self.found_clients: list[Client] = []
        self.found_vehicles: list[Vehicle] = []
        self.search_error: Optional[str] = None
        self.search_loading = False
        self.last_patch: dict[str, Any] = {}
        self._generation = 0

    @property
    def show_client_modal(self) -> bool:
        return self.modal == Modal.CLIENT

    @property
    def show_vehicle_modal(self) -> bool:
        return self.modal == Modal.VEHICLE

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _next_generation(self) -> int:
        """Supersede every search or fan-out still in flight."""
        self._generation += 1
        return self._generation

    # ── Search ───────────────────────────────────────────────────────────────
    async def _run_search(self, field: SearchField) -> Optional[SearchResults]:
        """Search using the form's current value for `field`. None means the flow already settled."""
        value = self.form.get(field.value)
        value = "" if value is None else str(value)
        if not value.strip():
            self.clear_search_results()
            self.search_error = EMPTY_FIELD_MESSAGE
            return None

        generation = self._next_generation()
        self.state = FlowState.SEARCHING
        self.search_loading = True
        self.search_error = None
        self.modal = None
        self.found_clients = []
        self.found_vehicles = []
        self.last_patch = {}

        try:
            results = await self.service.search_by_field(criteria_for(field, value))
        except EmptyQuery:
            if self.is_current(generation):
                self.state = FlowState.IDLE
                self.search_loading = False
                self.search_error = EMPTY_FIELD_MESSAGE
            return None
        except SearchFailure as e:
            if self.is_current(generation):
                logger.warning(f"[{self.tag}] Search by {field.value} failed: {e}")
                self.state = FlowState.FAILED
                self.search_loading = False
                self.search_error = SEARCH_FAILED_MESSAGE
            return None

        if not self.is_current(generation):
            logger.debug(f"[{self.tag}] Dropping stale results for {field.value}={value!r}")
            return None
        self.search_loading = False
        return results

    # ── Patches ──────────────────────────────────────────────────────────────
    def _apply(self, patch: dict[str, Any]) -> dict[str, Any]:
        self.form.apply(patch)
        self.last_patch = patch
        return patch

    def _apply_client(self, client: Client, **extra: Any) -> dict[str, Any]:
        patch = {**map_client_to_form_data(client), **extra}
        logger.info(f"[{self.tag}] Client {client.id} applied to form")
        return self._apply(patch)

    def _apply_vehicle(self, vehicle: Vehicle) -> dict[str, Any]:
        patch = map_vehicle_to_form_data(vehicle)
        logger.info(f"[{self.tag}] Vehicle {vehicle.id} ({vehicle.license_plate}) applied to form")
        return self._apply(patch)

    # ── Candidates ───────────────────────────────────────────────────────────
    def find_client(self, client_id: str) -> Client:
        for client in self.found_clients:
            if client.id == client_id:
                return client
        raise CandidateNotAvailable("client", client_id)

    def find_vehicle(self, vehicle_id: str) -> Vehicle:
        for vehicle in self.found_vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        raise CandidateNotAvailable("vehicle", vehicle_id)

    # ── Reset / cancel ───────────────────────────────────────────────────────
    def cancel_selection(self):
        """User dismissed the open candidate list without picking."""
        if self.modal is None:
            return
        self.modal = None
        if self.state == FlowState.MULTI_MATCH and not self.last_patch:
            self.state = FlowState.IDLE
        else:
            self.state = FlowState.RESOLVED

    def clear_search_results(self):
        self._next_generation()
        self.state = FlowState.IDLE
        self.modal = None
        self.found_clients = []
        self.found_vehicles = []
        self.search_error = None
        self.search_loading = False
        self.last_patch = {}

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(
            state=self.state.value,
            found_clients=self.found_clients,
            found_vehicles=self.found_vehicles,
            show_client_modal=self.show_client_modal,
            show_vehicle_modal=self.show_vehicle_modal,
            search_error=self.search_error,
            search_loading=self.search_loading,
            last_patch=self.last_patch,
        )
