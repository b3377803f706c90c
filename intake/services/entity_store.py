# intake/services/entity_store.py
"""
Entity store adapters used by the search engine.
Read-only from the engine's point of view. Two backends:
  - SqlEntityStore      → SQLAlchemy tables (clients, vehicles, vehicle_owners)
  - InMemoryEntityStore → plain lists, seeded with the sample fleet by default

Every adapter raises StoreUnavailable when the backing store cannot answer.
"""

from typing import Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from intake.config import settings
from intake.models.client import Client as ClientRecord
from intake.models.vehicle import Vehicle as VehicleRecord
from intake.schemas.client import Client
from intake.schemas.vehicle import Vehicle
from intake.services.errors import StoreUnavailable
from intake.utils.logger import get_logger

logger = get_logger(__name__)


class EntityStore(Protocol):
    async def list_clients(self) -> list[Client]: ...

    async def list_vehicles(self) -> list[Vehicle]: ...

    async def get_client_by_id(self, client_id: str) -> Optional[Client]: ...

    async def get_vehicles_by_owner_id(self, client_id: str) -> list[Vehicle]: ...


class SqlEntityStore:
    """Opens one short-lived session per call so it can outlive any single request."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _run(self, query_name: str, fn):
        db = self.session_factory()
        try:
            return fn(db)
        except SQLAlchemyError as e:
            logger.error(f"[STORE] {query_name} failed: {e}")
            raise StoreUnavailable(f"{query_name}: {e}") from e
        finally:
            db.close()

    async def list_clients(self) -> list[Client]:
        return self._run("list_clients", lambda db: [
            Client.from_record(row)
            for row in db.query(ClientRecord).options(selectinload(ClientRecord.vehicles))
                         .order_by(ClientRecord.id).all()
        ])

    async def list_vehicles(self) -> list[Vehicle]:
        return self._run("list_vehicles", lambda db: [
            Vehicle.from_record(row)
            for row in db.query(VehicleRecord).options(selectinload(VehicleRecord.owners))
                         .order_by(VehicleRecord.id).all()
        ])

    async def get_client_by_id(self, client_id: str) -> Optional[Client]:
        def query(db):
            row = db.query(ClientRecord).filter(ClientRecord.id == client_id).first()
            return Client.from_record(row) if row else None
        return self._run("get_client_by_id", query)

    async def get_vehicles_by_owner_id(self, client_id: str) -> list[Vehicle]:
        return self._run("get_vehicles_by_owner_id", lambda db: [
            Vehicle.from_record(row)
            for row in db.query(VehicleRecord)
                         .filter(VehicleRecord.owners.any(ClientRecord.id == client_id))
                         .options(selectinload(VehicleRecord.owners))
                         .order_by(VehicleRecord.id).all()
        ])


class InMemoryEntityStore:
    """List-backed store. Dangling owner/vehicle ids are kept as given."""

    def __init__(self, clients: Optional[list[Client]] = None, vehicles: Optional[list[Vehicle]] = None):
        if clients is None and vehicles is None:
            from intake.fixtures.sample_fleet import SAMPLE_CLIENTS, SAMPLE_VEHICLES
            clients, vehicles = SAMPLE_CLIENTS, SAMPLE_VEHICLES
        self.clients = list(clients or [])
        self.vehicles = list(vehicles or [])

    async def list_clients(self) -> list[Client]:
        return list(self.clients)

    async def list_vehicles(self) -> list[Vehicle]:
        return list(self.vehicles)

    async def get_client_by_id(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    async def get_vehicles_by_owner_id(self, client_id: str) -> list[Vehicle]:
        return [v for v in self.vehicles if client_id in v.owner_ids]


def build_store(backend: Optional[str] = None) -> EntityStore:
    """Create the store configured by STORE_BACKEND (database | memory)."""
    backend = (backend or settings.STORE_BACKEND).lower()
    if backend == "memory":
        logger.info("[STORE] Using in-memory sample fleet")
        return InMemoryEntityStore()
    if backend == "database":
        from intake.database import SessionLocal
        return SqlEntityStore(SessionLocal)
    raise ValueError(f"Unknown STORE_BACKEND '{backend}' (expected 'database' or 'memory')")
