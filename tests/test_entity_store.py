# tests/test_entity_store.py
"""Unit tests for the SQL and in-memory entity stores."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from intake.database import create_tables
from intake.fixtures.sample_fleet import SAMPLE_CLIENTS, SAMPLE_VEHICLES, seed_sample_fleet
from intake.models.client import Client as ClientRecord
from intake.models.vehicle import Vehicle as VehicleRecord
from intake.services.entity_store import InMemoryEntityStore, SqlEntityStore, build_store
from intake.schemas.search import criteria_for
from intake.services.errors import StoreUnavailable
from intake.services.search_service import SearchService


def ids(entities):
    return [e.id for e in entities]


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    seed_sample_fleet(db)
    db.close()
    yield factory
    engine.dispose()


class TestSqlEntityStore:
    @pytest.mark.asyncio
    async def test_lists_seeded_clients(self, session_factory):
        clients = await SqlEntityStore(session_factory).list_clients()

        assert ids(clients) == ids(SAMPLE_CLIENTS)
        jan = clients[0]
        assert jan.full_name == "Jan Kowalski"
        assert jan.vehicles == ["veh1", "veh2"]
        assert clients[3].vehicles == []

    @pytest.mark.asyncio
    async def test_lists_vehicles_with_owner_ids(self, session_factory):
        vehicles = await SqlEntityStore(session_factory).list_vehicles()

        assert ids(vehicles) == ids(SAMPLE_VEHICLES)
        assert vehicles[4].owner_ids == ["client3"]
        assert vehicles[4].vin is None

    @pytest.mark.asyncio
    async def test_large_fleet_is_scanned_in_full(self, session_factory):
        db = session_factory()
        db.add_all([
            VehicleRecord(id=f"v{n:05d}", make="Fiat", model="Ducato", year=2015, license_plate=f"PL{n:05d}")
            for n in range(1500)
        ])
        db.commit()
        db.close()

        store = SqlEntityStore(session_factory)
        vehicles = await store.list_vehicles()
        results = await SearchService(store).search_by_field(criteria_for("licensePlate", "PL01499"))

        assert len(vehicles) == 1500 + len(SAMPLE_VEHICLES)
        assert ids(results.vehicles) == ["v01499"]

    @pytest.mark.asyncio
    async def test_get_client_by_id(self, session_factory):
        store = SqlEntityStore(session_factory)

        client = await store.get_client_by_id("client3")

        assert client.company == "Wisniewski Transport Sp. z o.o."
        assert await store.get_client_by_id("nobody") is None

    @pytest.mark.asyncio
    async def test_vehicles_by_owner(self, session_factory):
        store = SqlEntityStore(session_factory)

        assert ids(await store.get_vehicles_by_owner_id("client3")) == ["veh4", "veh5", "veh6"]
        assert await store.get_vehicles_by_owner_id("client4") == []

    @pytest.mark.asyncio
    async def test_shared_vehicle_lists_every_owner(self, session_factory):
        db = session_factory()
        van = VehicleRecord(id="van", make="Ford", model="Transit", year=2017, license_plate="PO55555")
        van.owners = db.query(ClientRecord).filter(ClientRecord.id.in_(["client2", "client1"])).all()
        db.add(van)
        db.commit()
        db.close()

        store = SqlEntityStore(session_factory)
        shared = [v for v in await store.list_vehicles() if v.id == "van"][0]

        assert shared.owner_ids == ["client1", "client2"]
        assert "van" in ids(await store.get_vehicles_by_owner_id("client2"))

    @pytest.mark.asyncio
    async def test_database_error_becomes_store_unavailable(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        store = SqlEntityStore(lambda: db)

        with pytest.raises(StoreUnavailable):
            await store.list_clients()

        db.close.assert_called_once()

    def test_seeding_twice_is_a_no_op(self, session_factory):
        db = session_factory()
        try:
            assert seed_sample_fleet(db) == 0
            assert db.query(VehicleRecord).count() == len(SAMPLE_VEHICLES)
        finally:
            db.close()


class TestInMemoryEntityStore:
    @pytest.mark.asyncio
    async def test_defaults_to_sample_fleet(self):
        store = InMemoryEntityStore()
        assert len(await store.list_clients()) == 5
        assert len(await store.list_vehicles()) == 7

    @pytest.mark.asyncio
    async def test_explicit_empty_store(self):
        store = InMemoryEntityStore([], [])
        assert await store.list_clients() == []
        assert await store.get_client_by_id("client1") is None

    @pytest.mark.asyncio
    async def test_listing_returns_a_copy(self):
        store = InMemoryEntityStore()
        (await store.list_vehicles()).clear()
        assert len(await store.list_vehicles()) == 7


class TestBuildStore:
    def test_memory_backend(self):
        assert isinstance(build_store("memory"), InMemoryEntityStore)

    def test_database_backend(self):
        assert isinstance(build_store("DATABASE"), SqlEntityStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_store("redis")
