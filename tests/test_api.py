# tests/test_api.py
"""HTTP tests for the search, intake-form and lookup endpoints."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from intake.database import get_db
from intake.dependencies import get_search_service, get_session_registry, get_store
from intake.main import app
from intake.services.entity_store import InMemoryEntityStore
from intake.services.errors import StoreUnavailable
from intake.services.intake_sessions import IntakeSessionRegistry
from intake.services.search_service import SearchService

API = "/api/v1"


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def client(store):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    TestSession = sessionmaker(bind=engine)

    def override_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    service = SearchService(store)
    registry = IntakeSessionRegistry(service)
    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_search_service] = lambda: service
    app.dependency_overrides[get_session_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


def open_form(client, **fields):
    response = client.post(f"{API}/intake", json={"form": fields})
    assert response.status_code == 201
    return response.json()["sessionId"]


class TestSearchEndpoint:
    def test_plate_search(self, client):
        response = client.post(f"{API}/search", json={"field": "licensePlate", "value": "WA12345"})

        assert response.status_code == 200
        body = response.json()
        assert [v["id"] for v in body["vehicles"]] == ["veh1"]
        assert body["vehicles"][0]["licensePlate"] == "WA12345"
        assert body["vehicles"][0]["ownerIds"] == ["client1"]
        assert [c["id"] for c in body["clients"]] == ["client1"]

    def test_owner_search(self, client):
        response = client.post(f"{API}/search", json={"field": "taxId", "value": "9876543210"})

        body = response.json()
        assert [c["id"] for c in body["clients"]] == ["client3"]
        assert [v["id"] for v in body["vehicles"]] == ["veh4", "veh5", "veh6"]

    def test_empty_value(self, client):
        response = client.post(f"{API}/search", json={"field": "email", "value": "  "})

        assert response.status_code == 422
        assert response.json()["error"] == "empty_query"
        assert response.json()["field"] == "email"

    def test_unknown_field(self, client):
        response = client.post(f"{API}/search", json={"field": "colour", "value": "red"})
        assert response.status_code == 422

    def test_store_failure(self, client, store):
        store.list_clients = AsyncMock(side_effect=StoreUnavailable("db down"))

        response = client.post(f"{API}/search", json={"field": "ownerName", "value": "Nowak"})

        assert response.status_code == 503
        assert response.json()["error"] == "search_failure"


class TestIntakeForms:
    def test_open_and_fetch(self, client):
        sid = open_form(client, licensePlate="WA12345")

        body = client.get(f"{API}/intake/{sid}").json()

        assert body["form"] == {"licensePlate": "WA12345"}
        assert body["ownerSearch"]["state"] == "idle"
        assert body["vehicleSearch"]["showVehicleModal"] is False

    def test_open_without_body(self, client):
        response = client.post(f"{API}/intake")
        assert response.status_code == 201
        assert response.json()["form"] == {}

    def test_vehicle_search_fills_form(self, client):
        sid = open_form(client, licensePlate="WA12345")

        body = client.post(f"{API}/intake/{sid}/vehicle-search").json()

        assert body["form"]["make"] == "Audi"
        assert body["form"]["ownerName"] == "Jan Kowalski"
        assert body["vehicleSearch"]["state"] == "resolved"
        assert body["vehicleSearch"]["searchError"] is None

    def test_owner_search_then_vehicle_pick(self, client):
        sid = open_form(client, ownerName="Wiśniewski")

        body = client.post(f"{API}/intake/{sid}/owner-search", json={"field": "ownerName"}).json()
        assert body["form"]["referralSource"] == "regular_customer"
        assert body["ownerSearch"]["showVehicleModal"] is True
        assert len(body["ownerSearch"]["foundVehicles"]) == 3

        body = client.post(f"{API}/intake/{sid}/owner-search/select-vehicle", json={"id": "veh6"}).json()

        assert body["form"]["licensePlate"] == "WR33333"
        assert body["form"]["make"] == "Volkswagen"
        assert body["ownerSearch"]["showVehicleModal"] is False

    def test_multi_vehicle_pick(self, client):
        sid = open_form(client, licensePlate="WR")
        body = client.post(f"{API}/intake/{sid}/vehicle-search").json()
        assert body["vehicleSearch"]["state"] == "multi_match"

        body = client.post(f"{API}/intake/{sid}/vehicle-search/select-vehicle", json={"id": "veh4"}).json()

        assert body["form"]["licensePlate"] == "WR11111"
        assert body["form"]["ownerName"] == "Tomasz Wiśniewski"

    def test_pick_outside_candidates_conflicts(self, client):
        sid = open_form(client, email="example.com")
        client.post(f"{API}/intake/{sid}/owner-search", json={"field": "email"})

        response = client.post(f"{API}/intake/{sid}/owner-search/select-vehicle", json={"id": "veh1"})

        assert response.status_code == 409

    def test_owner_search_rejects_plate_field(self, client):
        sid = open_form(client, licensePlate="WA12345")
        response = client.post(f"{API}/intake/{sid}/owner-search", json={"field": "licensePlate"})
        assert response.status_code == 422

    def test_empty_field_reports_message(self, client):
        sid = open_form(client)

        body = client.post(f"{API}/intake/{sid}/owner-search", json={"field": "phone"}).json()

        assert body["ownerSearch"]["searchError"] == "Search field is empty"

    def test_edit_cancel_and_clear(self, client):
        sid = open_form(client)
        client.patch(f"{API}/intake/{sid}/form", json={"email": "example.com"})
        body = client.post(f"{API}/intake/{sid}/owner-search", json={"field": "email"}).json()
        assert body["ownerSearch"]["showClientModal"] is True

        body = client.post(f"{API}/intake/{sid}/owner-search/cancel").json()
        assert body["ownerSearch"]["showClientModal"] is False
        assert body["ownerSearch"]["state"] == "idle"

        body = client.post(f"{API}/intake/{sid}/owner-search/clear").json()
        assert body["ownerSearch"]["foundClients"] == []
        assert body["form"] == {"email": "example.com"}

    def test_unknown_flow_name(self, client):
        sid = open_form(client)
        response = client.post(f"{API}/intake/{sid}/plate-search/clear")
        assert response.status_code == 422

    def test_closed_session_is_gone(self, client):
        sid = open_form(client)

        assert client.delete(f"{API}/intake/{sid}").status_code == 200
        assert client.get(f"{API}/intake/{sid}").status_code == 404


class TestLookups:
    def test_client_detail(self, client):
        body = client.get(f"{API}/clients/client1").json()
        assert body["firstName"] == "Jan"
        assert body["vehicles"] == ["veh1", "veh2"]

    def test_missing_client(self, client):
        assert client.get(f"{API}/clients/nobody").status_code == 404

    def test_client_vehicles(self, client):
        body = client.get(f"{API}/clients/client3/vehicles").json()
        assert [v["id"] for v in body] == ["veh4", "veh5", "veh6"]

    def test_vehicles_by_make(self, client):
        body = client.get(f"{API}/vehicles", params={"make": "mercedes-benz"}).json()
        assert [v["id"] for v in body] == ["veh4", "veh5"]

    def test_plate_lookup(self, client):
        assert client.get(f"{API}/vehicles/lookup/GD22222").json()["status"] == "known"
        unknown = client.get(f"{API}/vehicles/lookup/XX00000").json()
        assert unknown["registered"] is False

    def test_health(self, client):
        body = client.get(f"{API}/health").json()
        assert body["status"] == "ok"
        assert body["store"]["clients"] == 5
