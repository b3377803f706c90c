# tests/test_intake_sessions.py
"""Unit tests for the intake session registry."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from intake.services.entity_store import InMemoryEntityStore
from intake.services.errors import SessionNotFound
from intake.services.intake_sessions import IntakeSessionRegistry
from intake.services.search_flow import FlowState
from intake.services.search_service import SearchService


def make_registry(**kwargs):
    return IntakeSessionRegistry(SearchService(InMemoryEntityStore()), **kwargs)


def age(session, minutes):
    session.last_seen = datetime.utcnow() - timedelta(minutes=minutes)


class TestIntakeSessionRegistry:
    def test_open_shares_one_form_between_flows(self):
        session = make_registry().open({"licensePlate": "WA12345"})

        assert session.owner_search.form is session.form
        assert session.vehicle_search.form is session.form
        assert session.form.get("licensePlate") == "WA12345"

    def test_unknown_session(self):
        with pytest.raises(SessionNotFound):
            make_registry().get("missing")

    def test_idle_session_expires(self):
        registry = make_registry(idle_minutes=30)
        stale = registry.open()
        fresh = registry.open()
        age(stale, 31)

        with pytest.raises(SessionNotFound):
            registry.get(stale.session_id)

        assert registry.get(fresh.session_id) is fresh
        assert len(registry) == 1

    def test_get_keeps_session_alive(self):
        registry = make_registry(idle_minutes=30)
        session = registry.open()
        age(session, 29)

        registry.get(session.session_id)
        age(registry.open(), 0)

        assert registry.expire_idle() == 0
        assert len(registry) == 2

    def test_expiry_runs_on_open(self):
        registry = make_registry(idle_minutes=30)
        for _ in range(3):
            age(registry.open(), 60)

        registry.open()

        assert len(registry) == 1

    def test_limit_evicts_least_recently_used(self):
        registry = make_registry(max_sessions=2)
        first = registry.open()
        second = registry.open()
        age(first, 5)
        age(second, 10)

        third = registry.open()

        assert len(registry) == 2
        with pytest.raises(SessionNotFound):
            registry.get(second.session_id)
        assert registry.get(first.session_id) is first
        assert registry.get(third.session_id) is third

    @pytest.mark.asyncio
    async def test_dropped_session_flows_are_reset(self):
        registry = make_registry(idle_minutes=30)
        session = registry.open({"email": "example.com"})
        await session.owner_search.handle_search_by_field("email")
        generation = session.owner_search.generation
        age(session, 31)

        registry.expire_idle()

        assert session.owner_search.state == FlowState.IDLE
        assert session.owner_search.found_clients == []
        assert not session.owner_search.is_current(generation)

    def test_close(self):
        registry = make_registry()
        session = registry.open()

        registry.close(session.session_id)

        assert len(registry) == 0
        with pytest.raises(SessionNotFound):
            registry.close(session.session_id)
