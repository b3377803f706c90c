# intake/dependencies.py
"""FastAPI dependencies: one entity store, search service and session registry per process."""

from functools import lru_cache

from intake.services.entity_store import EntityStore, build_store
from intake.services.intake_sessions import IntakeSessionRegistry
from intake.services.search_service import SearchService


@lru_cache()
def get_store() -> EntityStore:
    return build_store()


@lru_cache()
def get_search_service() -> SearchService:
    return SearchService(get_store())


@lru_cache()
def get_session_registry() -> IntakeSessionRegistry:
    return IntakeSessionRegistry(get_search_service())
