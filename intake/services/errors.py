# intake/services/errors.py
"""
Exceptions raised by the search engine and the entity store adapters.
No-match is not an error: it is a normal outcome reported by the flows.
"""

from typing import Optional


class IntakeSearchError(Exception):
    """Base class for all search-and-resolve errors."""


class EmptyQuery(IntakeSearchError):
    """Search value was blank. Raised before the store is touched."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Search value for '{field}' cannot be empty")


class StoreUnavailable(IntakeSearchError):
    """The entity store could not answer a query."""


class SearchFailure(IntakeSearchError):
    """A store read failed while searching. Safe to retry."""

    def __init__(self, field: str, cause: Optional[BaseException] = None):
        self.field = field
        self.cause = cause
        super().__init__(f"Search by '{field}' failed: {cause}" if cause else f"Search by '{field}' failed")


class CandidateNotAvailable(IntakeSearchError):
    """A selection referenced an entity that is not among the offered candidates."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' is not among the current candidates")


class SessionNotFound(IntakeSearchError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Intake session '{session_id}' not found")
