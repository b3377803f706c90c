# intake/services/intake_sessions.py
"""
Open intake forms, one session per form being filled in.
Each session pairs the form with an owner-search and a vehicle-search flow
that both write into it.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from intake.config import settings
from intake.schemas.intake import IntakeSessionOut
from intake.services.errors import SessionNotFound
from intake.services.intake_form import IntakeForm
from intake.services.owner_search_flow import OwnerSearchFlow
from intake.services.search_service import SearchService
from intake.services.vehicle_search_flow import VehicleSearchFlow
from intake.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class IntakeSession:
    session_id: str
    form: IntakeForm
    owner_search: OwnerSearchFlow
    vehicle_search: VehicleSearchFlow
    opened_at: datetime = field(default_factory=datetime.utcnow)
    last_seen: datetime = field(default_factory=datetime.utcnow)

    def flow(self, name: str):
        if name == "owner-search":
            return self.owner_search
        if name == "vehicle-search":
            return self.vehicle_search
        raise KeyError(name)

    def touch(self):
        self.last_seen = datetime.utcnow()

    def to_out(self) -> IntakeSessionOut:
        return IntakeSessionOut(
            session_id=self.session_id,
            form=self.form.as_dict(),
            owner_search=self.owner_search.snapshot(),
            vehicle_search=self.vehicle_search.snapshot(),
        )


class IntakeSessionRegistry:
    """
    Open forms keyed by session id.
    Forms untouched for `idle_minutes` are dropped on the next open/get; when
    `max_sessions` are open, opening another evicts the least recently used one.
    """

    def __init__(self, service: SearchService, idle_minutes: Optional[int] = None,
                 max_sessions: Optional[int] = None):
        self.service = service
        self.idle_timeout = timedelta(minutes=idle_minutes or settings.INTAKE_SESSION_IDLE_MINUTES)
        self.max_sessions = max_sessions or settings.MAX_INTAKE_SESSIONS
        self._sessions: dict[str, IntakeSession] = {}

    def open(self, initial_form: Optional[dict[str, Any]] = None) -> IntakeSession:
        self.expire_idle()
        while len(self._sessions) >= self.max_sessions:
            oldest = min(self._sessions.values(), key=lambda s: s.last_seen)
            logger.warning(f"[INTAKE] Session limit {self.max_sessions} reached, evicting {oldest.session_id}")
            self._drop(oldest.session_id)

        form = IntakeForm(initial_form)
        session = IntakeSession(
            session_id=uuid.uuid4().hex,
            form=form,
            owner_search=OwnerSearchFlow(self.service, form),
            vehicle_search=VehicleSearchFlow(self.service, form),
        )
        self._sessions[session.session_id] = session
        logger.info(f"[INTAKE] Session {session.session_id} opened ({len(self._sessions)} open)")
        return session

    def get(self, session_id: str) -> IntakeSession:
        self.expire_idle()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        session.touch()
        return session

    def close(self, session_id: str):
        self.get(session_id)
        self._drop(session_id)
        logger.info(f"[INTAKE] Session {session_id} closed")

    def expire_idle(self) -> int:
        cutoff = datetime.utcnow() - self.idle_timeout
        expired = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for session_id in expired:
            self._drop(session_id)
        if expired:
            logger.info(f"[INTAKE] Expired {len(expired)} idle session(s)")
        return len(expired)

    def _drop(self, session_id: str):
        session = self._sessions.pop(session_id)
        # Searches still in flight must not repopulate a dropped form
        session.owner_search.clear_search_results()
        session.vehicle_search.clear_search_results()

    def __len__(self):
        return len(self._sessions)
