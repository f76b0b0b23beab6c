"""
Per-browser-session draft plans
"""

import secrets
import time

from oneclick.core.config import SESSION_MAX_SESSIONS, SESSION_TTL_SECONDS
from oneclick.models.itinerary import PlanRecord


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


class SessionPlanCache:
    """
    Holds the in-progress plan of each browser session in process memory.

    Plans are copied on the way in and on the way out, so a caller never holds a
    reference to the cached value. Requests of a single session are assumed to be
    serialized, so no locking is done.
    """

    def __init__(self, ttl: float = SESSION_TTL_SECONDS, max_sessions: int = SESSION_MAX_SESSIONS):
        self._entries: dict[str, tuple[PlanRecord, float]] = {}
        self._ttl = ttl
        self._max_sessions = max_sessions

    def get(self, session_id: str) -> PlanRecord | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        plan, expire_at = entry
        if time.time() > expire_at:
            del self._entries[session_id]
            return None
        return plan.model_copy(deep=True)

    def put(self, session_id: str, plan: PlanRecord | None) -> None:
        if plan is None:
            self.discard(session_id)
            return
        if session_id not in self._entries and len(self._entries) >= self._max_sessions:
            self._evict()
        self._entries[session_id] = (plan.model_copy(deep=True), time.time() + self._ttl)

    def discard(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def _evict(self) -> None:
        now = time.time()
        for key in [k for k, (_, exp) in self._entries.items() if now > exp]:
            del self._entries[key]
        if len(self._entries) >= self._max_sessions:
            oldest = min(self._entries, key=lambda k: self._entries[k][1])
            del self._entries[oldest]

    @property
    def active_count(self) -> int:
        now = time.time()
        return sum(1 for _, exp in self._entries.values() if now <= exp)


_session_cache: SessionPlanCache | None = None


def get_session_cache() -> SessionPlanCache:
    global _session_cache

    if _session_cache is None:
        _session_cache = SessionPlanCache()
    return _session_cache
