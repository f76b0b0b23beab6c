"""
Tests for the per-session draft plan cache
"""

import sys
from pathlib import Path
from unittest.mock import patch

# Allow importing from backend/oneclick
sys.path.insert(0, str(Path(__file__).parent.parent))

from oneclick.models.itinerary import PlanRecord
from oneclick.services.session_cache import SessionPlanCache, new_session_id


def test_put_and_get_return_copies():
    cache = SessionPlanCache(ttl=60, max_sessions=10)
    plan = PlanRecord(destination="Kyoto")

    cache.put("s1", plan)
    plan.destination = "changed after put"
    fetched = cache.get("s1")
    fetched.destination = "changed after get"

    assert cache.get("s1").destination == "Kyoto"


def test_put_none_discards():
    cache = SessionPlanCache(ttl=60, max_sessions=10)
    cache.put("s1", PlanRecord(destination="Kyoto"))

    cache.put("s1", None)

    assert cache.get("s1") is None
    assert cache.active_count == 0


def test_entries_expire():
    cache = SessionPlanCache(ttl=10, max_sessions=10)
    with patch("oneclick.services.session_cache.time.time", return_value=1000.0):
        cache.put("s1", PlanRecord(destination="Kyoto"))
    with patch("oneclick.services.session_cache.time.time", return_value=1011.0):
        assert cache.get("s1") is None


def test_oldest_session_evicted_when_full():
    cache = SessionPlanCache(ttl=1000, max_sessions=2)
    with patch("oneclick.services.session_cache.time.time", side_effect=[100.0, 200.0, 300.0, 300.0]):
        cache.put("s1", PlanRecord(destination="A"))
        cache.put("s2", PlanRecord(destination="B"))
        cache.put("s3", PlanRecord(destination="C"))

    with patch("oneclick.services.session_cache.time.time", return_value=400.0):
        assert cache.get("s1") is None
        assert cache.get("s2").destination == "B"
        assert cache.get("s3").destination == "C"


def test_session_ids_are_unique():
    assert len({new_session_id() for _ in range(50)}) == 50
