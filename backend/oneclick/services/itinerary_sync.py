"""
Itinerary sync engine

Keeps a browser session's draft plan and the user's stored itinerary consistent.

The session plan is passed in and returned explicitly; the engine never mutates
the value it receives. For signed-in users every mutation is mirrored to the
ItineraryStore on a best-effort basis: the session-side change always succeeds
and store failures come back as SyncWarnings instead of exceptions.

Plan states, per session:
    EMPTY  no plan at all
    DRAFT  session plan without a stored record
    BOUND  session plan linked to a stored record (user_id + itinerary_id)
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable

from oneclick.core.errors import (
    ItemNotFoundError,
    NoActivePlanError,
    PlanError,
    PlanValidationError,
    StoreUnavailableError,
)
from oneclick.db.itinerary_store import ItineraryStore
from oneclick.models.itinerary import (
    CATEGORY_KEYS,
    PlanFields,
    PlanRecord,
    resolve_category_key,
    singular_category,
)
from oneclick.services.duplicate_guard import build_entry, is_duplicate

STATUS_OK = "ok"
STATUS_DUPLICATE = "duplicate"
STATUS_CLEARED = "cleared"
STATUS_MIGRATED = "migrated"
STATUS_USING_EXISTING = "using_existing"
STATUS_NOTHING_TO_MIGRATE = "nothing_to_migrate"


@dataclass
class SyncWarning:
    """A store failure that was absorbed to keep the session-side result."""

    operation: str
    error: str


@dataclass
class SyncResult:
    plan: PlanRecord | None
    status: str = STATUS_OK
    message: str | None = None
    item: Any = None
    warnings: list[SyncWarning] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status != STATUS_DUPLICATE

    @property
    def duplicate(self) -> bool:
        return self.status == STATUS_DUPLICATE


def _copy(plan: PlanRecord | None) -> PlanRecord | None:
    return plan.model_copy(deep=True) if plan is not None else None


def _dedupe(entries: list, key: str) -> list:
    kept: list = []
    for entry in entries:
        if not is_duplicate(kept, entry, key):
            kept.append(entry.model_copy(deep=True))
    return kept


def _apply_fields(plan: PlanRecord, fields: PlanFields) -> None:
    plan.destination = fields.destination
    plan.country = fields.country
    plan.start_date = fields.start_date
    plan.end_date = fields.end_date
    plan.cities = [city.model_copy() for city in fields.cities]

    # Non-empty arrays are imports and replace the collection; empty ones keep it
    for key in CATEGORY_KEYS:
        supplied = getattr(fields, key)
        if supplied:
            setattr(plan, key, _dedupe(supplied, key))

    plan.touch()


def _owned_by(plan: PlanRecord, identity: str) -> PlanRecord:
    """Drop a binding that belongs to another user so a save cannot overwrite their record."""
    if plan.user_id and plan.user_id != identity:
        plan.user_id = None
        plan.itinerary_id = None
    return plan


class ItinerarySyncEngine:
    def __init__(self, store: ItineraryStore):
        self.store = store

    async def _best_effort(self, operation: str, warnings: list[SyncWarning], call: Awaitable) -> Any:
        try:
            return await call
        except Exception as e:
            print(f"[itinerary_sync] ⚠️ {operation} failed, keeping session state: {e}")
            warnings.append(SyncWarning(operation=operation, error=str(e)))
            return None

    @staticmethod
    def _bound_to(plan: PlanRecord, identity: str | None) -> bool:
        return bool(identity and plan.is_bound and plan.user_id == identity)

    async def create_or_update_plan(
        self, session_plan: PlanRecord | None, fields: PlanFields, identity: str | None = None
    ) -> SyncResult:
        """
        Overwrite the plan metadata and, for a signed-in user, upsert the stored itinerary.

        An existing stored itinerary receives the same overwrite and then replaces
        the session plan. Without one, the session plan is saved as a new record.
        """
        if not fields.destination:
            raise PlanValidationError("Destination is required")

        plan = _copy(session_plan) or PlanRecord()
        _apply_fields(plan, fields)

        warnings: list[SyncWarning] = []
        if identity:
            stored = await self._best_effort("get_by_user", warnings, self.store.get_by_user(identity))
            if not warnings:
                if stored is not None:
                    _apply_fields(stored, fields)
                    target = stored
                else:
                    target = _owned_by(plan, identity)
                saved = await self._best_effort("save", warnings, self.store.save(identity, target))
                if saved is not None:
                    plan = saved

        return SyncResult(plan=plan, warnings=warnings)

    async def add_category_item(
        self,
        session_plan: PlanRecord | None,
        payload: dict[str, Any],
        category: str | None,
        identity: str | None = None,
    ) -> SyncResult:
        if session_plan is None:
            raise NoActivePlanError()
        if not category:
            raise PlanValidationError("Missing required fields")

        key = resolve_category_key(category)
        entry = build_entry(key, payload)

        plan = _copy(session_plan)
        collection = getattr(plan, key)
        if is_duplicate(collection, entry, key):
            return SyncResult(
                plan=plan,
                status=STATUS_DUPLICATE,
                message=f"This {singular_category(key)} is already in your itinerary",
            )

        collection.append(entry)
        plan.touch()

        warnings: list[SyncWarning] = []
        if self._bound_to(plan, identity):
            await self._best_effort(
                f"append_to_{key}",
                warnings,
                self.store.append_to_category(identity, plan.itinerary_id, entry, key),
            )
        return SyncResult(plan=plan, item=entry, warnings=warnings)

    async def remove_category_item(
        self,
        session_plan: PlanRecord | None,
        item_id: str,
        category: str | None,
        identity: str | None = None,
    ) -> SyncResult:
        if session_plan is None:
            raise NoActivePlanError()

        key = resolve_category_key(category)
        plan = _copy(session_plan)
        remaining = [entry for entry in getattr(plan, key) if entry.id != item_id]
        if len(remaining) != len(getattr(plan, key)):
            setattr(plan, key, remaining)
            plan.touch()

        warnings: list[SyncWarning] = []
        if self._bound_to(plan, identity):
            await self._best_effort(
                f"remove_from_{key}",
                warnings,
                self.store.remove_from_category(identity, plan.itinerary_id, item_id, key),
            )
        return SyncResult(plan=plan, warnings=warnings)

    async def update_category_item(
        self,
        session_plan: PlanRecord | None,
        item_id: str,
        category: str | None,
        notes: str | None = None,
        identity: str | None = None,
    ) -> SyncResult:
        """Edit the notes of an entry already in the plan (used for hotels)."""
        if session_plan is None:
            raise NoActivePlanError()

        key = resolve_category_key(category)
        plan = _copy(session_plan)
        target = next((entry for entry in getattr(plan, key) if entry.id == item_id), None)
        if target is None:
            raise ItemNotFoundError(f"{singular_category(key).capitalize()} not found in itinerary")

        warnings: list[SyncWarning] = []
        if notes is not None:
            target.notes = notes
            plan.touch()
            if self._bound_to(plan, identity):
                await self._best_effort(
                    f"update_in_{key}",
                    warnings,
                    self.store.update_in_category(
                        identity, plan.itinerary_id, item_id, key, {"notes": notes}
                    ),
                )
        return SyncResult(plan=plan, item=target, warnings=warnings)

    async def fetch_plan(self, session_plan: PlanRecord | None, identity: str | None = None) -> SyncResult:
        """
        The stored itinerary for a signed-in user, else the session plan (or None).
        """
        warnings: list[SyncWarning] = []
        if identity:
            stored = await self._best_effort("get_by_user", warnings, self.store.get_by_user(identity))
            if stored is not None:
                return SyncResult(plan=stored)
        return SyncResult(plan=_copy(session_plan), warnings=warnings)

    async def clear_plan(self, session_plan: PlanRecord | None, identity: str | None = None) -> SyncResult:
        """Drop the session plan and delete the user's stored itinerary, if any."""
        warnings: list[SyncWarning] = []
        if identity:
            stored = await self._best_effort("get_by_user", warnings, self.store.get_by_user(identity))
            if stored is not None:
                print(f"[itinerary_sync] Clearing itinerary {stored.itinerary_id} for user={identity}")
                await self._best_effort(
                    "delete", warnings, self.store.delete(identity, stored.itinerary_id)
                )
        return SyncResult(
            plan=None, status=STATUS_CLEARED, message="Plan cleared successfully", warnings=warnings
        )

    async def migrate_session_to_store(self, session_plan: PlanRecord | None, identity: str) -> SyncResult:
        """
        Move an anonymous draft into the store right after sign-in.

        If the user already has a stored itinerary it wins and the draft is
        discarded. Unlike the other operations a store failure is raised, since
        persisting is the whole point of the call.
        """
        if not identity:
            raise PlanValidationError("An authenticated user is required to migrate a plan")
        if session_plan is None or not session_plan.destination:
            return SyncResult(
                plan=_copy(session_plan), status=STATUS_NOTHING_TO_MIGRATE, message="No plan to migrate"
            )

        try:
            existing = await self.store.get_by_user(identity)
            if existing is None:
                saved = await self.store.save(identity, _owned_by(_copy(session_plan), identity))
                print(f"[itinerary_sync] ✅ Migrated session plan to itinerary {saved.itinerary_id}")
                return SyncResult(plan=saved, status=STATUS_MIGRATED, message="Plan migrated successfully")
        except PlanError:
            raise
        except Exception as e:
            raise StoreUnavailableError(f"Failed to migrate plan: {e}") from e

        if existing.itinerary_id != session_plan.itinerary_id:
            print(
                f"[itinerary_sync] Discarding session draft for '{session_plan.destination}', "
                f"user={identity} already has itinerary {existing.itinerary_id}"
            )
        return SyncResult(
            plan=existing, status=STATUS_USING_EXISTING, message="Using existing plan from database"
        )
