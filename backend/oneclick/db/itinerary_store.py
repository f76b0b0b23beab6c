"""
Itinerary persistence: store interface, MongoDB implementation and in-memory fallback
"""

import uuid
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Protocol

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from oneclick.core.errors import ItemNotFoundError, StoreUnavailableError
from oneclick.db.database import get_itineraries_collection, is_database_configured
from oneclick.models.itinerary import Flight, Hotel, PlanRecord, Place, resolve_category_key

Entry = Place | Hotel | Flight


class ItineraryStore(Protocol):
    """
    Durable per-user itinerary storage.

    Writes are last-writer-wins: there is no version check, so two sessions of
    the same user can overwrite each other's changes.
    """

    backend: str

    async def get_by_user(self, user_id: str) -> PlanRecord | None: ...

    async def save(self, user_id: str, plan: PlanRecord) -> PlanRecord: ...

    async def append_to_category(
        self, user_id: str, itinerary_id: str, entry: Entry, category: str
    ) -> PlanRecord: ...

    async def remove_from_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str
    ) -> PlanRecord: ...

    async def update_in_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str, changes: dict[str, Any]
    ) -> PlanRecord: ...

    async def delete(self, user_id: str, itinerary_id: str) -> bool: ...


def _prepare_for_save(user_id: str, plan: PlanRecord) -> PlanRecord:
    record = plan.model_copy(deep=True)
    record.user_id = user_id
    if not record.itinerary_id:
        record.itinerary_id = uuid.uuid4().hex
    record.touch()
    return record


def _doc_to_plan(doc: dict | None) -> PlanRecord | None:
    if not doc:
        return None
    doc = dict(doc)
    # Remove MongoDB's _id field if present
    doc.pop("_id", None)
    return PlanRecord(**doc)


def _mongo_call(operation: str) -> Callable:
    """Re-raise driver failures of a store method as StoreUnavailableError."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as e:
                raise StoreUnavailableError(f"MongoDB {operation} failed: {e}") from e

        return wrapper

    return decorator


class MongoItineraryStore:
    """
    Itineraries stored one document per itinerary_id in MongoDB.
    """

    backend = "mongodb"

    def __init__(self, collection_factory: Callable = get_itineraries_collection):
        self._collection_factory = collection_factory

    @property
    def collection(self):
        return self._collection_factory()

    @_mongo_call("get_by_user")
    async def get_by_user(self, user_id: str) -> PlanRecord | None:
        cursor = self.collection.find({"user_id": user_id}).sort("updated_at", DESCENDING).limit(1)
        docs = await cursor.to_list(length=1)
        return _doc_to_plan(docs[0]) if docs else None

    @_mongo_call("save")
    async def save(self, user_id: str, plan: PlanRecord) -> PlanRecord:
        record = _prepare_for_save(user_id, plan)
        await self.collection.replace_one(
            {"itinerary_id": record.itinerary_id}, record.model_dump(), upsert=True
        )
        print(f"[itinerary_store] 💾 Saved itinerary {record.itinerary_id} for user={user_id}")
        return record

    async def _update_one(
        self, user_id: str, itinerary_id: str, update: dict, extra_filter: dict | None = None
    ) -> PlanRecord:
        query = {"user_id": user_id, "itinerary_id": itinerary_id, **(extra_filter or {})}
        update.setdefault("$set", {})["updated_at"] = datetime.utcnow()
        doc = await self.collection.find_one_and_update(
            query, update, return_document=ReturnDocument.AFTER
        )
        if doc is None:
            raise ItemNotFoundError(f"Itinerary {itinerary_id} not found for user {user_id}")
        return _doc_to_plan(doc)

    @_mongo_call("append_to_category")
    async def append_to_category(
        self, user_id: str, itinerary_id: str, entry: Entry, category: str
    ) -> PlanRecord:
        key = resolve_category_key(category)
        return await self._update_one(user_id, itinerary_id, {"$push": {key: entry.model_dump()}})

    @_mongo_call("remove_from_category")
    async def remove_from_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str
    ) -> PlanRecord:
        key = resolve_category_key(category)
        return await self._update_one(user_id, itinerary_id, {"$pull": {key: {"id": item_id}}})

    @_mongo_call("update_in_category")
    async def update_in_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str, changes: dict[str, Any]
    ) -> PlanRecord:
        key = resolve_category_key(category)
        update = {"$set": {f"{key}.$.{field}": value for field, value in changes.items()}}
        return await self._update_one(user_id, itinerary_id, update, extra_filter={f"{key}.id": item_id})

    @_mongo_call("delete")
    async def delete(self, user_id: str, itinerary_id: str) -> bool:
        result = await self.collection.delete_one({"user_id": user_id, "itinerary_id": itinerary_id})
        print(f"[itinerary_store] 🗑️ Deleted itinerary {itinerary_id}: deleted_count={result.deleted_count}")
        return result.deleted_count > 0


class InMemoryItineraryStore:
    """
    Process-local store with the same contract, for development without MongoDB.
    """

    backend = "memory"

    def __init__(self):
        self._records: dict[str, PlanRecord] = {}

    async def get_by_user(self, user_id: str) -> PlanRecord | None:
        owned = [r for r in self._records.values() if r.user_id == user_id]
        if not owned:
            return None
        return max(owned, key=lambda r: r.updated_at).model_copy(deep=True)

    async def save(self, user_id: str, plan: PlanRecord) -> PlanRecord:
        record = _prepare_for_save(user_id, plan)
        self._records[record.itinerary_id] = record.model_copy(deep=True)
        return record

    def _owned(self, user_id: str, itinerary_id: str) -> PlanRecord:
        record = self._records.get(itinerary_id)
        if record is None or record.user_id != user_id:
            raise ItemNotFoundError(f"Itinerary {itinerary_id} not found for user {user_id}")
        return record

    async def append_to_category(
        self, user_id: str, itinerary_id: str, entry: Entry, category: str
    ) -> PlanRecord:
        record = self._owned(user_id, itinerary_id)
        record.collection(category).append(entry.model_copy(deep=True))
        record.touch()
        return record.model_copy(deep=True)

    async def remove_from_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str
    ) -> PlanRecord:
        record = self._owned(user_id, itinerary_id)
        key = resolve_category_key(category)
        setattr(record, key, [item for item in getattr(record, key) if item.id != item_id])
        record.touch()
        return record.model_copy(deep=True)

    async def update_in_category(
        self, user_id: str, itinerary_id: str, item_id: str, category: str, changes: dict[str, Any]
    ) -> PlanRecord:
        record = self._owned(user_id, itinerary_id)
        for item in record.collection(category):
            if item.id == item_id:
                for field, value in changes.items():
                    setattr(item, field, value)
        record.touch()
        return record.model_copy(deep=True)

    async def delete(self, user_id: str, itinerary_id: str) -> bool:
        record = self._records.get(itinerary_id)
        if record is None or record.user_id != user_id:
            return False
        del self._records[itinerary_id]
        return True


_store: ItineraryStore | None = None


def get_itinerary_store() -> ItineraryStore:
    """
    Shared store for the app: MongoDB when MONGODB_URI is configured, memory otherwise.
    """
    global _store

    if _store is None:
        if is_database_configured():
            _store = MongoItineraryStore()
        else:
            print("⚠️  MONGODB_URI is not set; itineraries are kept in memory and lost on restart")
            _store = InMemoryItineraryStore()
    return _store
