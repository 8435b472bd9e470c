from datetime import datetime, timezone
from typing import Generic, List, Optional, Type, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from farmledger.models.base import FarmDocument

T = TypeVar("T", bound=FarmDocument)


def to_object_id(record_id: str) -> Optional[ObjectId]:
    """Parse a record id; malformed ids match nothing instead of raising."""
    if isinstance(record_id, ObjectId):
        return record_id
    if isinstance(record_id, str) and ObjectId.is_valid(record_id):
        return ObjectId(record_id)
    return None


class DocumentRepository(Generic[T]):
    """Farm-scoped CRUD over one collection.

    Every query is restricted to ``farm_id``; ``None`` is the root scope.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        collection_name: str,
        model: Type[T],
        farm_id: Optional[str] = None
    ):
        self.db = db
        self.collection = db[collection_name]
        self.model = model
        self.farm_id = farm_id

    def _scoped(self, filters: Optional[dict] = None) -> dict:
        query = {"farm_id": self.farm_id}
        if filters:
            query.update(filters)
        return query

    async def list(self, filters: Optional[dict] = None, sort: Optional[list] = None) -> List[T]:
        """List records in scope."""
        cursor = self.collection.find(self._scoped(filters))
        if sort:
            cursor = cursor.sort(sort)
        docs = await cursor.to_list(None)
        return [self.model(**doc) for doc in docs]

    async def get(self, record_id: str) -> Optional[T]:
        """Get a record by id."""
        oid = to_object_id(record_id)
        if oid is None:
            return None
        doc = await self.collection.find_one(self._scoped({"_id": oid}))
        if doc:
            return self.model(**doc)
        return None

    async def create(self, record: T) -> T:
        """Insert a record and return it with its assigned id."""
        record.farm_id = self.farm_id
        now = datetime.now(timezone.utc)
        record.created_at = now
        record.updated_at = now

        doc = record.to_document()
        result = await self.collection.insert_one(doc)
        record.id = str(result.inserted_id)
        return record

    async def update(self, record_id: str, updates: dict) -> Optional[T]:
        """Apply a partial update; returns the updated record."""
        oid = to_object_id(record_id)
        if oid is None:
            return None
        if not updates:
            return await self.get(record_id)

        updates = {**updates, "updated_at": datetime.now(timezone.utc)}
        doc = await self.collection.find_one_and_update(
            self._scoped({"_id": oid}),
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        if doc:
            return self.model(**doc)
        return None

    async def compare_and_set(self, record_id: str, expected_version: int, updates: dict) -> Optional[T]:
        """Update only if the stored ``version`` still equals ``expected_version``.

        Returns ``None`` when another writer got there first.
        """
        oid = to_object_id(record_id)
        if oid is None:
            return None

        updates = {**updates, "updated_at": datetime.now(timezone.utc)}
        updates.pop("version", None)
        doc = await self.collection.find_one_and_update(
            self._scoped({"_id": oid, "version": expected_version}),
            {"$set": updates, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER
        )
        if doc:
            return self.model(**doc)
        return None

    async def delete(self, record_id: str) -> bool:
        """Delete a record."""
        oid = to_object_id(record_id)
        if oid is None:
            return False
        result = await self.collection.delete_one(self._scoped({"_id": oid}))
        return result.deleted_count > 0

    async def delete_many(self, filters: dict) -> int:
        """Delete every record in scope matching ``filters``."""
        result = await self.collection.delete_many(self._scoped(filters))
        return result.deleted_count
