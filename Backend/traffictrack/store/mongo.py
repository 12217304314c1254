"""
MongoDB-backed record store (motor)
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Sequence

from pymongo.errors import PyMongoError

from traffictrack.exceptions import StoreError
from traffictrack.models.mongodb_models import (
    event_from_document,
    event_to_document,
    flow_from_document,
    flow_to_document,
)
from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent

logger = logging.getLogger(__name__)

FLOWS_COLLECTION = "traffic_flows"
EVENTS_COLLECTION = "traffic_events"


def _area_query(box: BoundingBox) -> Dict[str, Any]:
    return {
        "latitude": {"$gte": box.min_lat, "$lte": box.max_lat},
        "longitude": {"$gte": box.min_lon, "$lte": box.max_lon},
    }


class MongoRecordStore:
    """Record store over the traffic_flows / traffic_events collections"""

    def __init__(self, database):
        self.db = database

    def _collection(self, name: str):
        if self.db is None:
            raise StoreError("Database not available")
        return self.db[name]

    async def find_flows(self, box: BoundingBox, limit: int) -> List[FlowRecord]:
        collection = self._collection(FLOWS_COLLECTION)
        try:
            cursor = collection.find(_area_query(box)).sort("recorded_at", -1).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(f"Failed to read flows: {e}") from e
        return [flow_from_document(doc) for doc in docs]

    async def find_events(self, box: BoundingBox, limit: int) -> List[IncidentEvent]:
        collection = self._collection(EVENTS_COLLECTION)
        try:
            cursor = collection.find(_area_query(box)).sort("start_time", -1).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(f"Failed to read events: {e}") from e
        return [event_from_document(doc) for doc in docs]

    async def find_recent_events(self, since: datetime, limit: int) -> List[IncidentEvent]:
        collection = self._collection(EVENTS_COLLECTION)
        try:
            cursor = collection.find({"recorded_at": {"$gte": since}}).sort("start_time", -1).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(f"Failed to read recent events: {e}") from e
        return [event_from_document(doc) for doc in docs]

    async def insert_flows(self, records: Sequence[FlowRecord]) -> List[FlowRecord]:
        if not records:
            return []
        collection = self._collection(FLOWS_COLLECTION)
        documents = [flow_to_document(record) for record in records]
        try:
            result = await collection.insert_many(documents)
        except PyMongoError as e:
            raise StoreError(f"Failed to insert flows: {e}") from e
        logger.debug(f"Inserted {len(result.inserted_ids)} records into {FLOWS_COLLECTION}")
        return [
            record.model_copy(update={"id": str(inserted_id)})
            for record, inserted_id in zip(records, result.inserted_ids)
        ]

    async def insert_events(self, events: Sequence[IncidentEvent]) -> List[IncidentEvent]:
        if not events:
            return []
        collection = self._collection(EVENTS_COLLECTION)
        documents = [event_to_document(event) for event in events]
        try:
            result = await collection.insert_many(documents)
        except PyMongoError as e:
            raise StoreError(f"Failed to insert events: {e}") from e
        logger.debug(f"Inserted {len(result.inserted_ids)} records into {EVENTS_COLLECTION}")
        return [
            event.model_copy(update={"id": str(inserted_id)})
            for event, inserted_id in zip(events, result.inserted_ids)
        ]
