"""
In-process record store: an append-only log per record kind
"""
import itertools
from datetime import datetime
from typing import List, Sequence

from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent


class MemoryRecordStore:
    """
    Append-only record log kept in memory.

    Used when MongoDB is unreachable in development and by the test suite.
    Appends never touch existing entries, so concurrent readers always see
    a consistent prefix of the log.
    """

    def __init__(self):
        self._flows: List[FlowRecord] = []
        self._events: List[IncidentEvent] = []
        self._ids = itertools.count(1)
        self.write_count = 0  # Number of insert batches accepted

    @property
    def flow_count(self) -> int:
        return len(self._flows)

    @property
    def event_count(self) -> int:
        return len(self._events)

    async def find_flows(self, box: BoundingBox, limit: int) -> List[FlowRecord]:
        matching = [f for f in self._flows if box.contains(f.latitude, f.longitude)]
        matching.sort(key=lambda f: f.recorded_at, reverse=True)
        return matching[:limit]

    async def find_events(self, box: BoundingBox, limit: int) -> List[IncidentEvent]:
        matching = [e for e in self._events if box.contains(e.latitude, e.longitude)]
        matching.sort(key=lambda e: e.start_time, reverse=True)
        return matching[:limit]

    async def find_recent_events(self, since: datetime, limit: int) -> List[IncidentEvent]:
        matching = [e for e in self._events if e.recorded_at >= since]
        matching.sort(key=lambda e: e.start_time, reverse=True)
        return matching[:limit]

    async def insert_flows(self, records: Sequence[FlowRecord]) -> List[FlowRecord]:
        if not records:
            return []
        stored = [r.model_copy(update={"id": str(next(self._ids))}) for r in records]
        self._flows.extend(stored)
        self.write_count += 1
        return stored

    async def insert_events(self, events: Sequence[IncidentEvent]) -> List[IncidentEvent]:
        if not events:
            return []
        stored = [e.model_copy(update={"id": str(next(self._ids))}) for e in events]
        self._events.extend(stored)
        self.write_count += 1
        return stored
