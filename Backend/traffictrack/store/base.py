"""
Store contract shared by the MongoDB and in-memory implementations
"""
from datetime import datetime
from typing import List, Protocol, Sequence

from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent


class RecordStore(Protocol):
    """
    Append-only storage of flow samples and incident events.

    Records are never updated or deleted through this interface; newer
    samples supersede older ones by their recorded_at timestamp.
    """

    async def find_flows(self, box: BoundingBox, limit: int) -> List[FlowRecord]:
        """Flows inside box (inclusive bounds), newest recorded_at first"""
        ...

    async def find_events(self, box: BoundingBox, limit: int) -> List[IncidentEvent]:
        """Events inside box (inclusive bounds), latest start_time first"""
        ...

    async def find_recent_events(self, since: datetime, limit: int) -> List[IncidentEvent]:
        """Events recorded at or after since, in any area, latest start_time first"""
        ...

    async def insert_flows(self, records: Sequence[FlowRecord]) -> List[FlowRecord]:
        """Append flows and return them with their assigned ids"""
        ...

    async def insert_events(self, events: Sequence[IncidentEvent]) -> List[IncidentEvent]:
        """Append events and return them with their assigned ids"""
        ...
