"""
MongoDB document models (for reference and type hints)
These represent the structure of documents stored in MongoDB collections,
plus the converters between documents and domain records.
"""
from typing import Optional, Dict, Any
from datetime import datetime
from typing_extensions import TypedDict

from traffictrack.models.records import FlowRecord, IncidentEvent


class TrafficFlowDocument(TypedDict, total=False):
    """Stored flow sample (collection: traffic_flows)"""
    latitude: float
    longitude: float
    road_name: str
    current_speed: float  # km/h
    free_flow_speed: float  # km/h
    current_travel_time: float  # seconds
    free_flow_travel_time: float  # seconds
    confidence: float  # 0-1
    recorded_at: datetime


class TrafficEventDocument(TypedDict, total=False):
    """Stored incident event (collection: traffic_events)"""
    external_event_id: str
    type: str  # EventType value
    description: str
    severity: str  # Severity value
    latitude: float
    longitude: float
    road_name: str
    start_time: datetime
    end_time: Optional[datetime]
    recorded_at: datetime


def flow_to_document(record: FlowRecord) -> TrafficFlowDocument:
    """Serialise a flow record for insertion; the store assigns _id"""
    return TrafficFlowDocument(**record.model_dump(exclude={"id"}))


def event_to_document(event: IncidentEvent) -> TrafficEventDocument:
    """Serialise an incident event for insertion; the store assigns _id"""
    return TrafficEventDocument(**event.model_dump(exclude={"id"}))


def flow_from_document(doc: Dict[str, Any]) -> FlowRecord:
    data = {k: v for k, v in doc.items() if k != "_id"}
    return FlowRecord(id=str(doc["_id"]) if "_id" in doc else None, **data)


def event_from_document(doc: Dict[str, Any]) -> IncidentEvent:
    data = {k: v for k, v in doc.items() if k != "_id"}
    return IncidentEvent(id=str(doc["_id"]) if "_id" in doc else None, **data)
