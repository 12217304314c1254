"""
Pydantic schemas for API request/response validation
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime

from traffictrack.models.records import BoundingBox, EventType, Severity


# Request Schemas
class EventFilter(BaseModel):
    """Optional incident filters; an unset field does not filter"""
    event_type: Optional[EventType] = None
    severity: Optional[Severity] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


# Record Schemas
class TrafficInfo(BaseModel):
    """Traffic flow at a single point, with derived congestion metrics"""
    id: Optional[str] = None
    latitude: float
    longitude: float
    road_name: str
    current_speed: float
    free_flow_speed: float
    congestion_percent: float = Field(ge=0, le=100)
    congestion_level: str  # "free-flowing" | "moderate" | "heavy" | "blocked" | "unknown"
    recorded_at: datetime


class TrafficEventInfo(BaseModel):
    """Incident event with display labels"""
    id: Optional[str] = None
    external_event_id: str
    type: str
    type_display_name: str
    description: str
    severity: str
    severity_display_name: str
    latitude: float
    longitude: float
    road_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    recorded_at: datetime


# API Response Schemas
class AreaTrafficResponse(BaseModel):
    """Response for an area traffic query"""
    area: BoundingBox
    query_time: datetime
    total_flow_records: int
    average_speed: float
    average_congestion: float
    average_speed_by_road: Dict[str, float] = Field(default_factory=dict)
    traffic_data: List[TrafficInfo]


class AreaEventsResponse(BaseModel):
    """Response for an area incident query"""
    area: BoundingBox
    applied_filters: Optional[EventFilter] = None
    query_time: datetime
    total_events: int
    events_by_type: Dict[str, int]
    events: List[TrafficEventInfo]


class ApiErrorResponse(BaseModel):
    """Standard error body returned by the API boundary"""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
