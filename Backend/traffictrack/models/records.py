"""
Domain records handled by the area cache: bounding boxes, flow samples and incident events
"""
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EventType(str, Enum):
    """Incident categories"""
    ACCIDENT = "Accident"
    CONSTRUCTION = "Construction"
    ROADBLOCK = "Roadblock"
    TRAFFIC_JAM = "TrafficJam"
    ROAD_HAZARD = "RoadHazard"
    EVENT = "Event"
    WEATHER = "Weather"


class Severity(str, Enum):
    """Incident severity levels, least to most severe"""
    LOW = "Low"
    MODERATE = "Moderate"
    MAJOR = "Major"
    CRITICAL = "Critical"


EVENT_TYPE_DISPLAY_NAMES: Dict[str, str] = {
    EventType.ACCIDENT.value: "Accident",
    EventType.CONSTRUCTION.value: "Roadworks",
    EventType.ROADBLOCK.value: "Road Closure",
    EventType.TRAFFIC_JAM.value: "Traffic Jam",
    EventType.ROAD_HAZARD.value: "Road Hazard",
    EventType.EVENT.value: "Public Event",
    EventType.WEATHER.value: "Weather Conditions",
}

SEVERITY_DISPLAY_NAMES: Dict[str, str] = {
    Severity.LOW.value: "Low",
    Severity.MODERATE.value: "Moderate",
    Severity.MAJOR.value: "High",
    Severity.CRITICAL.value: "Critical",
}


def display_name_for_type(event_type: str) -> str:
    """Human readable label for an event type; unknown values label themselves"""
    return EVENT_TYPE_DISPLAY_NAMES.get(event_type, event_type)


def display_name_for_severity(severity: str) -> str:
    """Human readable label for a severity; unknown values label themselves"""
    return SEVERITY_DISPLAY_NAMES.get(severity, severity)


class BoundingBox(BaseModel):
    """Axis-aligned lat/lon rectangle with normalised bounds"""
    model_config = ConfigDict(frozen=True)

    min_lat: float = Field(ge=-90, le=90)
    max_lat: float = Field(ge=-90, le=90)
    min_lon: float = Field(ge=-180, le=180)
    max_lon: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def check_order(self) -> "BoundingBox":
        if self.min_lat > self.max_lat or self.min_lon > self.max_lon:
            raise ValueError("min bounds must not exceed max bounds")
        return self

    @classmethod
    def from_corners(cls, lat1: float, lon1: float, lat2: float, lon2: float) -> "BoundingBox":
        """Build a box from two opposite corners given in any order"""
        return cls(
            min_lat=min(lat1, lat2),
            max_lat=max(lat1, lat2),
            min_lon=min(lon1, lon2),
            max_lon=max(lon1, lon2),
        )

    def contains(self, latitude: float, longitude: float) -> bool:
        """Inclusive containment test on both axes"""
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2


class FlowRecord(BaseModel):
    """A single traffic flow sample"""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None  # Assigned by the store
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    road_name: str = ""
    current_speed: float = Field(ge=0)
    free_flow_speed: float = Field(ge=0)
    current_travel_time: float = Field(default=0.0, ge=0)
    free_flow_travel_time: float = Field(default=0.0, ge=0)
    confidence: float = Field(default=0.5, ge=0, le=1)
    recorded_at: datetime


class IncidentEvent(BaseModel):
    """A traffic incident reported inside an area"""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None  # Assigned by the store
    external_event_id: str
    type: str  # EventType value
    description: str = ""
    severity: str  # Severity value
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    road_name: str = ""
    start_time: datetime
    end_time: Optional[datetime] = None
    recorded_at: datetime

    @model_validator(mode="after")
    def check_time_range(self) -> "IncidentEvent":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self
