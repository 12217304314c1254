"""
Incident filtering, grouping and display labelling
"""
from collections import Counter
from typing import Dict, List, Optional, Sequence

from traffictrack.models.records import (
    IncidentEvent,
    display_name_for_severity,
    display_name_for_type,
)
from traffictrack.models.schemas import EventFilter, TrafficEventInfo


def filter_events(events: Sequence[IncidentEvent], filters: Optional[EventFilter]) -> List[IncidentEvent]:
    """
    Apply type, severity, from-date and to-date filters in that order

    Each filter is skipped when its value is unset; order of events is kept.
    """
    result = list(events)
    if filters is None:
        return result

    if filters.event_type is not None:
        result = [e for e in result if e.type == filters.event_type.value]
    if filters.severity is not None:
        result = [e for e in result if e.severity == filters.severity.value]
    if filters.from_date is not None:
        result = [e for e in result if e.start_time >= filters.from_date]
    if filters.to_date is not None:
        result = [e for e in result if e.start_time <= filters.to_date]
    return result


def group_by_type(events: Sequence[IncidentEvent]) -> Dict[str, int]:
    """Count events per type; only types present appear"""
    return dict(Counter(e.type for e in events))


def to_event_info(event: IncidentEvent) -> TrafficEventInfo:
    """Response view of an incident with display labels"""
    return TrafficEventInfo(
        id=event.id,
        external_event_id=event.external_event_id,
        type=event.type,
        type_display_name=display_name_for_type(event.type),
        description=event.description,
        severity=event.severity,
        severity_display_name=display_name_for_severity(event.severity),
        latitude=event.latitude,
        longitude=event.longitude,
        road_name=event.road_name,
        start_time=event.start_time,
        end_time=event.end_time,
        recorded_at=event.recorded_at,
    )
