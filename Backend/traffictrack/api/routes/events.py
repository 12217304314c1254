"""
API routes for area incident data
"""
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from typing import Dict, List, Optional

from traffictrack.api.dependencies import get_caller_id, get_traffic_service
from traffictrack.api.validation import check_hours, parse_area, parse_event_filter
from traffictrack.models.records import EVENT_TYPE_DISPLAY_NAMES, SEVERITY_DISPLAY_NAMES
from traffictrack.models.schemas import AreaEventsResponse, TrafficEventInfo
from traffictrack.services.traffic_service import TrafficService

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=AreaEventsResponse)
async def get_events(
    lat1: float = Query(...),
    lon1: float = Query(...),
    lat2: float = Query(...),
    lon2: float = Query(...),
    event_type: Optional[str] = Query(None, alias="eventType"),
    severity: Optional[str] = Query(None),
    from_date: Optional[datetime] = Query(None, alias="fromDate"),
    to_date: Optional[datetime] = Query(None, alias="toDate"),
    caller_id: Optional[str] = Depends(get_caller_id),
    service: TrafficService = Depends(get_traffic_service),
):
    """
    Get incidents inside an area

    Args:
        eventType: Accident, Construction, Roadblock, TrafficJam, RoadHazard, Event, Weather
        severity: Low, Moderate, Major, Critical
        fromDate / toDate: start time range, inclusive
    """
    area = parse_area(lat1, lon1, lat2, lon2)
    filters = parse_event_filter(event_type, severity, from_date, to_date)
    return await service.get_events_in_area(
        area, filters, caller_id=caller_id, timeout=service.config.query_timeout
    )


@router.get("/recent", response_model=List[TrafficEventInfo])
async def get_recent_events(
    hours: int = Query(24, description="Hours to look back (1-168)"),
    service: TrafficService = Depends(get_traffic_service),
):
    """Most recent incidents recorded in the last N hours, in any area"""
    return await service.get_recent_events(check_hours(hours), timeout=service.config.query_timeout)


@router.get("/types", response_model=Dict[str, str])
async def get_event_types():
    """Event types and their display names"""
    return EVENT_TYPE_DISPLAY_NAMES


@router.get("/severities", response_model=Dict[str, str])
async def get_severity_levels():
    """Severity levels and their display names"""
    return SEVERITY_DISPLAY_NAMES
