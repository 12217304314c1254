"""
API routes for area traffic data
"""
import logging
from fastapi import APIRouter, Depends, Query
from typing import Optional

from traffictrack.api.dependencies import get_caller_id, get_traffic_service
from traffictrack.api.validation import parse_area
from traffictrack.models.schemas import AreaTrafficResponse
from traffictrack.services.traffic_service import TrafficService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/traffic", tags=["traffic"])


@router.get("", response_model=AreaTrafficResponse)
async def get_traffic(
    lat1: float = Query(..., description="Latitude of the first corner"),
    lon1: float = Query(..., description="Longitude of the first corner"),
    lat2: float = Query(..., description="Latitude of the opposite corner"),
    lon2: float = Query(..., description="Longitude of the opposite corner"),
    caller_id: Optional[str] = Depends(get_caller_id),
    service: TrafficService = Depends(get_traffic_service),
):
    """
    Get current traffic inside an area

    The area is refreshed first when its stored data is missing or older
    than the freshness window.
    """
    area = parse_area(lat1, lon1, lat2, lon2)
    return await service.get_traffic_in_area(area, caller_id=caller_id, timeout=service.config.query_timeout)


@router.post("/refresh", response_model=AreaTrafficResponse)
async def refresh_traffic(
    lat1: float = Query(...),
    lon1: float = Query(...),
    lat2: float = Query(...),
    lon2: float = Query(...),
    caller_id: Optional[str] = Depends(get_caller_id),
    service: TrafficService = Depends(get_traffic_service),
):
    """Force a refresh of an area and return its traffic"""
    area = parse_area(lat1, lon1, lat2, lon2)
    return await service.refresh_area(area, caller_id=caller_id, timeout=service.config.query_timeout)
