"""
FastAPI dependencies shared by the route modules
"""
from typing import Optional

from fastapi import Header, Request

from traffictrack.services.traffic_service import TrafficService


def get_traffic_service(request: Request) -> TrafficService:
    """Service instance wired at startup"""
    return request.app.state.traffic_service


def get_caller_id(x_caller_id: Optional[str] = Header(None)) -> Optional[str]:
    """Opaque caller identity, used for logging only"""
    return x_caller_id
