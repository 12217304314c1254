"""
Azure Maps Traffic API Client
Fetches flow segment data and incident details for a bounding box
"""
import httpx
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timezone

from dateutil import parser as date_parser

from traffictrack.exceptions import ProviderError
from traffictrack.models.records import (
    BoundingBox,
    EventType,
    FlowRecord,
    IncidentEvent,
    Severity,
)

logger = logging.getLogger(__name__)

# Azure Maps iconCategory -> incident type
ICON_CATEGORY_TYPES: Dict[int, EventType] = {
    1: EventType.ACCIDENT,
    2: EventType.ACCIDENT,
    3: EventType.ACCIDENT,
    4: EventType.ACCIDENT,
    5: EventType.ROAD_HAZARD,
    6: EventType.ROAD_HAZARD,
    7: EventType.CONSTRUCTION,
    8: EventType.CONSTRUCTION,
    9: EventType.CONSTRUCTION,
    10: EventType.ROADBLOCK,
    11: EventType.ROADBLOCK,
    12: EventType.TRAFFIC_JAM,
    13: EventType.TRAFFIC_JAM,
    14: EventType.TRAFFIC_JAM,
}

# Azure Maps magnitudeOfDelay -> severity
MAGNITUDE_SEVERITIES: Dict[int, Severity] = {
    0: Severity.LOW,
    1: Severity.MODERATE,
    2: Severity.MAJOR,
    3: Severity.CRITICAL,
    4: Severity.CRITICAL,
}


def map_icon_category(category: Optional[int]) -> EventType:
    return ICON_CATEGORY_TYPES.get(category, EventType.EVENT)


def map_magnitude(magnitude: Optional[int]) -> Severity:
    return MAGNITUDE_SEVERITIES.get(magnitude, Severity.LOW)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a provider timestamp into naive UTC"""
    if not value:
        return None
    parsed = date_parser.parse(value) if isinstance(value, str) else value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class AzureMapsTrafficClient:
    """Client for the Azure Maps Traffic Flow and Traffic Incident APIs"""

    name = "azure_maps"

    def __init__(
        self,
        subscription_key: str,
        base_url: str = "https://atlas.microsoft.com/traffic",
        language: str = "it-IT",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.subscription_key = subscription_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = timeout
        self._transport = transport
        self._clock = clock

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        """
        Low-level HTTP call to Azure Maps

        Raises:
            ProviderError: on transport errors, non-2xx responses or invalid JSON
        """
        query = {"api-version": "1.0", "subscription-key": self.subscription_key, **params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/{path}",
                    params=query,
                    headers={"Accept": "application/json"}
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"Azure Maps returned {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Azure Maps request to {path} failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"Azure Maps returned invalid JSON for {path}") from e

    async def fetch_flows(self, box: BoundingBox) -> List[FlowRecord]:
        """
        Fetch the flow segment nearest the centre of box

        Returns:
            Zero or one flow records
        """
        center_lat, center_lon = box.center
        data = await self._get_json(
            "flow/segment/json",
            {"style": "absolute", "zoom": 10, "query": f"{center_lat},{center_lon}"},
        )
        return self._parse_flow_response(data, box)

    async def fetch_incidents(self, box: BoundingBox) -> List[IncidentEvent]:
        """Fetch all incidents reported inside box"""
        data = await self._get_json(
            "incident/detail/json",
            {
                "bbox": f"{box.min_lon},{box.min_lat},{box.max_lon},{box.max_lat}",
                "language": self.language,
                "projection": "EPSG4326",
            },
        )
        return self._parse_incident_response(data)

    def _parse_flow_response(self, data: Any, box: BoundingBox) -> List[FlowRecord]:
        if not isinstance(data, dict):
            raise ProviderError("Malformed flow response")
        segment = data.get("flowSegmentData")
        if not segment:
            return []

        latitude, longitude = box.center
        points = (segment.get("coordinates") or {}).get("coordinate") or []
        for point in points:
            lat, lon = point.get("latitude"), point.get("longitude")
            if lat is not None and lon is not None and box.contains(lat, lon):
                latitude, longitude = lat, lon
                break

        confidence = segment.get("confidence")
        confidence = 0.5 if confidence is None else confidence

        try:
            record = FlowRecord(
                latitude=latitude,
                longitude=longitude,
                road_name=segment.get("frc") or "Unknown",
                current_speed=segment.get("currentSpeed") or 0,
                free_flow_speed=segment.get("freeFlowSpeed") or 0,
                current_travel_time=segment.get("currentTravelTime") or 0,
                free_flow_travel_time=segment.get("freeFlowTravelTime") or 0,
                confidence=min(max(confidence, 0.0), 1.0),
                recorded_at=self._clock(),
            )
        except (ValueError, TypeError) as e:
            raise ProviderError(f"Malformed flow segment: {e}") from e

        return [record]

    def _parse_incident_response(self, data: Any) -> List[IncidentEvent]:
        if not isinstance(data, dict):
            raise ProviderError("Malformed incident response")

        now = self._clock()
        events = []
        for item in data.get("incidents") or []:
            try:
                coords = (item.get("geometry") or {}).get("coordinates") or []
                # LineString geometries carry a list of points; Point carries one
                point = coords[0] if coords and isinstance(coords[0], list) else coords
                if len(point) < 2:
                    continue

                props = item.get("properties") or {}
                start_time = _parse_timestamp(props.get("startTime")) or now
                end_time = _parse_timestamp(props.get("endTime"))
                if end_time is not None and end_time < start_time:
                    end_time = None
                road_numbers = props.get("roadNumbers") or []

                events.append(IncidentEvent(
                    external_event_id=str(item.get("id") or uuid.uuid4()),
                    type=map_icon_category(props.get("iconCategory")).value,
                    description=props.get("description") or "Traffic incident",
                    severity=map_magnitude(props.get("magnitudeOfDelay")).value,
                    latitude=point[1],  # GeoJSON: [lon, lat]
                    longitude=point[0],
                    road_name=road_numbers[0] if road_numbers else "Unknown road",
                    start_time=start_time,
                    end_time=end_time,
                    recorded_at=now,
                ))
            except (ValueError, TypeError, AttributeError, OverflowError) as e:
                raise ProviderError(f"Malformed incident payload: {e}") from e

        logger.info(f"Parsed {len(events)} incidents from Azure Maps")
        return events
