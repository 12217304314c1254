"""
Boundary validation for area queries; the core only ever sees validated input
"""
from datetime import datetime, timezone
from typing import Optional

from traffictrack.exceptions import InvalidQueryError
from traffictrack.models.records import BoundingBox, EventType, Severity
from traffictrack.models.schemas import EventFilter

MIN_HOURS = 1
MAX_HOURS = 168  # One week


def parse_area(lat1: float, lon1: float, lat2: float, lon2: float) -> BoundingBox:
    """Build the query box from two opposite corners"""
    lats_ok = all(-90 <= v <= 90 for v in (lat1, lat2))
    lons_ok = all(-180 <= v <= 180 for v in (lon1, lon2))
    if not (lats_ok and lons_ok):
        raise InvalidQueryError(
            "INVALID_COORDINATES",
            "Invalid coordinates. Lat: -90 to 90, Lon: -180 to 180",
        )
    return BoundingBox.from_corners(lat1, lon1, lat2, lon2)


def _as_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    # Stored timestamps are naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_event_filter(
    event_type: Optional[str] = None,
    severity: Optional[str] = None,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
) -> EventFilter:
    """Validate incident filters; empty strings count as unset"""
    allowed_types = [t.value for t in EventType]
    if event_type and event_type not in allowed_types:
        raise InvalidQueryError(
            "INVALID_EVENT_TYPE",
            f"Invalid event type. Allowed values: {', '.join(allowed_types)}",
        )

    allowed_severities = [s.value for s in Severity]
    if severity and severity not in allowed_severities:
        raise InvalidQueryError(
            "INVALID_SEVERITY",
            f"Invalid severity. Allowed values: {', '.join(allowed_severities)}",
        )

    return EventFilter(
        event_type=EventType(event_type) if event_type else None,
        severity=Severity(severity) if severity else None,
        from_date=_as_utc_naive(from_date),
        to_date=_as_utc_naive(to_date),
    )


def check_hours(hours: int) -> int:
    if hours < MIN_HOURS or hours > MAX_HOURS:
        raise InvalidQueryError("INVALID_HOURS", f"hours must be between {MIN_HOURS} and {MAX_HOURS}")
    return hours
