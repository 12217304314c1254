"""
Synthetic traffic generator used when no live provider data is available
"""
import random
import uuid
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from traffictrack.models.records import (
    BoundingBox,
    EventType,
    FlowRecord,
    IncidentEvent,
    Severity,
    display_name_for_type,
)

FLOW_ROAD_NAMES = [
    "Via Roma", "Corso Italia", "Viale Europa", "Via Garibaldi", "Piazza Duomo",
    "Tangenziale Nord", "SS35", "Via Milano", "Corso Cavour",
]

INCIDENT_ROAD_NAMES = [
    "Via Roma", "Corso Italia", "Viale Europa", "Via Garibaldi", "SS35", "Tangenziale",
]


class SyntheticGenerator:
    """
    Produces plausible flow samples and incidents inside a bounding box.

    All randomness comes from the injected rng, so a seeded generator
    yields the same batch for the same box and clock.
    """

    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], datetime] = datetime.utcnow):
        self.rng = rng or random.Random()
        self.clock = clock

    def _point_in(self, box: BoundingBox) -> tuple[float, float]:
        lat = box.min_lat + self.rng.random() * (box.max_lat - box.min_lat)
        lon = box.min_lon + self.rng.random() * (box.max_lon - box.min_lon)
        # Clamp float rounding so points never land just outside the box
        return min(lat, box.max_lat), min(lon, box.max_lon)

    def _event_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def generate_flows(self, box: BoundingBox, count: int = 15) -> List[FlowRecord]:
        """Generate count flow samples recorded now"""
        now = self.clock()
        flows = []
        for _ in range(count):
            lat, lon = self._point_in(box)
            free_flow = float(50 + self.rng.randrange(50))  # km/h
            current = free_flow * (0.3 + self.rng.random() * 0.7)
            length_m = 200 + self.rng.random() * 1800

            flows.append(FlowRecord(
                latitude=lat,
                longitude=lon,
                road_name=self.rng.choice(FLOW_ROAD_NAMES),
                current_speed=current,
                free_flow_speed=free_flow,
                current_travel_time=length_m / (current / 3.6),
                free_flow_travel_time=length_m / (free_flow / 3.6),
                confidence=0.8 + self.rng.random() * 0.2,
                recorded_at=now,
            ))
        return flows

    def generate_incidents(self, box: BoundingBox, count: int = 8) -> List[IncidentEvent]:
        """Generate count incidents that started within the last day"""
        now = self.clock()
        types = list(EventType)
        severities = list(Severity)
        events = []
        for _ in range(count):
            lat, lon = self._point_in(box)
            event_type = self.rng.choice(types)
            start_time = now - timedelta(hours=self.rng.randint(1, 23))
            end_time = now + timedelta(hours=self.rng.randint(1, 11)) if self.rng.random() < 0.5 else None

            events.append(IncidentEvent(
                external_event_id=self._event_id(),
                type=event_type.value,
                description=f"{display_name_for_type(event_type.value)} reported on the road",
                severity=self.rng.choice(severities).value,
                latitude=lat,
                longitude=lon,
                road_name=self.rng.choice(INCIDENT_ROAD_NAMES),
                start_time=start_time,
                end_time=end_time,
                recorded_at=now,
            ))
        return events
