"""
Derived flow metrics: congestion ratio, congestion level and area averages
"""
from collections import defaultdict
from enum import Enum
from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from traffictrack.models.records import FlowRecord
from traffictrack.models.schemas import TrafficInfo


class CongestionLevel(str, Enum):
    """Congestion buckets derived from the current/free-flow speed ratio"""
    FREE_FLOWING = "free-flowing"
    MODERATE = "moderate"
    HEAVY = "heavy"
    BLOCKED = "blocked"
    UNKNOWN = "unknown"


# Ordering used to compare levels; UNKNOWN sits outside the scale
CONGESTION_RANK: Dict[CongestionLevel, int] = {
    CongestionLevel.FREE_FLOWING: 0,
    CongestionLevel.MODERATE: 1,
    CongestionLevel.HEAVY: 2,
    CongestionLevel.BLOCKED: 3,
}


def congestion_percent(current_speed: float, free_flow_speed: float) -> float:
    """Percentage of free-flow speed lost to congestion, never negative"""
    if free_flow_speed <= 0:
        return 0.0
    return max(0.0, (1 - current_speed / free_flow_speed) * 100)


def congestion_level(current_speed: float, free_flow_speed: float) -> CongestionLevel:
    """
    Classify congestion from the speed ratio

    Args:
        current_speed: Current traffic speed (km/h)
        free_flow_speed: Free flow speed (km/h)

    Returns:
        free-flowing (>= 0.8), moderate (>= 0.5), heavy (>= 0.25), blocked
        otherwise, or unknown when the free-flow speed is zero
    """
    if free_flow_speed <= 0:
        return CongestionLevel.UNKNOWN

    ratio = current_speed / free_flow_speed
    if ratio >= 0.8:
        return CongestionLevel.FREE_FLOWING
    elif ratio >= 0.5:
        return CongestionLevel.MODERATE
    elif ratio >= 0.25:
        return CongestionLevel.HEAVY
    else:
        return CongestionLevel.BLOCKED


class FlowSummary(BaseModel):
    """Aggregates over a set of flow records"""
    count: int = 0
    average_speed: float = 0.0
    average_congestion: float = 0.0
    average_speed_by_road: Dict[str, float] = Field(default_factory=dict)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_flows(records: Sequence[FlowRecord]) -> FlowSummary:
    """Count and averages for records; an empty set yields zeros"""
    if not records:
        return FlowSummary()

    by_road: Dict[str, List[float]] = defaultdict(list)
    for record in records:
        by_road[record.road_name].append(record.current_speed)

    return FlowSummary(
        count=len(records),
        average_speed=round(_mean([r.current_speed for r in records]), 1),
        average_congestion=round(
            _mean([congestion_percent(r.current_speed, r.free_flow_speed) for r in records]), 1
        ),
        average_speed_by_road={road: round(_mean(speeds), 1) for road, speeds in by_road.items()},
    )


def to_traffic_info(record: FlowRecord) -> TrafficInfo:
    """Response view of a flow record with its derived metrics"""
    return TrafficInfo(
        id=record.id,
        latitude=record.latitude,
        longitude=record.longitude,
        road_name=record.road_name,
        current_speed=round(record.current_speed, 1),
        free_flow_speed=round(record.free_flow_speed, 1),
        congestion_percent=round(congestion_percent(record.current_speed, record.free_flow_speed), 1),
        congestion_level=congestion_level(record.current_speed, record.free_flow_speed).value,
        recorded_at=record.recorded_at,
    )
