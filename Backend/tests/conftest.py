import asyncio
import random
from datetime import datetime, timedelta
from typing import List

import pytest

from traffictrack.config import CacheConfig
from traffictrack.exceptions import ProviderError
from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent
from traffictrack.orchestrator import RefreshOrchestrator
from traffictrack.services.synthetic import SyntheticGenerator
from traffictrack.store import MemoryRecordStore

NOW = datetime(2026, 1, 15, 12, 0, 0)


def fixed_clock() -> datetime:
    return NOW


def make_flow(lat=45.05, lon=9.05, current=30.0, free_flow=60.0, age=timedelta(minutes=10), road="Via Roma") -> FlowRecord:
    return FlowRecord(
        latitude=lat,
        longitude=lon,
        road_name=road,
        current_speed=current,
        free_flow_speed=free_flow,
        confidence=0.9,
        recorded_at=NOW - age,
    )


def make_event(
    event_type="Accident",
    severity="Critical",
    lat=45.05,
    lon=9.05,
    started=timedelta(hours=2),
    age=timedelta(minutes=5),
) -> IncidentEvent:
    return IncidentEvent(
        external_event_id=f"evt-{event_type}-{severity}-{started.total_seconds()}",
        type=event_type,
        description="test incident",
        severity=severity,
        latitude=lat,
        longitude=lon,
        road_name="SS35",
        start_time=NOW - started,
        recorded_at=NOW - age,
    )


class StaticProvider:
    """Provider returning fixed batches"""

    name = "static"

    def __init__(self, flows: List[FlowRecord] = None, incidents: List[IncidentEvent] = None):
        self.flows = flows or []
        self.incidents = incidents or []
        self.calls = 0

    async def fetch_flows(self, box):
        self.calls += 1
        return list(self.flows)

    async def fetch_incidents(self, box):
        return list(self.incidents)


class FailingProvider:
    """Provider whose every call fails"""

    name = "failing"

    def __init__(self, error: Exception = None):
        self.error = error or ProviderError("upstream unreachable")
        self.calls = 0

    async def fetch_flows(self, box):
        self.calls += 1
        raise self.error

    async def fetch_incidents(self, box):
        raise self.error


class HangingIncidentsProvider(StaticProvider):
    """Returns flows immediately, then blocks on incidents until cancelled"""

    name = "hanging"

    async def fetch_incidents(self, box):
        await asyncio.sleep(3600)
        return []


@pytest.fixture
def box():
    return BoundingBox.from_corners(45.0, 9.0, 45.1, 9.1)


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def generator():
    return SyntheticGenerator(random.Random(1234), clock=fixed_clock)


@pytest.fixture
def synthetic_config():
    return CacheConfig(freshness_window=timedelta(minutes=30), use_synthetic_data=True)


@pytest.fixture
def provider_config():
    return CacheConfig(freshness_window=timedelta(minutes=30), use_synthetic_data=False)


@pytest.fixture
def build_orchestrator(store, generator):
    def _build(provider=None, config=None):
        return RefreshOrchestrator(
            store=store,
            provider=provider or FailingProvider(),
            generator=generator,
            config=config or CacheConfig(),
            clock=fixed_clock,
        )
    return _build
