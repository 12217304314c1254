"""
Traffic service tests: response shaping, filters, recent events and cancellation
"""
import asyncio
from datetime import timedelta

import pytest

from traffictrack.config import CacheConfig
from traffictrack.exceptions import QueryCancelledError
from traffictrack.models.records import BoundingBox, EventType, Severity
from traffictrack.models.schemas import EventFilter
from traffictrack.orchestrator import RefreshOrchestrator
from traffictrack.services.traffic_service import TrafficService
from traffictrack.store import MemoryRecordStore
from conftest import NOW, HangingIncidentsProvider, StaticProvider, fixed_clock, make_event, make_flow


@pytest.fixture
def build_service(build_orchestrator, store):
    def _build(provider=None, config=None):
        config = config or CacheConfig()
        orchestrator = build_orchestrator(provider=provider, config=config)
        return TrafficService(orchestrator, store, config, clock=fixed_clock)
    return _build


class TestTrafficInArea:

    @pytest.mark.asyncio
    async def test_fresh_area_response(self, build_service, store, box):
        await store.insert_flows([
            make_flow(current=30, free_flow=60, road="Via Roma"),
            make_flow(current=50, free_flow=50, road="Via Roma"),
            make_flow(current=10, free_flow=80, road="Viale Monza"),
        ])
        service = build_service()

        response = await service.get_traffic_in_area(box)

        assert response.area == box
        assert response.query_time == NOW
        assert response.total_flow_records == 3
        assert response.average_speed == 30.0
        # (50 + 0 + 87.5) / 3
        assert response.average_congestion == 45.8
        assert response.average_speed_by_road == {"Via Roma": 40.0, "Viale Monza": 10.0}
        levels = sorted(t.congestion_level for t in response.traffic_data)
        assert levels == ["blocked", "free-flowing", "moderate"]
        assert service.orchestrator.refresh_count == 0

    @pytest.mark.asyncio
    async def test_empty_area_gets_synthetic_data(self, build_service, box):
        service = build_service()

        response = await service.get_traffic_in_area(box)

        assert response.total_flow_records == 15
        assert all(box.contains(t.latitude, t.longitude) for t in response.traffic_data)
        assert service.orchestrator.last_refresh.source == "synthetic"

    @pytest.mark.asyncio
    async def test_timeout_cancels_query_without_writes(self, build_service, store, box):
        provider = HangingIncidentsProvider(flows=[make_flow(age=timedelta(0))])
        service = build_service(provider=provider, config=CacheConfig(use_synthetic_data=False))

        with pytest.raises(QueryCancelledError):
            await service.get_traffic_in_area(box, timeout=0.05)

        assert store.write_count == 0


class TestEventsInArea:

    @pytest.mark.asyncio
    async def test_filters_are_applied_and_echoed(self, build_service, store, box):
        await store.insert_events([
            make_event("Accident", "Critical"),
            make_event("Accident", "Low"),
            make_event("Construction", "Critical"),
        ])
        service = build_service()
        filters = EventFilter(event_type=EventType.ACCIDENT, severity=Severity.CRITICAL)

        response = await service.get_events_in_area(box, filters)

        assert response.applied_filters == filters
        assert response.total_events == 1
        assert response.events_by_type == {"Accident": 1}
        assert response.events[0].type_display_name == "Accident"
        assert response.events[0].severity_display_name == "Critical"

    @pytest.mark.asyncio
    async def test_filters_do_not_decide_freshness(self, build_service, store, box):
        await store.insert_events([make_event("Accident", "Low")])
        service = build_service()

        response = await service.get_events_in_area(box, EventFilter(event_type=EventType.WEATHER))

        assert response.total_events == 0
        assert response.events_by_type == {}
        assert service.orchestrator.refresh_count == 0

    @pytest.mark.asyncio
    async def test_unfiltered_query_groups_every_type(self, build_service, store, box):
        await store.insert_events([
            make_event("Accident", "Low"),
            make_event("Accident", "Major", started=timedelta(hours=3)),
            make_event("TrafficJam", "Moderate"),
        ])
        service = build_service()

        response = await service.get_events_in_area(box)

        assert response.applied_filters is None
        assert response.events_by_type == {"Accident": 2, "TrafficJam": 1}
        assert sum(response.events_by_type.values()) == response.total_events


class TestRecentEvents:

    @pytest.mark.asyncio
    async def test_recent_events_span_all_areas(self, build_service, store):
        elsewhere = BoundingBox.from_corners(41.8, 12.4, 41.9, 12.5)
        await store.insert_events([
            make_event("Accident", "Low", started=timedelta(hours=5)),
            make_event("Roadblock", "Major", lat=41.85, lon=12.45, started=timedelta(hours=1)),
            make_event("Weather", "Low", age=timedelta(hours=30)),
        ])
        service = build_service()

        events = await service.get_recent_events(hours=24)

        assert [e.type for e in events] == ["Roadblock", "Accident"]
        assert elsewhere.contains(events[0].latitude, events[0].longitude)
        assert service.orchestrator.refresh_count == 0

    @pytest.mark.asyncio
    async def test_recent_events_limit_is_capped(self, build_service, store):
        await store.insert_events([
            make_event("Accident", "Low", started=timedelta(minutes=i)) for i in range(1, 6)
        ])
        service = build_service(config=CacheConfig(recent_events_limit=3))

        assert len(await service.get_recent_events()) == 3
        assert len(await service.get_recent_events(limit=2)) == 2
        assert len(await service.get_recent_events(limit=50)) == 3

    @pytest.mark.asyncio
    async def test_hours_are_clamped(self, build_service, store):
        await store.insert_events([make_event(age=timedelta(hours=200))])
        service = build_service()

        assert await service.get_recent_events(hours=10_000) == []


class TestRefreshArea:

    @pytest.mark.asyncio
    async def test_refresh_runs_even_when_fresh(self, build_service, store, box):
        await store.insert_flows([make_flow()])
        provider = StaticProvider(flows=[make_flow(current=80, free_flow=80, age=timedelta(0))])
        service = build_service(provider=provider, config=CacheConfig(use_synthetic_data=False))

        response = await service.refresh_area(box)

        assert provider.calls == 1
        assert service.orchestrator.refresh_count == 1
        assert response.total_flow_records == 2

    @pytest.mark.asyncio
    async def test_refresh_and_query_share_one_timeout(self, generator, box):
        class SlowReadStore(MemoryRecordStore):
            async def find_flows(self, box, limit):
                await asyncio.sleep(0.3)
                return await super().find_flows(box, limit)

        class SlowProvider(StaticProvider):
            async def fetch_flows(self, box):
                await asyncio.sleep(0.3)
                return await super().fetch_flows(box)

        store = SlowReadStore()
        config = CacheConfig(use_synthetic_data=False)
        provider = SlowProvider(flows=[make_flow(age=timedelta(0))])
        orchestrator = RefreshOrchestrator(store, provider, generator, config, clock=fixed_clock)
        service = TrafficService(orchestrator, store, config, clock=fixed_clock)

        # Each step fits in the budget on its own, both together do not
        with pytest.raises(QueryCancelledError):
            await service.refresh_area(box, timeout=0.5)

        assert provider.calls == 1
