"""
Traffic service: area traffic and incident queries built on the refresh orchestrator
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Optional, TypeVar

from traffictrack.config import CacheConfig
from traffictrack.exceptions import QueryCancelledError
from traffictrack.models.records import BoundingBox
from traffictrack.models.schemas import (
    AreaEventsResponse,
    AreaTrafficResponse,
    EventFilter,
    TrafficEventInfo,
)
from traffictrack.orchestrator import RecordKind, RefreshOrchestrator
from traffictrack.services.filters import filter_events, group_by_type, to_event_info
from traffictrack.services.metrics import summarize_flows, to_traffic_info
from traffictrack.store.base import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_RECENT_HOURS = 1
MAX_RECENT_HOURS = 168  # One week


class TrafficService:
    """Builds the area traffic / incident responses served by the API"""

    def __init__(
        self,
        orchestrator: RefreshOrchestrator,
        store: RecordStore,
        config: CacheConfig,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.orchestrator = orchestrator
        self.store = store
        self.config = config
        self.clock = clock

    async def _run(self, operation: Awaitable[T], timeout: Optional[float], label: str) -> T:
        if timeout is None:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"{label} cancelled after {timeout}s")
            raise QueryCancelledError(f"{label} exceeded {timeout}s") from e

    async def get_traffic_in_area(
        self,
        box: BoundingBox,
        caller_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AreaTrafficResponse:
        """Current traffic for box with congestion metrics and averages"""
        flows = await self._run(
            self.orchestrator.query(box, RecordKind.FLOW, caller_id=caller_id),
            timeout,
            "Traffic query",
        )
        summary = summarize_flows(flows)

        return AreaTrafficResponse(
            area=box,
            query_time=self.clock(),
            total_flow_records=summary.count,
            average_speed=summary.average_speed,
            average_congestion=summary.average_congestion,
            average_speed_by_road=summary.average_speed_by_road,
            traffic_data=[to_traffic_info(f) for f in flows],
        )

    async def get_events_in_area(
        self,
        box: BoundingBox,
        filters: Optional[EventFilter] = None,
        caller_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AreaEventsResponse:
        """Incidents in box after filtering, grouped by type"""
        events = await self._run(
            self.orchestrator.query(box, RecordKind.INCIDENT, caller_id=caller_id),
            timeout,
            "Events query",
        )
        filtered = filter_events(events, filters)

        return AreaEventsResponse(
            area=box,
            applied_filters=filters,
            query_time=self.clock(),
            total_events=len(filtered),
            events_by_type=group_by_type(filtered),
            events=[to_event_info(e) for e in filtered],
        )

    async def get_recent_events(
        self,
        hours: int = 24,
        limit: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> List[TrafficEventInfo]:
        """
        Most recent incidents recorded in the last hours, across all areas

        Reads the store directly; no freshness check and no refresh.
        """
        hours = max(MIN_RECENT_HOURS, min(hours, MAX_RECENT_HOURS))
        cap = self.config.recent_events_limit
        limit = cap if limit is None else max(0, min(limit, cap))
        since = self.clock() - timedelta(hours=hours)

        events = await self._run(
            self.store.find_recent_events(since, limit),
            timeout,
            "Recent events query",
        )
        return [to_event_info(e) for e in events]

    async def refresh_area(
        self,
        box: BoundingBox,
        caller_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AreaTrafficResponse:
        """
        Force a refresh of box, then answer a traffic query for it

        The refresh and the follow-up query share one timeout budget.
        """
        async def refresh_then_query() -> AreaTrafficResponse:
            await self.orchestrator.refresh(box, caller_id=caller_id)
            return await self.get_traffic_in_area(box, caller_id=caller_id)

        return await self._run(refresh_then_query(), timeout, "Area refresh")
