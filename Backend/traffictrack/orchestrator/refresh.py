"""
Refresh Orchestrator
Serves area queries from the record store and refreshes stale areas:
- Fresh: newest stored sample is inside the freshness window, serve as-is
- Stale or empty: refresh once (provider, else synthetic), then re-read
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from pydantic import BaseModel

from traffictrack.clients.base import TrafficProvider
from traffictrack.config import CacheConfig
from traffictrack.exceptions import ProviderError
from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent
from traffictrack.services.synthetic import SyntheticGenerator
from traffictrack.store.base import RecordStore

logger = logging.getLogger(__name__)

Record = Union[FlowRecord, IncidentEvent]


class RecordKind(str, Enum):
    """Record stream an area query reads"""
    FLOW = "flow"
    INCIDENT = "incident"


class RefreshResult(BaseModel):
    """Outcome of one refresh attempt"""
    source: str  # "provider" | "synthetic"
    flows_written: int = 0
    incidents_written: int = 0


class RefreshOrchestrator:
    """
    Freshness-gated read-through cache over the record store.

    At most one refresh runs per query and it runs on the caller's task;
    there is no background refresher. Provider failures never reach the
    caller, store failures always do.
    """

    def __init__(
        self,
        store: RecordStore,
        provider: TrafficProvider,
        generator: SyntheticGenerator,
        config: CacheConfig,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.provider = provider
        self.generator = generator
        self.config = config
        self.clock = clock
        self.refresh_count = 0
        self.last_refresh: Optional[RefreshResult] = None

    async def _read(self, box: BoundingBox, kind: RecordKind) -> List[Record]:
        if kind == RecordKind.FLOW:
            return await self.store.find_flows(box, self.config.flow_query_limit)
        return await self.store.find_events(box, self.config.incident_query_limit)

    def is_fresh(self, records: Sequence[Record]) -> bool:
        """Non-empty and the newest recorded_at falls inside the freshness window"""
        if not records:
            return False
        newest = max(r.recorded_at for r in records)
        return newest >= self.clock() - self.config.freshness_window

    async def query(self, box: BoundingBox, kind: RecordKind, caller_id: Optional[str] = None) -> List[Record]:
        """
        Read records of kind inside box, refreshing the area first if stale

        Returns:
            The stored records after at most one refresh, stale or not
        """
        records = await self._read(box, kind)
        if self.is_fresh(records):
            logger.debug(f"Serving {len(records)} fresh {kind.value} records")
            return records

        await self.refresh(box, caller_id=caller_id)
        return await self._read(box, kind)

    async def refresh(self, box: BoundingBox, caller_id: Optional[str] = None) -> RefreshResult:
        """
        Fetch new records for box and append them to the store

        Provider data is fetched completely before anything is written, so a
        cancelled refresh persists nothing.
        """
        logger.info(
            f"Refreshing data for area {box.min_lat},{box.min_lon} to {box.max_lat},{box.max_lon}"
            + (f" (caller {caller_id})" if caller_id else "")
        )
        self.refresh_count += 1

        if self.config.use_synthetic_data:
            result = await self._refresh_synthetic(box)
        else:
            result = await self._refresh_from_provider(box)

        self.last_refresh = result
        return result

    async def _refresh_from_provider(self, box: BoundingBox) -> RefreshResult:
        try:
            flows = await self.provider.fetch_flows(box)
            incidents = await self.provider.fetch_incidents(box)
        except Exception as e:
            logger.warning(
                f"Provider {self.provider.name} failed: {e}",
                exc_info=not isinstance(e, ProviderError),
            )
            logger.warning("Falling back to synthetic data")
            return await self._refresh_synthetic(box)

        stored_flows = await self.store.insert_flows(flows) if flows else []
        if stored_flows:
            logger.info(f"Added {len(stored_flows)} traffic flows from {self.provider.name}")
        stored_incidents = await self.store.insert_events(incidents) if incidents else []
        if stored_incidents:
            logger.info(f"Added {len(stored_incidents)} incidents from {self.provider.name}")

        return RefreshResult(
            source="provider",
            flows_written=len(stored_flows),
            incidents_written=len(stored_incidents),
        )

    async def _refresh_synthetic(self, box: BoundingBox) -> RefreshResult:
        flows = self.generator.generate_flows(box, self.config.synthetic_flow_count)
        incidents = self.generator.generate_incidents(box, self.config.synthetic_incident_count)

        stored_flows = await self.store.insert_flows(flows)
        logger.info(f"Generated {len(stored_flows)} synthetic traffic flows")
        stored_incidents = await self.store.insert_events(incidents)
        logger.info(f"Generated {len(stored_incidents)} synthetic events")

        return RefreshResult(
            source="synthetic",
            flows_written=len(stored_flows),
            incidents_written=len(stored_incidents),
        )
