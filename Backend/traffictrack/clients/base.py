"""
Traffic provider contract and provider selection
"""
import logging
from typing import List, Protocol

from traffictrack.config import Settings
from traffictrack.exceptions import ProviderNotConfiguredError
from traffictrack.models.records import BoundingBox, FlowRecord, IncidentEvent

logger = logging.getLogger(__name__)


class TrafficProvider(Protocol):
    """Upstream source of flow samples and incidents for an area"""

    name: str

    async def fetch_flows(self, box: BoundingBox) -> List[FlowRecord]:
        """Fetch flow samples for box; raises ProviderError on any failure"""
        ...

    async def fetch_incidents(self, box: BoundingBox) -> List[IncidentEvent]:
        """Fetch incidents for box; raises ProviderError on any failure"""
        ...


class UnconfiguredProvider:
    """Stand-in used when no provider credentials are available; every call fails"""

    name = "unconfigured"

    async def fetch_flows(self, box: BoundingBox) -> List[FlowRecord]:
        raise ProviderNotConfiguredError("No traffic provider configured")

    async def fetch_incidents(self, box: BoundingBox) -> List[IncidentEvent]:
        raise ProviderNotConfiguredError("No traffic provider configured")


def build_provider(config: Settings) -> TrafficProvider:
    """Pick the provider implementation once at startup"""
    if not config.provider_configured:
        logger.info("Azure Maps subscription key not configured, using unconfigured provider")
        return UnconfiguredProvider()

    from traffictrack.clients.azure_maps import AzureMapsTrafficClient

    return AzureMapsTrafficClient(
        subscription_key=config.azure_maps_subscription_key,
        base_url=config.azure_maps_base_url,
        language=config.azure_maps_language,
        timeout=config.provider_timeout_seconds,
    )
