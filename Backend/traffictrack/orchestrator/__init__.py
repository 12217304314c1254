"""
Freshness-gated refresh orchestration for area queries
"""

from traffictrack.orchestrator.refresh import RecordKind, RefreshOrchestrator, RefreshResult

__all__ = ["RecordKind", "RefreshOrchestrator", "RefreshResult"]
