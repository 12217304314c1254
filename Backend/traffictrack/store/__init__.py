"""
Record store implementations for flow samples and incident events
"""

from traffictrack.store.base import RecordStore
from traffictrack.store.memory import MemoryRecordStore
from traffictrack.store.mongo import MongoRecordStore

__all__ = ["RecordStore", "MemoryRecordStore", "MongoRecordStore"]
