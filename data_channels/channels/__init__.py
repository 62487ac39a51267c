"""
Channel abstraction layer.

Provides the abstract channel contract and its in-memory implementation.
Every backend implements the same interface, so callers can switch
between them without code changes.
"""

from .base import ChannelReader, ChannelWriter, DataChannel
from .memory import MemoryChannelConfig, MemoryDataChannel
from .record_store import RecordStore, RecordsView

__all__ = [
    # Contract
    "DataChannel",
    "ChannelReader",
    "ChannelWriter",
    # In-memory backend
    "MemoryDataChannel",
    "MemoryChannelConfig",
    "RecordStore",
    "RecordsView",
]
