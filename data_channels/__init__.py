"""
Data Channels

Storage-agnostic record channels with an append-only change log for
incremental client/server sync.

Provides:
- An abstract async channel contract (CRUD, id queries, update log)
- An in-memory channel implementing it
- Regex / exact-match filters with multi-field sorting and pagination
- Version stamps and log cursors for replaying changes

Usage:

    from data_channels import MemoryDataChannel, QueryOptions

    async def main():
        async with MemoryDataChannel() as channel:
            todo = await channel.create({"title": "write docs", "priority": 2})
            cursor = await channel.get_version()
            await channel.update({"id": todo["id"], "done": True})

            # Everything that happened since the cursor
            updates = await channel.get_updates(cursor)

            # Filtered, sorted, paginated ids
            ids = await channel.get_ids(
                {"title": "^write"},
                QueryOptions(order=[("priority", -1)], count=10),
            )

Configuration:

    # From environment (DATA_CHANNEL_*)
    channel = await MemoryDataChannel.open()

    # From a YAML settings file
    config = MemoryChannelConfig.from_file("settings.yaml")
    channel = await MemoryDataChannel.open(config)
"""

from .channels import (
    ChannelReader,
    ChannelWriter,
    DataChannel,
    MemoryChannelConfig,
    MemoryDataChannel,
    RecordStore,
    RecordsView,
)
from .exceptions import (
    ChannelClosedError,
    DataChannelError,
    DuplicateIdError,
    InvalidCursorError,
    InvalidQueryError,
    RecordNotFoundError,
    SeedLoadError,
)
from .query import (
    ExactEqual,
    Filter,
    PatternMatch,
    QueryEngine,
    QueryOptions,
    Unsatisfiable,
)
from .seed import load_seed_records
from .sync import Update, UpdateLog, UpdateType, VersionGenerator

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
    # Queries
    "QueryEngine",
    "QueryOptions",
    "Filter",
    "PatternMatch",
    "ExactEqual",
    "Unsatisfiable",
    # Change log
    "Update",
    "UpdateLog",
    "UpdateType",
    "VersionGenerator",
    # Seeding
    "load_seed_records",
    # Exceptions
    "DataChannelError",
    "RecordNotFoundError",
    "DuplicateIdError",
    "InvalidQueryError",
    "InvalidCursorError",
    "ChannelClosedError",
    "SeedLoadError",
]

__version__ = "0.1.0"
