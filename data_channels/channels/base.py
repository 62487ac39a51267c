"""
Abstract base classes for data channels.

All channel implementations (in-memory, database adapters) must implement
these interfaces and produce identical results for the same sequence of
calls: unique ids, increasing per-record versions, an append-only update
log, and the same filter/sort/pagination output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from ..query.types import Filter, QueryOptions
from ..sync.update_log import Update

FilterArg = Filter | Mapping[str, Any] | None
OptionsArg = QueryOptions | Mapping[str, Any] | None


class ChannelReader(ABC):
    """Read side of a channel: records, id queries and the update log."""

    @abstractmethod
    async def read(self, record_id: str) -> dict[str, Any] | None:
        """
        Read a single record.

        Returns:
            The record, or None if no record has the id
        """
        pass

    @abstractmethod
    async def read_many(self, record_ids: Iterable[str] | None = None) -> list[dict[str, Any]]:
        """
        Read several records.

        Args:
            record_ids: Ids to read, or None for every record

        Returns:
            Matching records in store order; unknown ids are skipped
        """
        pass

    @abstractmethod
    async def get_ids(self, filter: FilterArg = None, options: OptionsArg = None) -> list[str]:
        """
        Query record ids.

        Args:
            filter: Field tests every returned record must pass
            options: Ordering, offset, count and "id:version" formatting

        Returns:
            Ids (or "id:version" strings) of matching records
        """
        pass

    @abstractmethod
    async def get_version(self) -> str:
        """Current update log cursor."""
        pass

    @abstractmethod
    async def get_updates(
        self,
        from_version: str | None = None,
        filter: FilterArg = None,
        options: OptionsArg = None,
    ) -> list[Update]:
        """
        Read update log entries.

        Args:
            from_version: Cursor from get_version(); entries before it are skipped
            filter: Keep only entries for records currently matching the filter
            options: Query options applied when computing the matching records

        Returns:
            Log entries in append order
        """
        pass


class ChannelWriter(ABC):
    """Write side of a channel. Every successful call appends to the update log."""

    @abstractmethod
    async def create(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a record, assigning an id when it has none.

        Raises:
            DuplicateIdError: If the id is already taken
        """
        pass

    @abstractmethod
    async def create_many(self, records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """
        Create a batch of records atomically.

        Raises:
            DuplicateIdError: If any id is taken or repeated within the batch;
                no record of the batch is stored in that case
        """
        pass

    @abstractmethod
    async def update(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """
        Deep-merge fields into an existing record.

        Raises:
            RecordNotFoundError: If no record has ``record["id"]``
        """
        pass

    @abstractmethod
    async def remove(self, record_id: str) -> None:
        """
        Delete a record.

        Raises:
            RecordNotFoundError: If no record has the id
        """
        pass


class DataChannel(ChannelReader, ChannelWriter):
    """
    Abstract base for all channel backends.

    Combines the reader and writer contracts with a lifecycle so backends
    that hold connections can be used as async context managers.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the channel for use (connections, indexes)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release resources. Further operations fail."""
        pass

    async def __aenter__(self) -> DataChannel:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
