"""
In-memory data channel.

Keeps every record in process memory. Operations complete without ever
suspending, so calls that are awaited one after another are applied in
exactly that order. Nothing survives the process; seed files are only read.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ChannelClosedError, DataChannelError
from ..logging_utils import ChannelLoggerAdapter, get_channel_logger
from ..query.engine import QueryEngine
from ..query.types import coerce_filter, coerce_options
from ..seed import load_seed_records
from ..sync.update_log import Update, UpdateLog
from ..sync.version import VersionGenerator
from .base import DataChannel, FilterArg, OptionsArg
from .record_store import RecordStore, RecordsView

logger = get_channel_logger("memory")

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_flag(value: Any, default: bool) -> bool:
    """Read a boolean setting given as a YAML bool or a string like "false"."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass
class MemoryChannelConfig:
    """Configuration for the in-memory channel."""

    name: str = "memory"
    strict_versions: bool = True  # False keeps the legacy wrapping stamps
    seed_path: str | Path | None = None
    log_level: str | None = None

    @classmethod
    def from_env(cls) -> MemoryChannelConfig:
        """Create config from environment variables."""
        strict = os.environ.get("DATA_CHANNEL_STRICT_VERSIONS", "true")

        return cls(
            name=os.environ.get("DATA_CHANNEL_NAME", "memory"),
            strict_versions=_parse_flag(strict, True),
            seed_path=os.environ.get("DATA_CHANNEL_SEED_PATH") or None,
            log_level=os.environ.get("DATA_CHANNEL_LOG_LEVEL") or None,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> MemoryChannelConfig:
        """Create config from the ``channel`` section of a YAML settings file.

        ```yaml
        channel:
          name: "todos"
          strict_versions: true
          seed_path: "./fixtures/todos.jsonl"
          log_level: "DEBUG"
        ```

        A missing file or section yields the defaults.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        settings = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        section = settings.get("channel") or {}

        return cls(
            name=section.get("name", "memory"),
            strict_versions=_parse_flag(section.get("strict_versions"), True),
            seed_path=section.get("seed_path"),
            log_level=section.get("log_level"),
        )


class MemoryDataChannel(DataChannel):
    """
    Data channel backed by process memory.

    Features:
    - Records indexed by id and kept in insertion order
    - Version stamps on every mutation
    - Append-only update log for incremental sync
    - Regex / exact-match filters with multi-field sorting and pagination

    Usage:
        async with MemoryDataChannel() as channel:
            record = await channel.create({"title": "write docs"})
            cursor = await channel.get_version()
            await channel.update({"id": record["id"], "done": True})
            changes = await channel.get_updates(cursor)
    """

    def __init__(
        self,
        config: MemoryChannelConfig | None = None,
        records: Iterable[Mapping[str, Any]] | None = None,
    ):
        """
        Initialize the channel.

        Args:
            config: Channel configuration (defaults to MemoryChannelConfig())
            records: Optional initial records; they produce no update log entries
        """
        self.config = config or MemoryChannelConfig()
        # Per-channel child logger so log_level only affects this channel
        self._logger = logger.getChild(self.config.name)
        self._log = ChannelLoggerAdapter(self._logger, {"channel": self.config.name})
        self._versions = VersionGenerator(strict=self.config.strict_versions)
        self._updates = UpdateLog()
        self._store = RecordStore(self._versions, self._updates, records)
        self._engine = QueryEngine(self._store.get_all_records())
        self._initialized = False
        self._closed = False

    @classmethod
    async def open(
        cls,
        config: MemoryChannelConfig | None = None,
        records: Iterable[Mapping[str, Any]] | None = None,
    ) -> MemoryDataChannel:
        """Create and initialize a channel.

        Without an explicit config the environment is consulted. When no
        records are given and the config names a seed file, the channel is
        seeded from it.
        """
        if config is None:
            config = MemoryChannelConfig.from_env()
        if records is None and config.seed_path:
            records = await load_seed_records(config.seed_path)

        channel = cls(config, records)
        await channel.initialize()
        return channel

    async def initialize(self) -> None:
        """Mark the channel ready; applies the configured log level."""
        if self._initialized:
            return
        if self.config.log_level:
            self._logger.setLevel(self.config.log_level.upper())
        self._initialized = True
        self._log.info(f"Memory channel initialized with {len(self._store)} records")

    async def close(self) -> None:
        """Close the channel. Records and log are kept but no longer served."""
        if self._closed:
            return
        self._closed = True
        self._log.info(
            "Memory channel closed",
            extra={"records": len(self._store), "log_version": self._updates.get_version()},
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise ChannelClosedError(self.config.name)

    def _rejected(self, operation: str, error: DataChannelError) -> None:
        self._log.debug(f"{operation} rejected: {error.message}", extra=error.details)

    # =========================================================================
    # Reads
    # =========================================================================

    async def read(self, record_id: str) -> dict[str, Any] | None:
        self._ensure_open()
        return self._store.read(record_id)

    async def read_many(self, record_ids: Iterable[str] | None = None) -> list[dict[str, Any]]:
        self._ensure_open()
        return self._store.read_many(record_ids)

    async def get_ids(self, filter: FilterArg = None, options: OptionsArg = None) -> list[str]:
        self._ensure_open()
        return self._engine.get_ids(coerce_filter(filter), coerce_options(options))

    async def get_version(self) -> str:
        self._ensure_open()
        return self._updates.get_version()

    async def get_updates(
        self,
        from_version: str | None = None,
        filter: FilterArg = None,
        options: OptionsArg = None,
    ) -> list[Update]:
        self._ensure_open()
        updates = self._updates.entries_since(from_version)
        return self._engine.filter_updates(updates, coerce_filter(filter), coerce_options(options))

    def get_all_records(self) -> RecordsView:
        """Live read-only view of every stored record."""
        return self._store.get_all_records()

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(self, record: Mapping[str, Any]) -> dict[str, Any]:
        self._ensure_open()
        try:
            stored = self._store.create(record)
        except DataChannelError as e:
            self._rejected("create", e)
            raise
        self._log.debug(
            "Record created",
            extra={"record_id": stored["id"], "log_version": self._updates.get_version()},
        )
        return stored

    async def create_many(self, records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        self._ensure_open()
        try:
            stored = self._store.create_many(records)
        except DataChannelError as e:
            self._rejected("create_many", e)
            raise
        self._log.debug(
            f"Created {len(stored)} records",
            extra={"log_version": self._updates.get_version()},
        )
        return stored

    async def update(self, record: Mapping[str, Any]) -> dict[str, Any]:
        self._ensure_open()
        try:
            stored = self._store.update(record)
        except DataChannelError as e:
            self._rejected("update", e)
            raise
        self._log.debug(
            "Record changed",
            extra={"record_id": stored["id"], "log_version": self._updates.get_version()},
        )
        return stored

    async def remove(self, record_id: str) -> None:
        self._ensure_open()
        try:
            self._store.remove(record_id)
        except DataChannelError as e:
            self._rejected("remove", e)
            raise
        self._log.debug(
            "Record deleted",
            extra={"record_id": record_id, "log_version": self._updates.get_version()},
        )
