"""
Authoritative record storage for the in-memory channel.

Records live in two structures kept in lockstep: an id -> record index for
lookups and an insertion-ordered list that queries scan. Every successful
mutation stamps a fresh version on the record and appends one entry to the
update log; failed operations leave both structures and the log untouched.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from ..exceptions import DuplicateIdError, RecordNotFoundError
from ..id_utils import generate_record_id
from ..sync.update_log import UpdateLog, UpdateType
from ..sync.version import VersionGenerator
from ..utils import deep_merge


class RecordsView(Sequence):
    """Read-only, live view over the store's ordered records."""

    def __init__(self, records: list[dict[str, Any]]):
        self._records = records

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordsView({len(self._records)} records)"


class RecordStore:
    """CRUD over versioned records.

    Records handed to create() are deep-copied, so callers never share
    state with the store. Records returned from reads and writes are the
    stored objects themselves and must be treated as read-only.
    """

    def __init__(
        self,
        versions: VersionGenerator,
        log: UpdateLog,
        records: Iterable[Mapping[str, Any]] | None = None,
    ):
        """
        Initialize the store.

        Args:
            versions: Source of record version stamps
            log: Update log receiving one entry per mutation
            records: Optional initial records. They are stored without
                producing log entries; missing ids and versions are filled in.

        Raises:
            DuplicateIdError: If two initial records share an id
        """
        self._versions = versions
        self._log = log
        self._records: list[dict[str, Any]] = []
        self._index: dict[str, dict[str, Any]] = {}
        self._view = RecordsView(self._records)

        for record in records or []:
            stored = self._prepare(record, self._index)
            if stored["id"] in self._index:
                raise DuplicateIdError(stored["id"])
            version = stored.get("version")
            if version is None:
                stored["version"] = self._versions.next()
            elif isinstance(version, int) and not isinstance(version, bool):
                self._versions.observe(version)
            self._insert(stored)

    def _prepare(self, record: Mapping[str, Any], taken) -> dict[str, Any]:
        stored = copy.deepcopy(dict(record))
        if stored.get("id") is None:
            stored["id"] = generate_record_id(taken)
        return stored

    def _insert(self, stored: dict[str, Any]) -> None:
        self._records.append(stored)
        self._index[stored["id"]] = stored

    def create(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Store a new record, assigning an id if it has none.

        Raises:
            DuplicateIdError: If a record with the id already exists
        """
        stored = self._prepare(record, self._index)
        if stored["id"] in self._index:
            raise DuplicateIdError(stored["id"])

        stored["version"] = self._versions.next()
        self._insert(stored)
        self._log.append(UpdateType.CREATED, stored["id"])
        return stored

    def create_many(self, records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Store a batch of records, all or nothing.

        Ids are assigned and checked for the whole batch before anything is
        inserted, so a collision with an existing record or between two
        records of the batch leaves the store unchanged.

        Raises:
            DuplicateIdError: On the first colliding id
        """
        batch_ids: set[str] = set()
        staged: list[dict[str, Any]] = []
        for record in records:
            stored = self._prepare(record, _Taken(self._index, batch_ids))
            record_id = stored["id"]
            if record_id in self._index or record_id in batch_ids:
                raise DuplicateIdError(record_id, batch=True)
            batch_ids.add(record_id)
            staged.append(stored)

        for stored in staged:
            stored["version"] = self._versions.next()
            self._insert(stored)
            self._log.append(UpdateType.CREATED, stored["id"])
        return staged

    def read(self, record_id: str) -> dict[str, Any] | None:
        """Current record for ``record_id``, or None."""
        return self._index.get(record_id)

    def read_many(self, record_ids: Iterable[str] | None = None) -> list[dict[str, Any]]:
        """All records, or those whose id is in ``record_ids``, in store order."""
        if record_ids is None:
            return list(self._records)
        wanted = set(record_ids)
        return [record for record in self._records if record["id"] in wanted]

    def update(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Deep-merge ``record`` into the stored record with the same id.

        The incoming ``version`` field is ignored; the store assigns a new one.

        Raises:
            RecordNotFoundError: If no record has the id
        """
        record_id = record.get("id")
        stored = self._index.get(record_id) if record_id is not None else None
        if stored is None:
            raise RecordNotFoundError(record_id)

        changes = copy.deepcopy(dict(record))
        changes.pop("version", None)
        deep_merge(stored, changes)
        stored["version"] = self._versions.next()
        self._log.append(UpdateType.CHANGED, record_id)
        return stored

    def remove(self, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If no record has the id
        """
        stored = self._index.get(record_id)
        if stored is None:
            raise RecordNotFoundError(record_id)

        for position, candidate in enumerate(self._records):
            if candidate is stored:
                del self._records[position]
                break
        del self._index[record_id]
        self._log.append(UpdateType.DELETED, record_id)

    def get_all_records(self) -> RecordsView:
        """Live read-only view of every record in insertion order."""
        return self._view

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._index


class _Taken:
    """Membership over existing ids plus the ids claimed by a pending batch."""

    def __init__(self, *containers):
        self._containers = containers

    def __contains__(self, item: object) -> bool:
        return any(item in container for container in self._containers)
