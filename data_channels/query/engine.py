"""
In-memory query evaluation over a channel's live records.

The engine never copies or mutates the records it reads; every call scans
the current contents of the record sequence, so results always reflect the
store's present state.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..id_utils import versioned_id
from ..sync.update_log import Update
from .types import Filter, QueryOptions, is_number

# Rank of each value kind when one sort field holds mixed types.
_RANK_NUMBER = 0
_RANK_STRING = 1
_RANK_OTHER = 2
_RANK_MISSING = 3


def record_matches(record: dict[str, Any], filter: Filter | None) -> bool:
    """True when every test in the filter passes for the record."""
    if not filter:
        return True
    for name, test in filter.items():
        if not test.matches(record.get(name)):
            return False
    return True


def _sort_key(record: dict[str, Any], name: str) -> tuple[int, Any]:
    if name not in record:
        return (_RANK_MISSING, 0)
    value = record[name]
    if is_number(value):
        return (_RANK_NUMBER, value)
    if isinstance(value, str):
        return (_RANK_STRING, value)
    return (_RANK_OTHER, 0)


def sort_records(records: list[dict[str, Any]], order: list[tuple[str, int]]) -> list[dict[str, Any]]:
    """Stable multi-field sort; the first (field, direction) pair is most significant."""
    result = list(records)
    # Successive stable sorts, least significant field first.
    for name, direction in reversed(order):
        result.sort(key=lambda record: _sort_key(record, name), reverse=direction <= 0)
    return result


class QueryEngine:
    """Filters, sorts and paginates the records of one channel.

    Usage:
        engine = QueryEngine(store.get_all_records())
        engine.get_ids({"name": PatternMatch("^a")}, QueryOptions(count=10))
    """

    def __init__(self, records: Sequence[dict[str, Any]]):
        """
        Args:
            records: Live, ordered view of the channel's records
        """
        self._records = records

    def match_records(
        self,
        filter: Filter | None = None,
        options: QueryOptions | None = None,
    ) -> list[dict[str, Any]]:
        """Apply filter, ordering, offset and count; return the surviving records."""
        records = [record for record in self._records if record_matches(record, filter)]
        if options is None:
            return records

        if options.order:
            records = sort_records(records, options.order)
        # Zero offset and zero count are treated as "not given".
        if options.offset:
            records = records[options.offset:]
        if options.count:
            records = records[: options.count]
        return records

    def get_ids(
        self,
        filter: Filter | None = None,
        options: QueryOptions | None = None,
    ) -> list[str]:
        """Ids of matching records, or "id:version" when options.get_version is set."""
        records = self.match_records(filter, options)
        if options is not None and options.get_version:
            return [versioned_id(record["id"], record["version"]) for record in records]
        return [record["id"] for record in records]

    def filter_updates(
        self,
        updates: list[Update],
        filter: Filter | None = None,
        options: QueryOptions | None = None,
    ) -> list[Update]:
        """Keep the log entries whose record currently matches the query.

        Matching is evaluated against the records as they are now, not as
        they were when each entry was logged. Entries for deleted records
        therefore never pass, and neither do entries for records that have
        since stopped matching.
        """
        if not updates or (filter is None and options is None):
            return updates
        matching = {record["id"] for record in self.match_records(filter, options)}
        return [update for update in updates if update.id in matching]
