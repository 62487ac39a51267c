"""
Append-only change log for incremental sync.

Each successful mutation of a channel appends exactly one Update. Consumers
remember the log version they last saw and later ask for everything after
it, replaying creates, changes and deletes in order.

The log version is the number of entries in the log. An entry's own
``version`` is its position (the log length just before it was appended),
so the cursor returned by get_version() is always one past the last entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..exceptions import InvalidCursorError


class UpdateType(Enum):
    """Kind of mutation recorded by an Update."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class Update:
    """A single change log entry.

    Attributes:
        type: What happened to the record
        id: Id of the affected record
        version: Log position of this entry, stringified
    """

    type: UpdateType
    id: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "id": self.id,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Update:
        """Create from dictionary."""
        return cls(
            type=UpdateType(data["type"]),
            id=data["id"],
            version=str(data["version"]),
        )


def parse_cursor(cursor: str | None) -> int:
    """Turn a log cursor into the number of leading entries to skip.

    ``None`` and the empty string mean "from the beginning".
    """
    if cursor is None or cursor == "":
        return 0
    try:
        position = int(cursor)
    except (TypeError, ValueError):
        raise InvalidCursorError(str(cursor)) from None
    if position < 0:
        raise InvalidCursorError(str(cursor))
    return position


class UpdateLog:
    """Ordered, append-only sequence of Update entries."""

    def __init__(self) -> None:
        self._entries: list[Update] = []

    def append(self, update_type: UpdateType, record_id: str) -> Update:
        """Record a mutation and return the new entry."""
        update = Update(type=update_type, id=record_id, version=str(len(self._entries)))
        self._entries.append(update)
        return update

    def get_version(self) -> str:
        """Cursor pointing just past the newest entry."""
        return str(len(self._entries))

    def entries_since(self, cursor: str | None = None) -> list[Update]:
        """Return the suffix of the log after dropping ``cursor`` entries.

        Raises:
            InvalidCursorError: If the cursor is not a non-negative integer
        """
        return self._entries[parse_cursor(cursor):]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Update]:
        return iter(list(self._entries))
