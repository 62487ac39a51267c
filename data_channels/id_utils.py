"""ID generation and formatting utilities for data channels.

Centralizes the id format knowledge so callers never need to
construct record ids directly.

Generated record ids: {epoch_millis}-{8 hex chars}
Versioned ids (get_ids with get_version): {record_id}:{version}
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Container


def generate_record_id(
    taken: Container[str],
    clock: Callable[[], float] | None = None,
) -> str:
    """Generate a record id that is not in ``taken``.

    Combines the current time with random bits and retries until the
    candidate is free.
    """
    clock = clock or time.time
    while True:
        candidate = f"{int(clock() * 1000)}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


def versioned_id(record_id: str, version: int) -> str:
    """Format a record id together with its version."""
    return f"{record_id}:{version}"

