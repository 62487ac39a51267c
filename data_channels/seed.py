"""
Seed record loading.

Channels can start from an initial record set stored on disk, either as a
JSON array of objects or as JSONL (one object per line). Files are only
ever read; channels never write their state back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from .exceptions import SeedLoadError

logger = logging.getLogger(__name__)


async def load_seed_records(path: str | Path) -> list[dict[str, Any]]:
    """Read initial records from a JSON or JSONL file.

    Args:
        path: File holding a JSON array of objects, or one object per line.
            Blank lines in JSONL files are skipped.

    Returns:
        The records in file order

    Raises:
        SeedLoadError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    if not await aiofiles.os.path.exists(path):
        raise SeedLoadError(str(path), FileNotFoundError(str(path)))

    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        raise SeedLoadError(str(path), e) from e

    if content.lstrip().startswith("["):
        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise SeedLoadError(str(path), e) from e
    else:
        records = []
        for line_number, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise SeedLoadError(str(path), e, line=line_number) from e

    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise SeedLoadError(str(path), ValueError(f"record {position} is not an object"))

    logger.info(f"Loaded {len(records)} seed records from {path}")
    return records
