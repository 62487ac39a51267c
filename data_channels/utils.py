"""Shared utility functions for data channels."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into ``target`` in place and return ``target``.

    When both sides hold a mapping for the same key the two are merged
    recursively, field by field. Any other value from ``source`` (scalars,
    lists, None) replaces the target's value.

    Args:
        target: Dictionary to update
        source: Fields to merge in

    Returns:
        The updated target dictionary.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target
