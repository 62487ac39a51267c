"""
Filter and query option types.

A filter maps a record field name to a test. Two tests exist:

- PatternMatch: the field must be a string matched by a regular expression
  (search semantics, the pattern may match anywhere)
- ExactEqual: the field must be a number equal to the given value

Callers coming from dynamic payloads can pass plain mappings instead,
``{"name": "^a", "age": 3}``; coerce_filter() and QueryOptions.from_dict()
turn those into the typed forms.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from ..exceptions import InvalidQueryError


def is_number(value: Any) -> bool:
    """True for ints and floats, but not bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class PatternMatch:
    """Field must be a string containing a match for ``pattern``."""

    pattern: str
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.pattern)
        except re.error as e:
            raise InvalidQueryError("filter", f"invalid pattern: {e}", self.pattern) from e
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, value: Any) -> bool:
        return isinstance(value, str) and self._compiled.search(value) is not None


@dataclass(frozen=True)
class ExactEqual:
    """Field must be a number equal to ``value``."""

    value: int | float

    def matches(self, value: Any) -> bool:
        return is_number(value) and value == self.value


@dataclass(frozen=True)
class Unsatisfiable:
    """Test built from an unsupported filter value; never matches."""

    value: Any = None

    def matches(self, value: Any) -> bool:
        return False


FieldTest = Union[PatternMatch, ExactEqual, Unsatisfiable]
Filter = dict[str, FieldTest]


def coerce_test(test: Any) -> FieldTest:
    """Build the typed test for a single dynamic filter value."""
    if isinstance(test, (PatternMatch, ExactEqual, Unsatisfiable)):
        return test
    if isinstance(test, str):
        return PatternMatch(test)
    if is_number(test):
        return ExactEqual(test)
    return Unsatisfiable(test)


def coerce_filter(filter: Mapping[str, Any] | None) -> Filter | None:
    """Normalize a filter given as typed tests or plain values.

    Raises:
        InvalidQueryError: If the filter is not a mapping or holds a bad pattern
    """
    if filter is None:
        return None
    if not isinstance(filter, Mapping):
        raise InvalidQueryError("filter", "must be a mapping of field names to tests")
    return {name: coerce_test(test) for name, test in filter.items()}


def _non_negative(name: str, value: Any) -> int | None:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidQueryError(name, "must be an integer", repr(value))
    if value < 0:
        raise InvalidQueryError(name, "must not be negative", repr(value))
    return value


@dataclass
class QueryOptions:
    """Sort, pagination and formatting directives for an id query.

    Attributes:
        order: (field, direction) pairs; ascending when direction > 0,
            descending otherwise. Earlier pairs take precedence.
        offset: Number of leading results to drop
        count: Maximum number of results to keep
        get_version: Return "id:version" strings instead of bare ids
    """

    order: list[tuple[str, int]] = field(default_factory=list)
    offset: int | None = None
    count: int | None = None
    get_version: bool = False

    def __post_init__(self) -> None:
        self.offset = _non_negative("offset", self.offset)
        self.count = _non_negative("count", self.count)
        self.order = [(name, direction) for name, direction in self.order]
        for name, direction in self.order:
            if not is_number(direction):
                raise InvalidQueryError("order", f"direction for {name} must be a number", repr(direction))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QueryOptions:
        """Create from the dynamic option mapping.

        Accepts both the wire spelling (``from``, ``getVersion``) and the
        Python one (``offset``, ``get_version``). ``order`` may be a mapping
        of field to direction or a list of pairs.
        """
        order = data.get("order") or []
        if isinstance(order, Mapping):
            order = list(order.items())

        offset = data.get("from", data.get("offset"))
        get_version = data.get("getVersion", data.get("get_version", False))

        return cls(
            order=list(order),
            offset=offset,
            count=data.get("count"),
            get_version=bool(get_version),
        )


def coerce_options(options: QueryOptions | Mapping[str, Any] | None) -> QueryOptions | None:
    """Normalize query options given as QueryOptions or a plain mapping."""
    if options is None or isinstance(options, QueryOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidQueryError("options", "must be QueryOptions or a mapping")
    return QueryOptions.from_dict(options)
