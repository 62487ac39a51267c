"""
Custom exceptions for data channels.

All channel implementations should raise these exceptions
for consistent error handling across backends.
"""


class DataChannelError(Exception):
    """Base exception for all data channel errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RecordNotFoundError(DataChannelError):
    """Raised when an update or remove targets an id with no record."""

    def __init__(self, record_id: str | None):
        super().__init__(f"Record not found: {record_id}", {"record_id": record_id})
        self.record_id = record_id


class DuplicateIdError(DataChannelError):
    """Raised when creating a record whose id already exists."""

    def __init__(self, record_id: str, batch: bool = False):
        details: dict = {"record_id": record_id}
        if batch:
            details["batch"] = True
        super().__init__(f"Record already exists: {record_id}", details)
        self.record_id = record_id
        self.batch = batch


class InvalidQueryError(DataChannelError):
    """Raised when a filter or query option cannot be evaluated."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Invalid query on {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value


class InvalidCursorError(DataChannelError):
    """Raised when an update-log cursor is not a non-negative integer."""

    def __init__(self, cursor: str):
        super().__init__(f"Invalid update cursor: {cursor!r}", {"cursor": cursor})
        self.cursor = cursor


class ChannelClosedError(DataChannelError):
    """Raised when an operation is issued on a closed channel."""

    def __init__(self, channel: str):
        super().__init__(f"Channel is closed: {channel}", {"channel": channel})
        self.channel = channel


class SeedLoadError(DataChannelError):
    """Raised when a seed record file cannot be read or parsed."""

    def __init__(self, path: str, cause: Exception | None = None, line: int | None = None):
        details: dict = {"path": path}
        if line is not None:
            details["line"] = line
        if cause:
            details["cause"] = str(cause)
        message = f"Failed to load seed records: {path}"
        if line is not None:
            message += f" (line {line})"
        super().__init__(message, details)
        self.path = path
        self.cause = cause
        self.line = line
