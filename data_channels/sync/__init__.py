"""
Change tracking primitives.

Version stamps for records and the append-only update log that
clients replay to stay in sync with a channel.
"""

from .update_log import Update, UpdateLog, UpdateType
from .version import VersionGenerator

__all__ = [
    "Update",
    "UpdateLog",
    "UpdateType",
    "VersionGenerator",
]
