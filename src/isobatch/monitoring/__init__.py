"""
Monitoring utilities for isobatch.
"""

from isobatch.monitoring.metrics import (
    ACTIVE_GROUPS,
    FILES_MOVED,
    FILES_PROCESSED,
    GROUPS_COMPLETED,
)

__all__ = [
    "GROUPS_COMPLETED",
    "FILES_MOVED",
    "FILES_PROCESSED",
    "ACTIVE_GROUPS",
]
