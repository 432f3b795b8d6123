"""Data models for batch runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class CollisionPolicy(str, Enum):
    """What to do when a move finds a file with the same name at the destination."""

    RENAME = "rename"
    OVERWRITE = "overwrite"
    FAIL = "fail"


class GroupStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class GroupResult:
    """Outcome of one group's isolate/process/restore/cleanup cycle."""

    group_index: int
    status: GroupStatus
    file_count: int = 0
    total_bytes: int = 0
    processed_files: List[str] = field(default_factory=list)
    restored_files: List[str] = field(default_factory=list)
    working_dir: Optional[Path] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0


@dataclass
class RunReport:
    """Aggregated outcome of a run."""

    status: RunStatus
    total_groups: int
    completed_groups: int
    results: List[GroupResult] = field(default_factory=list)

    def count(self, status: GroupStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def succeeded(self) -> int:
        return self.count(GroupStatus.SUCCEEDED)

    @property
    def failed(self) -> int:
        return self.count(GroupStatus.FAILED)

    @property
    def cancelled(self) -> int:
        return self.count(GroupStatus.CANCELLED)

    @property
    def skipped(self) -> int:
        return self.count(GroupStatus.SKIPPED)

    def summary(self) -> str:
        if self.status is RunStatus.CANCELLED:
            return (
                f"Cancelled. {self.completed_groups}/{self.total_groups} groups "
                f"completed, {self.skipped} not started."
            )
        if self.failed:
            return f"All groups complete ({self.failed} failed)."
        return "All groups complete."


__all__ = [
    "CollisionPolicy",
    "GroupStatus",
    "RunStatus",
    "GroupResult",
    "RunReport",
]
