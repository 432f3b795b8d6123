"""Completion counter shared by the worker pool."""

from __future__ import annotations

import threading
from typing import Callable, Optional

import structlog

from isobatch.runner.models import GroupResult

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int, Optional[GroupResult]], None]


class ProgressTracker:
    """
    Counts completed groups.

    `advance` is the only mutation and happens under a lock, so every
    completed group is counted exactly once and reports are emitted in
    increasing order.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None):
        self.total = total
        self._callback = callback
        self._done = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._done

    def advance(self, result: Optional[GroupResult] = None) -> int:
        with self._lock:
            self._done += 1
            done = self._done
            self._report(done, result)
        return done

    def announce(self) -> None:
        """Report the current count without advancing (used for empty runs)."""
        with self._lock:
            self._report(self._done, None)

    def _report(self, done: int, result: Optional[GroupResult]) -> None:
        logger.info(
            "group_progress",
            done=done,
            total=self.total,
            message=f"{done}/{self.total} groups complete",
        )
        if self._callback is None:
            return
        try:
            self._callback(done, self.total, result)
        except Exception as exc:  # noqa: BLE001
            logger.warning("progress_callback_failed", error=str(exc))


__all__ = ["ProgressTracker", "ProgressCallback"]
