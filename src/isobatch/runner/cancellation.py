"""Cooperative cancellation shared by the dispatcher and all workers."""

from __future__ import annotations

import threading
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class CancellationToken:
    """
    Thread-safe cancellation flag.

    Workers check `cancelled` at group dispatch and before each file of the
    processing step; nothing is interrupted forcibly.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "requested") -> None:
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self._event.set()
        logger.warning("cancellation_requested", reason=reason)

    def stop(self) -> None:
        self.cancel("signal")

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)


__all__ = ["CancellationToken"]
