"""Signal helpers for cooperative cancellation."""

from __future__ import annotations

import logging
import signal
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _make_handler(callback: Callable[[], None]) -> Callable[[int, Any], None]:
    def handler(signum: int, _frame: Any) -> None:
        logger.info("received signal, cancelling run", extra={"signal": signum})
        callback()

    return handler


def setup_signal_handlers(on_stop: Any) -> Dict[int, Any]:
    """
    Register SIGINT/SIGTERM handlers that request cancellation instead of
    terminating the process.

    The `on_stop` object can provide a `cancel`, `stop`, `shutdown` or `close`
    method; otherwise the handler only logs the signal. Returns the previously
    installed handlers so callers can restore them.
    """

    def _stop() -> None:
        for method_name in ("cancel", "stop", "shutdown", "close"):
            method = getattr(on_stop, method_name, None)
            if callable(method):
                method()
                break

    handler = _make_handler(_stop)
    previous: Dict[int, Any] = {}
    for sig in HANDLED_SIGNALS:
        previous[sig] = signal.getsignal(sig)
        signal.signal(sig, handler)
    return previous


def restore_signal_handlers(previous: Dict[int, Any]) -> None:
    """Reinstall handlers returned by `setup_signal_handlers`."""
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
