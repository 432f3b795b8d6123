"""
Utility helpers for isobatch.
"""

from .logging import configure_logging, get_logger, log_context
from .signals import restore_signal_handlers, setup_signal_handlers

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "setup_signal_handlers",
    "restore_signal_handlers",
]
