"""Tests for signal-driven cancellation."""

import os
import signal

import pytest

from isobatch.runner.cancellation import CancellationToken
from isobatch.utils.signals import restore_signal_handlers, setup_signal_handlers


@pytest.mark.unit
def test_sigint_cancels_token_instead_of_exiting():
    token = CancellationToken()
    previous = setup_signal_handlers(token)
    try:
        os.kill(os.getpid(), signal.SIGINT)
        assert token.wait(timeout=2)
    finally:
        restore_signal_handlers(previous)

    assert token.cancelled is True
    assert token.reason == "requested"
    assert signal.getsignal(signal.SIGINT) is previous[signal.SIGINT]


@pytest.mark.unit
def test_handler_falls_back_to_stop_method():
    class Stoppable:
        stopped = False

        def stop(self):
            self.stopped = True

    target = Stoppable()
    previous = setup_signal_handlers(target)
    try:
        signal.getsignal(signal.SIGTERM)(signal.SIGTERM, None)
    finally:
        restore_signal_handlers(previous)

    assert target.stopped is True
