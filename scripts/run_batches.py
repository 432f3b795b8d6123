#!/usr/bin/env python3
"""
Entrypoint for a batch run configured entirely from the environment.
"""

import logging
import sys

from isobatch.config.config import RunnerConfig
from isobatch.grouping.grouper import SourceDirectoryNotFoundError
from isobatch.runner.batch_runner import run_batches
from isobatch.runner.cancellation import CancellationToken
from isobatch.runner.models import RunStatus
from isobatch.utils.logging import configure_logging
from isobatch.utils.signals import setup_signal_handlers

logger = logging.getLogger(__name__)


def main() -> int:
    config = RunnerConfig.from_env()
    configure_logging(level=config.log_level, json_output=config.json_logs)

    token = CancellationToken()
    setup_signal_handlers(token)

    try:
        report = run_batches(config, token=token)
    except SourceDirectoryNotFoundError as exc:
        logger.error(str(exc))
        return 1

    logger.info(report.summary())
    return 130 if report.status is RunStatus.CANCELLED else 0


if __name__ == "__main__":
    sys.exit(main())
