"""Per-file processing step applied inside a working directory."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Protocol

import structlog

from isobatch.monitoring.metrics import FILES_PROCESSED
from isobatch.runner.cancellation import CancellationToken
from isobatch.runner.workdir import list_files

logger = structlog.get_logger(__name__)


class FileProcessor(Protocol):
    def process_file(self, path: Path) -> None:
        """Transform a single file in place."""


class DelayProcessor:
    """Stand-in processing step that only waits a fixed time per file."""

    def __init__(self, delay_seconds: float = 0.1) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self.delay_seconds = delay_seconds

    def process_file(self, path: Path) -> None:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)


@dataclass
class ProcessOutcome:
    processed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    cancelled: bool = False


def process_folder(
    folder: Path, processor: FileProcessor, token: CancellationToken
) -> ProcessOutcome:
    """
    Run `processor` over every file in `folder`.

    The token is checked before each file; once it is set the loop stops and
    the remaining files are reported as skipped. Processor errors propagate.
    """
    outcome = ProcessOutcome()
    files = list_files(folder)
    for position, path in enumerate(files):
        if token.cancelled:
            outcome.cancelled = True
            outcome.skipped = [remaining.name for remaining in files[position:]]
            logger.info(
                "processing_interrupted",
                processed=len(outcome.processed),
                skipped=len(outcome.skipped),
            )
            break
        logger.info("processing_file", file_name=path.name)
        processor.process_file(path)
        outcome.processed.append(path.name)
        FILES_PROCESSED.inc()
    return outcome


__all__ = ["FileProcessor", "DelayProcessor", "ProcessOutcome", "process_folder"]
