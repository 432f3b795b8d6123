"""Concurrent isolate/process/restore/cleanup cycle over file groups."""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import structlog

from isobatch.grouping.grouper import (
    FileGroup,
    group_paths_by_size,
    list_source_files,
)
from isobatch.monitoring.metrics import (
    ACTIVE_GROUPS,
    CLEANUP_FAILURES,
    FILES_MOVED,
    GROUP_BYTES,
    GROUP_DURATION,
    GROUPS_COMPLETED,
    GROUPS_SKIPPED,
)
from isobatch.runner.cancellation import CancellationToken
from isobatch.runner.models import (
    CollisionPolicy,
    GroupResult,
    GroupStatus,
    RunReport,
    RunStatus,
)
from isobatch.runner.processing import DelayProcessor, FileProcessor, process_folder
from isobatch.runner.progress import ProgressCallback, ProgressTracker
from isobatch.runner.workdir import (
    RestoreError,
    create_working_dir,
    list_files,
    move_file,
    remove_working_dir,
)
from isobatch.utils.logging import log_context

if TYPE_CHECKING:
    from isobatch.config.config import RunnerConfig

logger = structlog.get_logger(__name__)


class BatchRunner:
    """
    Runs every group through its own working directory on a thread pool.

    Per group, in order: check cancellation, create the working directory,
    move the group's files in, process them, move everything back, delete the
    working directory, count the group as complete. Files that were moved in
    are always moved back, including when processing fails or is cancelled
    part way through.
    """

    def __init__(
        self,
        source_dir: Path | str,
        temp_root: Path | str,
        *,
        processor: Optional[FileProcessor] = None,
        max_workers: Optional[int] = None,
        collision_policy: CollisionPolicy = CollisionPolicy.RENAME,
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.source_dir = Path(source_dir)
        self.temp_root = Path(temp_root)
        self.processor = processor or DelayProcessor()
        self.max_workers = max_workers or os.cpu_count() or 1
        self.collision_policy = CollisionPolicy(collision_policy)
        self.token = token or CancellationToken()
        self.on_progress = on_progress

    @classmethod
    def from_config(
        cls,
        config: "RunnerConfig",
        *,
        processor: Optional[FileProcessor] = None,
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> "BatchRunner":
        return cls(
            config.source_dir,
            config.temp_root,
            processor=processor or DelayProcessor(config.file_delay_seconds),
            max_workers=config.resolved_workers,
            collision_policy=config.collision_policy,
            token=token,
            on_progress=on_progress,
        )

    def run(self, groups: Sequence[FileGroup]) -> RunReport:
        """Process all groups and block until every dispatched group finishes."""
        tracker = ProgressTracker(len(groups), self.on_progress)
        logger.info(
            "run_started",
            total_groups=len(groups),
            max_workers=self.max_workers,
            source_dir=str(self.source_dir),
            temp_root=str(self.temp_root),
        )

        results: List[GroupResult] = []
        if not groups:
            tracker.announce()
        else:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="isobatch"
            ) as pool:
                futures = [
                    pool.submit(self.run_group, group, tracker) for group in groups
                ]
                results = [future.result() for future in futures]

        status = RunStatus.CANCELLED if self.token.cancelled else RunStatus.COMPLETED
        report = RunReport(
            status=status,
            total_groups=len(groups),
            completed_groups=tracker.completed,
            results=results,
        )
        logger.info(
            "run_finished",
            status=status.value,
            completed_groups=report.completed_groups,
            succeeded=report.succeeded,
            failed=report.failed,
            cancelled=report.cancelled,
            skipped=report.skipped,
        )
        return report

    def run_group(self, group: FileGroup, tracker: ProgressTracker) -> GroupResult:
        result = GroupResult(
            group_index=group.index,
            status=GroupStatus.FAILED,
            file_count=len(group),
            total_bytes=group.total_bytes,
        )
        if self.token.cancelled:
            result.status = GroupStatus.SKIPPED
            GROUPS_SKIPPED.inc()
            logger.info("group_skipped", group_index=group.index)
            return result

        start = time.perf_counter()
        ACTIVE_GROUPS.inc()
        GROUP_BYTES.observe(group.total_bytes)
        with log_context(group_index=group.index):
            work_dir: Optional[Path] = None
            try:
                work_dir = create_working_dir(self.temp_root)
                result.working_dir = work_dir
                logger.info(
                    "group_started",
                    files=len(group),
                    total_bytes=group.total_bytes,
                    working_dir=str(work_dir),
                )
                try:
                    self._move_in(group, work_dir)
                    outcome = process_folder(work_dir, self.processor, self.token)
                    result.processed_files = outcome.processed
                finally:
                    result.restored_files = self._restore(work_dir)
                result.status = (
                    GroupStatus.CANCELLED if outcome.cancelled else GroupStatus.SUCCEEDED
                )
            except Exception as exc:  # noqa: BLE001
                result.status = GroupStatus.FAILED
                result.error = str(exc)
                logger.error("group_failed", error=str(exc))
            finally:
                if work_dir is not None and not remove_working_dir(work_dir):
                    CLEANUP_FAILURES.inc()
                ACTIVE_GROUPS.dec()
                result.duration_seconds = time.perf_counter() - start
                GROUPS_COMPLETED.labels(status=result.status.value).inc()
                GROUP_DURATION.labels(status=result.status.value).observe(
                    result.duration_seconds
                )
                tracker.advance(result)
        return result

    def _move_in(self, group: FileGroup, work_dir: Path) -> None:
        for ref in group.files:
            move_file(ref.path, work_dir, self.collision_policy)
            FILES_MOVED.labels(direction="in").inc()

    def _restore(self, work_dir: Path) -> List[str]:
        """Move every file in `work_dir` back to the source directory."""
        restored: List[str] = []
        failures: List[Tuple[str, str]] = []
        for path in list_files(work_dir):
            try:
                destination = move_file(path, self.source_dir, self.collision_policy)
            except Exception as exc:  # noqa: BLE001
                failures.append((path.name, str(exc)))
                logger.error("restore_failed", file_name=path.name, error=str(exc))
                continue
            restored.append(destination.name)
            FILES_MOVED.labels(direction="out").inc()
        if failures:
            raise RestoreError(failures)
        return restored


def plan_batches(config: "RunnerConfig") -> List[FileGroup]:
    """Enumerate the source directory and group its files without moving them."""
    files = list_source_files(config.source_dir)
    return group_paths_by_size(files, config.max_group_bytes)


def run_batches(
    config: "RunnerConfig",
    *,
    token: Optional[CancellationToken] = None,
    processor: Optional[FileProcessor] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> RunReport:
    """
    Group the source directory's files and run every group.

    Raises SourceDirectoryNotFoundError before doing any work when the source
    directory is missing.
    """
    groups = plan_batches(config)
    logger.info(
        "groups_planned",
        groups=len(groups),
        files=sum(len(group) for group in groups),
        max_group_bytes=config.max_group_bytes,
    )
    runner = BatchRunner.from_config(
        config, processor=processor, token=token, on_progress=on_progress
    )
    return runner.run(groups)


__all__ = ["BatchRunner", "plan_batches", "run_batches"]
