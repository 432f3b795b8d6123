"""isobatch - size-bounded file batching with isolated concurrent processing."""

__version__ = "0.1.0"

from .config import RunnerConfig
from .grouping import FileGroup, FileRef, group_files_by_size, group_paths_by_size
from .runner import BatchRunner, CancellationToken, RunReport, run_batches

__all__ = [
    "RunnerConfig",
    "FileRef",
    "FileGroup",
    "group_files_by_size",
    "group_paths_by_size",
    "BatchRunner",
    "CancellationToken",
    "RunReport",
    "run_batches",
]
