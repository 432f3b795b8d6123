"""
Batch runner: isolated, concurrent processing of file groups.
"""

from .batch_runner import BatchRunner, plan_batches, run_batches
from .cancellation import CancellationToken
from .models import CollisionPolicy, GroupResult, GroupStatus, RunReport, RunStatus
from .processing import DelayProcessor, FileProcessor, ProcessOutcome, process_folder
from .progress import ProgressTracker

__all__ = [
    "BatchRunner",
    "plan_batches",
    "run_batches",
    "CancellationToken",
    "CollisionPolicy",
    "GroupResult",
    "GroupStatus",
    "RunReport",
    "RunStatus",
    "DelayProcessor",
    "FileProcessor",
    "ProcessOutcome",
    "process_folder",
    "ProgressTracker",
]
