"""Prometheus metrics for isobatch runs."""

from prometheus_client import Counter, Gauge, Histogram

# Counters
GROUPS_COMPLETED = Counter(
    "isobatch_groups_completed_total",
    "Number of groups that finished their cycle",
    ["status"],
)
GROUPS_SKIPPED = Counter(
    "isobatch_groups_skipped_total",
    "Number of groups abandoned before start because of cancellation",
)
FILES_MOVED = Counter(
    "isobatch_files_moved_total",
    "Files moved between the source and working directories",
    ["direction"],
)
FILES_PROCESSED = Counter(
    "isobatch_files_processed_total", "Files passed through the processing step"
)
CLEANUP_FAILURES = Counter(
    "isobatch_workdir_cleanup_failures_total",
    "Working directories that could not be removed",
)

# Gauges
ACTIVE_GROUPS = Gauge(
    "isobatch_active_groups", "Groups currently inside their isolate/restore cycle"
)

# Histograms
GROUP_DURATION = Histogram(
    "isobatch_group_duration_seconds",
    "Duration of a full group cycle",
    ["status"],
)
GROUP_BYTES = Histogram(
    "isobatch_group_bytes",
    "Total size of files in a dispatched group",
    buckets=(
        1024,
        1024**2,
        10 * 1024**2,
        50 * 1024**2,
        100 * 1024**2,
        500 * 1024**2,
        1024**3,
    ),
)

__all__ = [
    "GROUPS_COMPLETED",
    "GROUPS_SKIPPED",
    "FILES_MOVED",
    "FILES_PROCESSED",
    "CLEANUP_FAILURES",
    "ACTIVE_GROUPS",
    "GROUP_DURATION",
    "GROUP_BYTES",
]
