"""
Grouping of source files into size-bounded batches.
"""

from .grouper import (
    FileGroup,
    FileRef,
    SourceDirectoryNotFoundError,
    group_files_by_size,
    group_paths_by_size,
    list_source_files,
    scan_files,
)

__all__ = [
    "FileRef",
    "FileGroup",
    "SourceDirectoryNotFoundError",
    "list_source_files",
    "scan_files",
    "group_files_by_size",
    "group_paths_by_size",
]
