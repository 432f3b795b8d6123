"""Greedy size-based grouping of source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple


class SourceDirectoryNotFoundError(Exception):
    """Raised when the source directory does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Source directory does not exist: {path}")
        self.path = path


@dataclass(frozen=True)
class FileRef:
    path: Path
    size: int

    @classmethod
    def from_path(cls, path: Path | str) -> "FileRef":
        path = Path(path)
        return cls(path=path, size=path.stat().st_size)

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class FileGroup:
    """Ordered batch of files processed together in one working directory."""

    index: int
    files: Tuple[FileRef, ...]

    @property
    def total_bytes(self) -> int:
        return sum(ref.size for ref in self.files)

    @property
    def names(self) -> List[str]:
        return [ref.name for ref in self.files]

    @property
    def paths(self) -> List[Path]:
        return [ref.path for ref in self.files]

    def __len__(self) -> int:
        return len(self.files)


def list_source_files(source_dir: Path | str) -> List[Path]:
    """Immediate regular files of `source_dir` (non-recursive), sorted by name."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise SourceDirectoryNotFoundError(source_dir)
    return sorted(
        (entry for entry in source_dir.iterdir() if entry.is_file()),
        key=lambda entry: entry.name,
    )


def scan_files(paths: Iterable[Path | str]) -> List[FileRef]:
    """Read each file's size once."""
    return [FileRef.from_path(path) for path in paths]


def group_files_by_size(
    files: Iterable[FileRef], max_group_bytes: int
) -> List[FileGroup]:
    """
    Partition `files` into groups whose total size stays within `max_group_bytes`.

    Files are visited in ascending size order (stable, so equal sizes keep
    their input order). A group is closed only when the next file would push
    it over the limit and it already holds at least one file, so a file larger
    than the limit ends up alone in its own group.
    """
    if max_group_bytes <= 0:
        raise ValueError("max_group_bytes must be positive")

    groups: List[FileGroup] = []
    current: List[FileRef] = []
    current_size = 0

    for ref in sorted(files, key=lambda item: item.size):
        if current and current_size + ref.size > max_group_bytes:
            groups.append(FileGroup(index=len(groups) + 1, files=tuple(current)))
            current = []
            current_size = 0
        current.append(ref)
        current_size += ref.size

    if current:
        groups.append(FileGroup(index=len(groups) + 1, files=tuple(current)))

    return groups


def group_paths_by_size(
    paths: Iterable[Path | str], max_group_bytes: int
) -> List[FileGroup]:
    return group_files_by_size(scan_files(paths), max_group_bytes)


__all__ = [
    "SourceDirectoryNotFoundError",
    "FileRef",
    "FileGroup",
    "list_source_files",
    "scan_files",
    "group_files_by_size",
    "group_paths_by_size",
]
