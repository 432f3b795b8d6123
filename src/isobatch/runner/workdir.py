"""Working directory lifecycle and name-preserving moves."""

from __future__ import annotations

import shutil
import uuid
from pathlib import Path
from typing import List, Sequence, Tuple

import structlog

from isobatch.runner.models import CollisionPolicy

logger = structlog.get_logger(__name__)


class FileCollisionError(Exception):
    """Raised when a destination name is taken and the policy is `fail`."""

    def __init__(self, destination: Path) -> None:
        super().__init__(f"Destination already exists: {destination}")
        self.destination = destination


class RestoreError(Exception):
    """Raised when some files could not be moved back to the source directory."""

    def __init__(self, failures: Sequence[Tuple[str, str]]) -> None:
        names = ", ".join(name for name, _ in failures)
        super().__init__(f"Failed to restore {len(failures)} file(s): {names}")
        self.failures = list(failures)


def create_working_dir(temp_root: Path) -> Path:
    """Create a uniquely named working directory under `temp_root`."""
    temp_root = Path(temp_root)
    temp_root.mkdir(parents=True, exist_ok=True)
    path = temp_root / uuid.uuid4().hex
    path.mkdir(exist_ok=False)
    return path


def remove_working_dir(path: Path) -> bool:
    """Recursively delete a working directory. Returns False if removal failed."""
    path = Path(path)
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as exc:
        logger.error("working_dir_cleanup_failed", path=str(path), error=str(exc))
        return False
    return True


def unique_destination(path: Path) -> Path:
    """Return `path` or the first free `<stem>_<n><suffix>` sibling."""
    path = Path(path)
    if not path.exists():
        return path
    for index in range(1, 100000):
        candidate = path.with_name(f"{path.stem}_{index}{path.suffix}")
        if not candidate.exists():
            return candidate
    raise RuntimeError(f"Unable to allocate destination filename for {path}")


def move_file(
    src: Path, dest_dir: Path, policy: CollisionPolicy = CollisionPolicy.RENAME
) -> Path:
    """Move `src` into `dest_dir` keeping its name, applying `policy` on collision."""
    src = Path(src)
    destination = Path(dest_dir) / src.name
    if destination.exists():
        if policy is CollisionPolicy.FAIL:
            raise FileCollisionError(destination)
        if policy is CollisionPolicy.RENAME:
            renamed = unique_destination(destination)
            logger.warning(
                "destination_collision_renamed",
                file_name=src.name,
                renamed_to=renamed.name,
            )
            destination = renamed
        else:
            logger.warning("destination_collision_overwrite", file_name=src.name)
            destination.unlink()
    shutil.move(str(src), str(destination))
    return destination


def list_files(folder: Path) -> List[Path]:
    """Regular files directly inside `folder`, in name order."""
    return sorted(
        (entry for entry in Path(folder).iterdir() if entry.is_file()),
        key=lambda entry: entry.name,
    )


__all__ = [
    "FileCollisionError",
    "RestoreError",
    "create_working_dir",
    "remove_working_dir",
    "unique_destination",
    "move_file",
    "list_files",
]
