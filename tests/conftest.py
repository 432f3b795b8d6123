import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from isobatch.config.config import RunnerConfig
from isobatch.grouping.grouper import FileRef


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that touch the filesystem end to end or use threads",
    )
    config.addinivalue_line("markers", "slow: slow-running tests")


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    return tmp_path / "work"


@pytest.fixture
def make_file(source_dir: Path) -> Callable[..., Path]:
    """Create a file of `size` bytes in the source directory."""

    def _make(name: str, size: int, directory: Optional[Path] = None) -> Path:
        path = (directory or source_dir) / name
        path.write_bytes(b"x" * size)
        return path

    return _make


@pytest.fixture
def refs() -> Callable[..., List[FileRef]]:
    """Build in-memory FileRefs from sizes (no filesystem access)."""

    def _refs(*sizes: int) -> List[FileRef]:
        return [
            FileRef(path=Path(f"/virtual/f{i}_{size}.bin"), size=size)
            for i, size in enumerate(sizes)
        ]

    return _refs


class RecordingProcessor:
    """Processor fake that records which files it saw and from where."""

    def __init__(self, fail_on: Optional[str] = None, on_file=None) -> None:
        self.fail_on = fail_on
        self.on_file = on_file
        self.seen: List[Path] = []
        self._lock = threading.Lock()

    def process_file(self, path: Path) -> None:
        with self._lock:
            self.seen.append(path)
        if self.on_file is not None:
            self.on_file(path)
        if self.fail_on and path.name == self.fail_on:
            raise RuntimeError(f"processing failed for {path.name}")

    @property
    def names(self) -> List[str]:
        return sorted(path.name for path in self.seen)


@pytest.fixture
def recording_processor() -> RecordingProcessor:
    return RecordingProcessor()


@pytest.fixture
def runner_config(source_dir: Path, temp_root: Path) -> RunnerConfig:
    return RunnerConfig(
        source_dir=source_dir,
        temp_root=temp_root,
        max_group_bytes=50,
        max_workers=4,
        file_delay_seconds=0,
    )


@pytest.fixture
def processor_factory() -> Callable[..., RecordingProcessor]:
    return RecordingProcessor


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """CLI tests reconfigure the root logger against a temporary stream."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
