"""Configuration management."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from isobatch.runner.models import CollisionPolicy

DEFAULT_MAX_GROUP_BYTES = 100 * 1024 * 1024  # 100 MiB


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return int(raw)


class RunnerConfig(BaseModel):
    """Batch runner configuration (YAML, ENV or CLI)."""

    source_dir: Path = Field(..., description="Directory whose files are batched")
    temp_root: Path = Field(..., description="Root for per-group working directories")
    max_group_bytes: int = Field(
        DEFAULT_MAX_GROUP_BYTES,
        ge=1,
        description="Upper bound for the total size of a group",
    )
    max_workers: Optional[int] = Field(
        None,
        ge=1,
        description="Parallel groups; defaults to the CPU count",
    )
    file_delay_seconds: float = Field(
        0.1,
        ge=0,
        description="Per-file delay of the stand-in processing step",
    )
    collision_policy: CollisionPolicy = Field(
        CollisionPolicy.RENAME,
        description="Policy when a moved file's name is already taken",
    )
    log_level: str = Field("INFO", description="Root log level")
    json_logs: bool = Field(False, description="Render logs as JSON")
    metrics_port: Optional[int] = Field(
        None,
        ge=1,
        le=65535,
        description="Expose Prometheus metrics on this port",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def resolved_workers(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    @classmethod
    def from_env(cls) -> "RunnerConfig":
        return cls(
            source_dir=os.getenv("ISOBATCH_SOURCE_DIR", "/app/source"),
            temp_root=os.getenv(
                "ISOBATCH_TEMP_ROOT", str(Path(tempfile.gettempdir()) / "isobatch")
            ),
            max_group_bytes=int(
                os.getenv("ISOBATCH_MAX_GROUP_BYTES", str(DEFAULT_MAX_GROUP_BYTES))
            ),
            max_workers=_env_optional_int("ISOBATCH_MAX_WORKERS"),
            file_delay_seconds=float(os.getenv("ISOBATCH_FILE_DELAY", "0.1")),
            collision_policy=os.getenv("ISOBATCH_COLLISION_POLICY", "rename"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("ISOBATCH_JSON_LOGS", "false").lower() == "true",
            metrics_port=_env_optional_int("ISOBATCH_METRICS_PORT"),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RunnerConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunnerConfig":
        return cls(**data)


__all__ = ["RunnerConfig", "DEFAULT_MAX_GROUP_BYTES"]
