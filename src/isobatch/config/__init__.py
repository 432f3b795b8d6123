from .config import DEFAULT_MAX_GROUP_BYTES, RunnerConfig

__all__ = ["RunnerConfig", "DEFAULT_MAX_GROUP_BYTES"]
