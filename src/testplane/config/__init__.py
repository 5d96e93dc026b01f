"""Config module exports."""

from testplane.config.loader import load_config
from testplane.config.models import (
    DebugConfig,
    LoggingConfig,
    RunnerConfig,
    TestPlaneConfig,
    WatchConfig,
)

__all__ = [
    "load_config",
    "TestPlaneConfig",
    "LoggingConfig",
    "RunnerConfig",
    "WatchConfig",
    "DebugConfig",
]
