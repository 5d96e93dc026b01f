"""Core module exports."""

from testplane.core.errors import (
    ConfigError,
    DebugOutputMissingError,
    ErrorCode,
    InternalError,
    ProcessLaunchError,
    ResultSchemaError,
    SelectionError,
    TestPlaneError,
    UnmatchedNodeError,
)
from testplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DebugOutputMissingError",
    "ErrorCode",
    "InternalError",
    "ProcessLaunchError",
    "ResultSchemaError",
    "SelectionError",
    "TestPlaneError",
    "UnmatchedNodeError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_run_id",
    "set_run_id",
]
