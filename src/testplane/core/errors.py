"""TestPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Test run (selection, matching, result schema, process launch, debug)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Test run (7xxx)
    SELECTION_INVALID = 7001
    UNMATCHED_NODE = 7002
    RESULT_SCHEMA_INVALID = 7003
    PROCESS_LAUNCH_FAILED = 7004
    DEBUG_OUTPUT_MISSING = 7005

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class TestPlaneError(Exception):
    """Base error with structured context for CLI and log output."""

    __test__ = False

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SELECTION_INVALID')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TestPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SelectionError(TestPlaneError):
    """A selected node cannot be resolved to test data. Aborts the run."""

    @classmethod
    def unknown_node(cls, node_id: str) -> "SelectionError":
        return cls(
            code=ErrorCode.SELECTION_INVALID,
            message=f"Item not found: {node_id}",
            details={"node_id": node_id},
        )

    @classmethod
    def missing_file(cls, node_id: str) -> "SelectionError":
        return cls(
            code=ErrorCode.SELECTION_INVALID,
            message=f"File item not found for {node_id}",
            details={"node_id": node_id},
        )


class UnmatchedNodeError(TestPlaneError):
    """A task reported by the runner has no local counterpart."""

    @classmethod
    def for_task(cls, name: str, kind: str, candidates: list[str]) -> "UnmatchedNodeError":
        return cls(
            code=ErrorCode.UNMATCHED_NODE,
            message=f"Could not match {kind} '{name}' to a local test node",
            details={"name": name, "kind": kind, "candidates": candidates},
        )


class ResultSchemaError(TestPlaneError):
    """Runner output did not match the expected result schema."""

    @classmethod
    def invalid(cls, source: str, reason: str) -> "ResultSchemaError":
        return cls(
            code=ErrorCode.RESULT_SCHEMA_INVALID,
            message=f"Invalid result payload from {source}: {reason}",
            details={"source": source, "reason": reason},
        )


class ProcessLaunchError(TestPlaneError):
    """The test runner (or debugger) could not be found or started."""

    @classmethod
    def not_found(cls, executable: str) -> "ProcessLaunchError":
        return cls(
            code=ErrorCode.PROCESS_LAUNCH_FAILED,
            message=f"Cannot find vitest: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def failed(cls, command: list[str], reason: str) -> "ProcessLaunchError":
        return cls(
            code=ErrorCode.PROCESS_LAUNCH_FAILED,
            message=f"Failed to start {command[0] if command else '<empty>'}: {reason}",
            details={"command": command, "reason": reason},
        )


class DebugOutputMissingError(TestPlaneError):
    """The debug session ended without writing its JSON output file."""

    @classmethod
    def for_invocation(
        cls,
        command: list[str],
        cwd: str,
        node_version: str | None,
        path_env: str | None,
    ) -> "DebugOutputMissingError":
        message = (
            "When running:\n"
            f"    {' '.join(command)}\n"
            f"cwd: {cwd}\n"
            f"node: {node_version or 'unknown'}\n"
            f"env.PATH: {path_env or ''}"
        )
        return cls(
            code=ErrorCode.DEBUG_OUTPUT_MISSING,
            message=message,
            details={"command": command, "cwd": cwd, "node_version": node_version},
        )


class InternalError(TestPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
