"""Test tree, result reconciliation, one-shot runs and watch mode."""

from testplane.testing.applier import ApplySummary, apply_results
from testplane.testing.ops import debug_handler, run_handler
from testplane.testing.session import (
    RecordingRunSession,
    RunController,
    RunRequest,
    RunSession,
    TestController,
)
from testplane.testing.tree import TestCase, TestFile, TestGroup, TestTreeNode
from testplane.testing.watch import WatchRegistry, WatchSession

__all__ = [
    "ApplySummary",
    "apply_results",
    "run_handler",
    "debug_handler",
    "RunRequest",
    "RunSession",
    "RunController",
    "RecordingRunSession",
    "TestController",
    "TestFile",
    "TestGroup",
    "TestCase",
    "TestTreeNode",
    "WatchSession",
    "WatchRegistry",
]
