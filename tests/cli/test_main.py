"""Tests for the tpl CLI.

The vitest invocation is replaced by a runner mock; everything else
(manifest discovery, selection, result application, rendering) is real.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from click.testing import CliRunner

from testplane.cli.main import cli
from testplane.config import loader
from testplane.testing import ops
from testplane.testing.models import AggregatedResult
from testplane.testing.runner import TestRunner
from testplane.testing.session import RunRequest

MANIFEST = """\
files:
  - path: src/math.test.ts
    tests:
      - describe: math
        tests:
          - adds
          - subtracts
"""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    (tmp_path / "tests.yaml").write_text(MANIFEST)
    return tmp_path


def _math_path(workspace: Path) -> str:
    return (workspace / "src" / "math.test.ts").resolve().as_posix()


def _install_runner(
    monkeypatch: pytest.MonkeyPatch, workspace: Path, statuses: dict[str, str]
) -> list[RunRequest]:
    """Route the CLI's run_handler through a mocked vitest runner."""
    requests: list[RunRequest] = []
    result = AggregatedResult.model_validate(
        {
            "testResults": [
                {"testFilePath": _math_path(workspace), "displayName": name, "status": status}
                for name, status in statuses.items()
            ]
        }
    )

    async def handler(ctrl: Any, request: RunRequest, *_: Any, config: Any = None) -> Any:
        requests.append(request)
        runner = MagicMock(spec=TestRunner)
        runner.schedule_run = AsyncMock(return_value=result)
        return await ops.run_handler(ctrl, request, config=config, runner=runner)

    monkeypatch.setattr("testplane.cli.run.run_handler", handler)
    return requests


class TestCliGroup:
    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("run", "debug", "watch"):
            assert command in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert "0.1.0" in result.output


class TestRunCommand:
    def test_all_passing_exits_zero(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _install_runner(monkeypatch, workspace, {"math adds": "pass", "math subtracts": "pass"})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml")])

        assert result.exit_code == 0, result.output
        assert "2 tests" in result.output
        assert "2 passed" in result.output

    def test_failure_exits_one(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _install_runner(monkeypatch, workspace, {"math adds": "pass", "math subtracts": "fail"})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml")])

        assert result.exit_code == 1
        assert "1 failed, 1 passed" in result.output

    def test_missing_result_exits_one(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _install_runner(monkeypatch, workspace, {"math adds": "pass"})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml")])

        assert result.exit_code == 1
        assert "1 errored, 1 passed" in result.output

    def test_selector_by_full_name(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        requests = _install_runner(monkeypatch, workspace, {"math adds": "pass"})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml"), "math adds"])

        assert result.exit_code == 0, result.output
        (request,) = requests
        assert request.include is not None
        assert [node.full_pattern for node in request.include] == ["math adds"]

    def test_selector_by_file_path(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        requests = _install_runner(
            monkeypatch, workspace, {"math adds": "pass", "math subtracts": "pass"}
        )

        CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml"), "src/math.test.ts"])

        (request,) = requests
        assert [node.kind for node in request.include or []] == ["file"]

    def test_unknown_selector(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _install_runner(monkeypatch, workspace, {})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml"), "nope"])

        assert result.exit_code == 1
        assert "No test matches 'nope'" in result.output

    def test_json_output(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _install_runner(monkeypatch, workspace, {"math adds": "pass", "math subtracts": "fail"})

        result = CliRunner().invoke(cli, ["run", str(workspace / "tests.yaml"), "--json"])

        payload = json.loads(result.stdout)
        statuses = {row["id"].rsplit("/", 1)[-1]: row["status"] for row in payload["results"]}
        assert statuses == {"math adds": "passed", "math subtracts": "failed"}

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["run", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2

    def test_invalid_manifest(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
        manifest = tmp_path / "tests.yaml"
        manifest.write_text("files:\n  - tests: [a]\n")

        result = CliRunner().invoke(cli, ["run", str(manifest)])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output


class TestWatchCommand:
    def test_missing_vitest(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("testplane.cli.watch.get_vitest_path", lambda *_: None)

        result = CliRunner().invoke(cli, ["watch", str(workspace / "tests.yaml")])

        assert result.exit_code == 1
        assert "Cannot find vitest" in result.output
