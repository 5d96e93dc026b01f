"""CLI utilities."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from testplane.config import TestPlaneConfig, load_config
from testplane.core.errors import TestPlaneError
from testplane.testing.discovery import ManifestDiscoverer
from testplane.testing.session import RecordingRunSession, TestController
from testplane.testing.tree import TestTreeNode

_STATUS_STYLES = {
    "passed": "green",
    "failed": "red",
    "errored": "red bold",
    "skipped": "yellow",
    "started": "cyan",
    "enqueued": "dim",
}


def load_workspace(
    manifest: Path, root: Path | None = None
) -> tuple[TestController, ManifestDiscoverer, TestPlaneConfig]:
    """Build a controller and its tree from a manifest.

    The workspace root defaults to the manifest's directory.

    Raises:
        click.ClickException: On config or manifest errors
    """
    workspace_root = (root or manifest.parent).resolve()
    try:
        config = load_config(workspace_root)
        ctrl = TestController(workspace_root)
        discoverer = ManifestDiscoverer(manifest.resolve(), workspace_root)
        discoverer.discover_all_files_in_workspace(ctrl)
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e
    return ctrl, discoverer, config


def _walk(nodes: Sequence[TestTreeNode]) -> Iterator[TestTreeNode]:
    for node in nodes:
        yield node
        yield from _walk(node.children)


def resolve_selectors(ctrl: TestController, selectors: Sequence[str]) -> list[TestTreeNode]:
    """Turn selectors into tree nodes.

    A selector is a file path (relative to the workspace root), a node id,
    or the full pattern of a group or case. A pattern shared by several
    nodes selects all of them.

    Raises:
        click.ClickException: If a selector matches nothing
    """
    selected: dict[int, TestTreeNode] = {}
    for selector in selectors:
        matches: list[TestTreeNode] = []
        if ctrl.workspace_root is not None:
            file = ctrl.file_for_path((ctrl.workspace_root / selector).resolve().as_posix())
            if file is not None:
                matches.append(file)
        if not matches:
            node = ctrl.find(selector)
            if node is not None:
                matches.append(node)
        if not matches:
            matches = [
                node
                for node in _walk(ctrl.items)
                if node.kind != "file" and node.full_pattern == selector
            ]
        if not matches:
            raise click.ClickException(f"No test matches '{selector}'")
        for node in matches:
            selected.setdefault(id(node), node)
    return list(selected.values())


# =============================================================================
# Output
# =============================================================================


def run_rows(ctrl: TestController, run: RecordingRunSession) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for case in ctrl.cases():
        state = run.states.get(case.id)
        if state is None:
            continue
        rows.append(
            {
                "id": case.id,
                "status": state.status,
                "duration": state.duration,
                "message": state.message,
            }
        )
    return rows


def run_failed(run: RecordingRunSession) -> bool:
    return any(state.status in ("failed", "errored") for state in run.states.values())


def make_results_table(rows: list[dict[str, Any]], title: str | None = None) -> Table:
    table = Table(title=title, show_lines=False, pad_edge=False)
    table.add_column("Test", overflow="fold")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    table.add_column("Message", overflow="fold")
    for row in rows:
        style = _STATUS_STYLES.get(row["status"], "")
        duration = f"{row['duration']:.0f}ms" if row["duration"] is not None else ""
        message = (row["message"] or "").strip().splitlines()
        table.add_row(
            row["id"],
            f"[{style}]{row['status']}[/{style}]" if style else row["status"],
            duration,
            message[0] if message else "",
        )
    return table


def print_run(console: Console, ctrl: TestController, run: RecordingRunSession) -> None:
    rows = run_rows(ctrl, run)
    console.print(make_results_table(rows, title=run.name))

    counts: dict[str, int] = {}
    for row in rows:
        counts[row["status"]] = counts.get(row["status"], 0) + 1
    summary = ", ".join(f"{n} {status}" for status, n in sorted(counts.items()))
    console.print(f"[bold]{len(rows)} tests[/bold]: {summary or 'none'}")
