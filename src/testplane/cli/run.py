"""tpl run / tpl debug commands - one-shot execution of a selection."""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console

from testplane.cli.utils import load_workspace, print_run, resolve_selectors, run_failed, run_rows
from testplane.core.errors import TestPlaneError
from testplane.testing.ops import debug_handler, run_handler
from testplane.testing.session import RecordingRunSession, RunRequest, TestController

_manifest_argument = click.argument(
    "manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_selectors_argument = click.argument("selectors", nargs=-1)
_root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: manifest directory)",
)
_json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


def _report(
    ctx: click.Context, ctrl: TestController, run: RecordingRunSession | None, as_json: bool
) -> None:
    if run is None:
        raise click.ClickException("Nothing was run: no workspace root")

    if as_json:
        click.echo(json.dumps({"run": run.name, "results": run_rows(ctrl, run)}, indent=2))
    else:
        console = Console(stderr=True)
        if run.output_text:
            console.print(run.output_text.replace("\r\n", "\n"), markup=False, highlight=False)
        print_run(Console(), ctrl, run)

    if run_failed(run):
        ctx.exit(1)


@click.command()
@_manifest_argument
@_selectors_argument
@_root_option
@_json_option
@click.pass_context
def run_command(
    ctx: click.Context,
    manifest: Path,
    selectors: tuple[str, ...],
    root: Path | None,
    as_json: bool,
) -> None:
    """Run tests once.

    MANIFEST lists the test files and their cases. SELECTORS narrow the run
    to file paths, node ids or full test names (default: everything).
    """
    ctrl, _, config = load_workspace(manifest, root)
    items = resolve_selectors(ctrl, selectors)
    request = RunRequest(include=items or None)
    try:
        run = asyncio.run(run_handler(ctrl, request, config=config))
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e
    _report(ctx, ctrl, run, as_json)


@click.command()
@_manifest_argument
@_selectors_argument
@_root_option
@_json_option
@click.pass_context
def debug_command(
    ctx: click.Context,
    manifest: Path,
    selectors: tuple[str, ...],
    root: Path | None,
    as_json: bool,
) -> None:
    """Run tests once under the node inspector.

    A debugger may attach to the inspector port while the tests run.
    """
    ctrl, _, config = load_workspace(manifest, root)
    items = resolve_selectors(ctrl, selectors)
    request = RunRequest(include=items or None)
    click.echo(f"Debugger listening on port {config.debug.inspect_port}", err=True)
    try:
        run = asyncio.run(debug_handler(ctrl, request, config=config))
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e
    _report(ctx, ctrl, run, as_json)
