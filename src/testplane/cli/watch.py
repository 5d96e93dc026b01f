"""tpl watch command - keep vitest running and report each run."""

import asyncio
from pathlib import Path

import click
from rich.console import Console

from testplane.cli.utils import load_workspace, print_run
from testplane.config import TestPlaneConfig
from testplane.core.errors import ProcessLaunchError, TestPlaneError
from testplane.testing.discovery import ManifestDiscoverer
from testplane.testing.runner import get_vitest_path
from testplane.testing.session import RecordingRunSession, TestController
from testplane.testing.watch import WatchRegistry, watch_command_for


async def watch_until_interrupted(
    ctrl: TestController,
    discoverer: ManifestDiscoverer,
    config: TestPlaneConfig,
    console: Console,
    stop: asyncio.Event | None = None,
) -> None:
    """Start watch mode and print every finished run until ``stop`` is set."""
    assert ctrl.workspace_root is not None
    vitest = get_vitest_path(ctrl.workspace_root, config.runner.vitest_path)
    if vitest is None:
        raise ProcessLaunchError.not_found("vitest")

    def on_run_created(run: RecordingRunSession) -> None:
        run.on_end = lambda ended: print_run(console, ctrl, ended)

    ctrl.on_run_created(on_run_created)

    registry = WatchRegistry()
    session = registry.get_or_create(
        ctrl,
        discoverer,
        watch_command_for(ctrl.workspace_root, vitest),
        config=config.watch,
    )
    stop = stop or asyncio.Event()
    try:
        await session.watch()
        console.print(f"[bold]Watching[/bold] {ctrl.workspace_root} (Ctrl+C to stop)")
        await stop.wait()
    finally:
        await registry.dispose_all()


@click.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: manifest directory)",
)
def watch_command(manifest: Path, root: Path | None) -> None:
    """Run vitest in watch mode and report every run.

    MANIFEST lists the test files and their cases.
    """
    ctrl, discoverer, config = load_workspace(manifest, root)
    console = Console()
    try:
        asyncio.run(watch_until_interrupted(ctrl, discoverer, config, console))
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/dim]")
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e
