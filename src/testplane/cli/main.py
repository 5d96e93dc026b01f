"""TestPlane CLI - tpl command."""

import click

from testplane.cli.run import debug_command, run_command
from testplane.cli.watch import watch_command
from testplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="tpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TestPlane - run, debug and watch vitest suites against a local test tree."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(run_command, name="run")
cli.add_command(debug_command, name="debug")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
