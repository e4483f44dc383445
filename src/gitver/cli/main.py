"""gitver CLI - gitver command."""

import click

from gitver.cli.version import metadata_command, version_command
from gitver.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="gitver")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """gitver - Deterministic project versions computed from git history."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(version_command, name="version")
cli.add_command(metadata_command, name="metadata")


if __name__ == "__main__":
    cli()
