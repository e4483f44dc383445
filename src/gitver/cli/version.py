"""gitver version / metadata commands."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from gitver.config import load_config
from gitver.core.errors import GitverError
from gitver.core.logging import configure_logging
from gitver.git import GitRepository
from gitver.version import GitVersionCalculator

_path_argument = click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
_config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file used instead of .gitver/config.yaml",
)


@contextmanager
def _computed(
    ctx: click.Context, path: Path, config_file: Path | None, overrides: dict[str, Any]
) -> Iterator[GitVersionCalculator]:
    """Open the repository at PATH and compute its version.

    Engine errors become ClickException so click reports them and exits 1.
    """
    try:
        repo = GitRepository(path)
        try:
            kwargs = {"version": overrides} if overrides else {}
            config = load_config(repo.path, config_file, **kwargs)
            if not (ctx.obj or {}).get("verbose"):
                configure_logging(config=config.logging)
            calculator = GitVersionCalculator(repo, config.version)
            calculator.compute_version()
            yield calculator
        finally:
            repo.close()
    except GitverError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@_path_argument
@_config_option
@click.option(
    "--strategy",
    type=click.Choice(["maven_like", "pattern", "script"], case_sensitive=False),
    help="Override the configured strategy",
)
@click.option("--fail-if-dirty", is_flag=True, help="Fail when the worktree has changes")
@click.option("--max-depth", type=click.IntRange(min=1), help="Cap the tag search depth")
@click.pass_context
def version_command(
    ctx: click.Context,
    path: Path,
    config_file: Path | None,
    strategy: str | None,
    fail_if_dirty: bool,
    max_depth: int | None,
) -> None:
    """Print the version computed for the repository at PATH.

    PATH defaults to the current directory; any directory inside a
    repository works.
    """
    overrides: dict[str, Any] = {}
    if strategy:
        overrides["strategy"] = strategy
    if fail_if_dirty:
        overrides["fail_if_dirty"] = True
    if max_depth is not None:
        overrides["max_search_depth"] = max_depth

    with _computed(ctx, path, config_file, overrides) as calculator:
        click.echo(calculator.compute_version())


@click.command()
@_path_argument
@_config_option
@click.option("--key", "key", help="Print a single metadata value")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def metadata_command(
    ctx: click.Context,
    path: Path,
    config_file: Path | None,
    key: str | None,
    as_json: bool,
) -> None:
    """Print the metadata of the version computed for PATH."""
    with _computed(ctx, path, config_file, {}) as calculator:
        if key is not None:
            value = calculator.query_metadata(key)
            if as_json:
                click.echo(json.dumps({key.upper(): value}))
            elif value is not None:
                click.echo(value)
            return

        entries = calculator.metadata()
        if as_json:
            click.echo(json.dumps(entries, indent=2))
        else:
            for name, value in entries.items():
                click.echo(f"{name}={value}")
