"""Resolve command: the manifest merge driver invoked by `git mergetool`."""

from pathlib import Path

import click
from rich.console import Console
from rich.syntax import Syntax

from depmerge.cli.errors import handle_errors
from depmerge.core.context import DepmergeContext
from depmerge.core.errors import DepmergeError
from depmerge.core.manifest import TieBreak, merge_manifests


def _read(path: Path, side: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DepmergeError(f"Could not read {side} manifest {path}: {e}") from e


@click.command("resolve")
@click.argument("local", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("remote", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("merged", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--table",
    "tables",
    multiple=True,
    help="Dependency table to merge (repeatable). Defaults to the configured tables.",
)
@click.option(
    "--prefer",
    type=click.Choice([t.value for t in TieBreak]),
    default=None,
    help="Side that wins when versions are equal or cannot be compared.",
)
@click.option("--quiet", "-q", is_flag=True, help="Do not print the merged manifest.")
@click.pass_obj
@handle_errors
def resolve_cmd(
    ctx: DepmergeContext,
    local: Path,
    remote: Path,
    merged: Path,
    tables: tuple[str, ...],
    prefer: str | None,
    quiet: bool,
) -> None:
    """Merge the dependency tables of LOCAL and REMOTE into MERGED.

    For every dependency the newer requirement wins. Everything outside the
    merged tables is taken from LOCAL unchanged. Configured lock files are
    resolved by taking REMOTE as is.
    """
    if merged.name in ctx.config.lock_files:
        # Lock files are regenerated by the build; take the incoming copy.
        result = _read(remote, "remote")
    else:
        result = merge_manifests(
            _read(local, "local"),
            _read(remote, "remote"),
            tables=tables or ctx.config.tables,
            tie_break=TieBreak(prefer) if prefer is not None else ctx.config.tie_break,
        )
    try:
        merged.write_text(result, encoding="utf-8")
    except OSError as e:
        raise DepmergeError(f"Could not write merged manifest {merged}: {e}") from e

    if not quiet:
        Console().print(Syntax(result, "toml"))
