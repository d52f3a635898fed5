import logging
import os

import click

from depmerge.cli.commands.abort import abort_cmd
from depmerge.cli.commands.continue_cmd import continue_cmd
from depmerge.cli.commands.install_mergetool import install_mergetool_cmd
from depmerge.cli.commands.resolve import resolve_cmd
from depmerge.cli.commands.start import start_cmd
from depmerge.cli.commands.status import status_cmd
from depmerge.cli.errors import exit_with_error
from depmerge.core.context import create_context
from depmerge.core.errors import DepmergeError

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _configure_logging(debug: bool) -> None:
    if debug or os.getenv("DEPMERGE_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="depmerge")
@click.option("--debug", is_flag=True, help="Log every git call and state transition.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Batch-merge dependency-update pull requests into one branch."""
    _configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except DepmergeError as e:
            exit_with_error(e)


cli.add_command(start_cmd)
cli.add_command(continue_cmd)
cli.add_command(status_cmd)
cli.add_command(abort_cmd)
cli.add_command(resolve_cmd)
cli.add_command(install_mergetool_cmd)


def main() -> None:
    """CLI entry point used by the `depmerge` console script."""
    cli()
