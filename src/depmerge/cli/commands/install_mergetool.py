"""Install-mergetool command implementation."""

import click

from depmerge.cli.errors import handle_errors
from depmerge.cli.output import user_output
from depmerge.core.context import DepmergeContext

RESOLVE_COMMAND = 'depmerge resolve "$LOCAL" "$REMOTE" "$MERGED"'


@click.command("install-mergetool")
@click.pass_obj
@handle_errors
def install_mergetool_cmd(ctx: DepmergeContext) -> None:
    """Register `depmerge resolve` as a git mergetool in this repository.

    The tool name is taken from the `merge_tool` setting, so `start` and
    `continue` pick it up without further configuration.
    """
    repo_root = ctx.require_repo_root()
    tool = ctx.config.merge_tool
    ctx.git.set_config(repo_root, f"mergetool.{tool}.cmd", RESOLVE_COMMAND)
    ctx.git.set_config(repo_root, f"mergetool.{tool}.trustExitCode", "true")
    user_output(f"Installed mergetool '{tool}' in {repo_root}")
