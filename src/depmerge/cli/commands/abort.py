"""Abort command implementation."""

import click

from depmerge.cli.errors import handle_errors
from depmerge.cli.output import user_output
from depmerge.core.context import DepmergeContext


@click.command("abort")
@click.pass_obj
@handle_errors
def abort_cmd(ctx: DepmergeContext) -> None:
    """Discard the current run and go back to where it started.

    The integration branch is deleted, finished or not.
    """
    repo_root = ctx.require_repo_root()
    store = ctx.state_store()
    state = store.load()

    if ctx.git.is_merge_in_progress(repo_root):
        ctx.git.abort_merge(repo_root)
    ctx.git.discard_changes(repo_root)
    ctx.git.switch_branch(repo_root, state.starting_branch)
    ctx.git.delete_branch(repo_root, state.integration_branch, force=True)
    ctx.git.reset_hard(repo_root, state.starting_commit)
    store.destroy()

    user_output(
        f"Aborted. Back on {click.style(state.starting_branch, fg='cyan')} "
        f"at {state.starting_commit[:12]}"
    )
