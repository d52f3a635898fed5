"""Continue command implementation."""

import click

from depmerge.cli.errors import handle_errors
from depmerge.cli.output import user_output
from depmerge.cli.rendering import render_results
from depmerge.core.context import DepmergeContext
from depmerge.core.errors import StateError
from depmerge.core.orchestrator import merge_candidates


@click.command("continue")
@click.pass_obj
@handle_errors
def continue_cmd(ctx: DepmergeContext) -> None:
    """Resume an interrupted run at the candidate it was working on."""
    repo_root = ctx.require_repo_root()
    store = ctx.state_store()
    state = store.load()

    if state.current_candidate is None:
        raise StateError(
            "There is no current candidate to continue from. "
            "Use 'depmerge status' to inspect the run."
        )

    if ctx.git.is_merge_in_progress(repo_root):
        user_output(f"Discarding the unfinished merge of {state.current_candidate}")
        ctx.git.abort_merge(repo_root)

    # A merge commit may exist even though its build never finished.
    if state.current_base_commit is not None and not state.is_current_settled():
        ctx.git.reset_hard(repo_root, state.current_base_commit)

    results = merge_candidates(ctx, repo_root, store, state.remaining_candidates(), ctx.config)
    render_results(results)
