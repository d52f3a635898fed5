"""Start command implementation."""

import logging

import click

from depmerge.cli.errors import handle_errors
from depmerge.cli.output import user_output
from depmerge.cli.rendering import render_candidates, render_results
from depmerge.core.candidates import partition_candidates
from depmerge.core.context import DepmergeContext
from depmerge.core.errors import DepmergeError, StateError
from depmerge.core.orchestrator import merge_candidates
from depmerge.core.state import WorkflowState

logger = logging.getLogger(__name__)


@click.command("start")
@click.option(
    "--dry-run",
    is_flag=True,
    help="List the candidates that would be merged without touching the repository.",
)
@click.pass_obj
@handle_errors
def start_cmd(ctx: DepmergeContext, dry_run: bool) -> None:
    """Merge all open dependency-update PRs into a new dated branch.

    PRs with failing checks are skipped. Conflicts in manifests are resolved
    with the configured merge tool; a candidate that cannot be resolved or
    does not build afterwards is abandoned and the run moves on.
    """
    repo_root = ctx.require_repo_root()
    config = ctx.config
    store = ctx.state_store()

    if store.exists():
        raise StateError(
            f"A run is already in progress ({store.path}). "
            "Use 'depmerge continue' to resume it or 'depmerge abort' to discard it."
        )

    if not dry_run:
        ctx.git.fetch(repo_root, config.remote)
    candidates = partition_candidates(ctx.github.list_open_prs(repo_root), config.author)
    render_candidates(candidates)
    if dry_run:
        return

    starting_branch = ctx.git.get_current_branch(repo_root)
    if starting_branch is None:
        raise DepmergeError("HEAD is detached. Check out a branch before starting a run.")
    starting_commit = ctx.git.get_current_commit(repo_root)

    integration_branch = f"{config.branch_prefix}-{ctx.time.now():%Y-%m-%d}"
    ctx.git.create_branch_and_switch(repo_root, integration_branch)
    user_output(f"Created branch {click.style(integration_branch, fg='cyan')}")

    store.initialize(
        WorkflowState(
            starting_commit=starting_commit,
            starting_branch=starting_branch,
            integration_branch=integration_branch,
            candidates=candidates,
        )
    )
    logger.debug("Starting run from %s (%s)", starting_branch, starting_commit)

    results = merge_candidates(ctx, repo_root, store, list(candidates.mergeable), config)
    render_results(results)
