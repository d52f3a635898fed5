"""Sequential merge of candidate branches into the integration branch.

Each candidate moves through Attempting -> Merged, or Attempting ->
ConflictResolving -> Resolved/Abandoned. The state file is rewritten before
every git side effect that belongs to a candidate, so an interrupted run can
be resumed from the candidate it was working on.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from depmerge.cli.config import LoadedConfig
from depmerge.core.context import DepmergeContext
from depmerge.core.errors import ConflictUnresolved
from depmerge.core.state import StateStore

logger = logging.getLogger(__name__)


class CandidateOutcome(Enum):
    MERGED = "merged"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class CandidateResult:
    candidate: str
    outcome: CandidateOutcome
    reason: str | None = None


def find_lock_files(root: Path, names: Iterable[str]) -> list[Path]:
    """Find lock files with any of the given names below root, skipping .git.

    Returns paths relative to root, sorted for a stable order.
    """
    wanted = set(names)
    found: list[Path] = []
    for path in root.rglob("*"):
        if path.name not in wanted or not path.is_file():
            continue
        relative = path.relative_to(root)
        if ".git" in relative.parts:
            continue
        found.append(relative)
    return sorted(found)


def _resolve_conflicts(
    ctx: DepmergeContext, repo_root: Path, candidate: str, settings: LoadedConfig
) -> None:
    if not ctx.git.run_mergetool(repo_root, settings.merge_tool):
        raise ConflictUnresolved(candidate, "merge tool did not resolve the conflicts")

    # Lock files are regenerated by the build, so take the candidate's copy.
    for lock_file in find_lock_files(repo_root, settings.lock_files):
        logger.debug("Taking incoming %s", lock_file)
        ctx.git.checkout_theirs(repo_root, lock_file)
        ctx.git.add(repo_root, lock_file)

    if not ctx.git.continue_merge(repo_root):
        raise ConflictUnresolved(candidate, "could not conclude the merge")

    if not ctx.build.run(repo_root, settings.build_command):
        raise ConflictUnresolved(candidate, f"'{' '.join(settings.build_command)}' failed")


def _abandon(ctx: DepmergeContext, repo_root: Path, pre_merge_commit: str) -> None:
    if ctx.git.is_merge_in_progress(repo_root):
        ctx.git.abort_merge(repo_root)
    else:
        # The merge commit was already created before validation failed.
        ctx.git.reset_hard(repo_root, pre_merge_commit)


def _merge_one(
    ctx: DepmergeContext, repo_root: Path, store: StateStore, candidate: str, settings: LoadedConfig
) -> CandidateResult:
    pre_merge_commit = ctx.git.get_current_commit(repo_root)
    store.mutate(lambda state: state.with_current(candidate, pre_merge_commit))

    ref = f"{settings.remote}/{candidate}"
    logger.debug("Merging %s", ref)
    if ctx.git.merge(repo_root, ref):
        store.mutate(lambda state: state.with_success(candidate))
        return CandidateResult(candidate, CandidateOutcome.MERGED)

    try:
        _resolve_conflicts(ctx, repo_root, candidate, settings)
    except ConflictUnresolved as e:
        logger.debug("Abandoning %s: %s", candidate, e.reason)
        _abandon(ctx, repo_root, pre_merge_commit)
        store.mutate(lambda state: state.with_failure(candidate))
        return CandidateResult(candidate, CandidateOutcome.ABANDONED, e.reason)

    store.mutate(lambda state: state.with_success(candidate))
    return CandidateResult(candidate, CandidateOutcome.RESOLVED)


def merge_candidates(
    ctx: DepmergeContext,
    repo_root: Path,
    store: StateStore,
    candidates: list[str],
    settings: LoadedConfig,
) -> list[CandidateResult]:
    """Merge each candidate in order into the currently checked out branch.

    A candidate whose conflicts cannot be resolved is recorded as failed and
    the loop moves on. Any other error propagates and leaves the state file
    pointing at the candidate being processed, so `continue` retries it.

    Args:
        ctx: Context providing git and build access
        repo_root: Repository to operate on
        store: State store of the run
        candidates: Branch names to merge, in order
        settings: Remote, merge tool, lock files and build command to use

    Returns:
        One result per candidate, in order
    """
    results = []
    for candidate in candidates:
        results.append(_merge_one(ctx, repo_root, store, candidate, settings))

    store.mutate(lambda state: state.with_current(None))
    return results
