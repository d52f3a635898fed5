"""Selection of candidate branches from open pull requests."""

import logging

from depmerge.core.github.parsing import has_failing_checks
from depmerge.core.github.types import PullRequestInfo
from depmerge.core.state import Candidates

logger = logging.getLogger(__name__)


def partition_candidates(prs: list[PullRequestInfo], author: str) -> Candidates:
    """Split the author's pull requests into CI-failing and mergeable branches.

    Pull requests by other authors are ignored. Order is preserved within each
    partition; a branch with no checks at all is mergeable.
    """
    ci_failing: list[str] = []
    mergeable: list[str] = []
    for pr in prs:
        if pr.author != author:
            continue
        if has_failing_checks(pr):
            logger.debug("PR #%d (%s) has failing checks", pr.number, pr.head_ref_name)
            ci_failing.append(pr.head_ref_name)
        else:
            mergeable.append(pr.head_ref_name)
    return Candidates(ci_failing=ci_failing, mergeable=mergeable)
