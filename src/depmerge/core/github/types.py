"""Type definitions for GitHub operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckInfo:
    """One entry of a PR's status check rollup.

    Check runs report `status`/`conclusion`; legacy commit statuses report `state`.
    """

    name: str | None
    state: str | None = None
    status: str | None = None
    conclusion: str | None = None


@dataclass(frozen=True)
class PullRequestInfo:
    """An open pull request as returned by `gh pr list`."""

    number: int
    author: str  # Login of the PR author (e.g., "renovate[bot]")
    head_ref_name: str  # Branch the PR merges from
    checks: tuple[CheckInfo, ...] = ()
