"""Parsing of gh CLI JSON output."""

import json
from typing import Any

from depmerge.core.errors import ExternalToolFailure
from depmerge.core.github.types import CheckInfo, PullRequestInfo

PR_LIST_FIELDS = "number,author,headRefName,statusCheckRollup"

# Check run conclusions and commit status states that count as a CI failure.
FAILING_CONCLUSIONS = frozenset({"FAILURE", "TIMED_OUT", "STARTUP_FAILURE", "ACTION_REQUIRED"})
FAILING_STATES = frozenset({"FAILURE", "ERROR"})


def _parse_check(raw: dict[str, Any]) -> CheckInfo:
    return CheckInfo(
        name=raw.get("name") or raw.get("context"),
        state=raw.get("state"),
        status=raw.get("status"),
        conclusion=raw.get("conclusion"),
    )


def parse_pr_list(json_str: str) -> list[PullRequestInfo]:
    """Parse `gh pr list --json number,author,headRefName,statusCheckRollup` output.

    Raises:
        ExternalToolFailure: If the output is not the expected JSON shape
    """
    try:
        data = json.loads(json_str)
        return [
            PullRequestInfo(
                number=pr["number"],
                author=pr["author"]["login"],
                head_ref_name=pr["headRefName"],
                checks=tuple(_parse_check(check) for check in pr.get("statusCheckRollup") or []),
            )
            for pr in data
        ]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise ExternalToolFailure(
            "list pull requests", f"Unexpected output from gh pr list: {e}"
        ) from e


def is_check_failing(check: CheckInfo) -> bool:
    """Whether a single check entry reports a failure."""
    if check.state is not None and check.state.upper() in FAILING_STATES:
        return True
    return check.conclusion is not None and check.conclusion.upper() in FAILING_CONCLUSIONS


def has_failing_checks(pr: PullRequestInfo) -> bool:
    """Whether any check on the PR is failing. Pending checks do not count."""
    return any(is_check_failing(check) for check in pr.checks)
