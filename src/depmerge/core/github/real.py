"""Real GitHub implementation using gh CLI.

RealGitHub provides access to GitHub pull requests through the gh CLI. It
requires gh to be installed and authenticated for the repository's remote.
"""

from pathlib import Path

from depmerge.core.github.abc import GitHub
from depmerge.core.github.parsing import PR_LIST_FIELDS, parse_pr_list
from depmerge.core.github.types import PullRequestInfo
from depmerge.core.subprocess import run_subprocess_with_context


class RealGitHub(GitHub):
    """Production implementation using gh CLI."""

    def list_open_prs(self, repo_root: Path) -> list[PullRequestInfo]:
        """List open pull requests with their author, head branch and checks."""
        result = run_subprocess_with_context(
            ["gh", "pr", "list", "--state", "open", "--limit", "200", "--json", PR_LIST_FIELDS],
            operation_context="list pull requests",
            cwd=repo_root,
        )
        return parse_pr_list(result.stdout)
