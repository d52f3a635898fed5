"""Fake GitHub operations for testing."""

from pathlib import Path

from depmerge.core.github.abc import GitHub
from depmerge.core.github.types import PullRequestInfo


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, *, prs: list[PullRequestInfo] | None = None) -> None:
        """Create FakeGitHub with the pull requests list_open_prs() returns.

        Args:
            prs: Open pull requests, in the order they should be listed
        """
        self._prs = list(prs or [])
        self._list_calls: list[Path] = []

    @property
    def list_calls(self) -> list[Path]:
        """Repository roots passed to list_open_prs(), for test assertions."""
        return list(self._list_calls)

    def list_open_prs(self, repo_root: Path) -> list[PullRequestInfo]:
        """Return the configured pull requests."""
        self._list_calls.append(repo_root)
        return list(self._prs)
