"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from depmerge.core.github.types import PullRequestInfo


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def list_open_prs(self, repo_root: Path) -> list[PullRequestInfo]:
        """List open pull requests with their author, head branch and checks.

        Args:
            repo_root: Repository root directory

        Returns:
            Open pull requests in the order GitHub returns them

        Raises:
            ExternalToolFailure: If gh fails or its output cannot be parsed
        """
        ...
