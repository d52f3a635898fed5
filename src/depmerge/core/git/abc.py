"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
orchestrator testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.

    Operations that can legitimately fail as part of the workflow (merge,
    mergetool, merge --continue) report success as a bool. Every other
    operation raises ExternalToolFailure when git exits non-zero.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path:
        """Get the top-level directory of the repository containing cwd."""
        ...

    @abstractmethod
    def get_current_commit(self, cwd: Path) -> str:
        """Get the full SHA of HEAD."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None when HEAD is detached."""
        ...

    @abstractmethod
    def fetch(self, cwd: Path, remote: str) -> None:
        """Fetch all branches from a remote."""
        ...

    @abstractmethod
    def discard_changes(self, cwd: Path) -> None:
        """Discard uncommitted changes to tracked files in the working tree."""
        ...

    @abstractmethod
    def switch_branch(self, cwd: Path, branch: str) -> None:
        """Switch to an existing branch."""
        ...

    @abstractmethod
    def create_branch_and_switch(self, cwd: Path, branch: str) -> None:
        """Create a new branch at HEAD and switch to it."""
        ...

    @abstractmethod
    def reset_hard(self, cwd: Path, ref: str) -> None:
        """Hard-reset the current branch and working tree to ref."""
        ...

    @abstractmethod
    def merge(self, cwd: Path, ref: str) -> bool:
        """Merge ref into the current branch without prompting for a message.

        Returns:
            True if the merge completed, False if it stopped (usually on conflicts)
        """
        ...

    @abstractmethod
    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Check whether a merge is waiting to be concluded or aborted."""
        ...

    @abstractmethod
    def abort_merge(self, cwd: Path) -> None:
        """Abort the in-progress merge, restoring the pre-merge state."""
        ...

    @abstractmethod
    def run_mergetool(self, cwd: Path, tool: str) -> bool:
        """Run `git mergetool` interactively with the given tool.

        This call blocks on the operator; stdin/stdout stay attached to the terminal.

        Returns:
            True if every conflict was resolved
        """
        ...

    @abstractmethod
    def continue_merge(self, cwd: Path) -> bool:
        """Conclude the in-progress merge without opening an editor.

        Returns:
            True if the merge commit was created
        """
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            cwd: Working directory to run command in
            branch: Name of the branch to delete
            force: Use -D (force delete) instead of -d
        """
        ...

    @abstractmethod
    def checkout_theirs(self, cwd: Path, path: Path) -> None:
        """Take the incoming side's content for a conflicted path."""
        ...

    @abstractmethod
    def add(self, cwd: Path, path: Path) -> None:
        """Stage a path."""
        ...

    @abstractmethod
    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Set a repository-local git config value."""
        ...
