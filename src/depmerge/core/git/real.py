"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import logging
import os
import subprocess
from pathlib import Path

from depmerge.core.git.abc import Git
from depmerge.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_repository_root(self, cwd: Path) -> Path:
        """Get the top-level directory of the repository containing cwd."""
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel"],
            operation_context="find repository root",
            cwd=cwd,
        )
        return Path(result.stdout.strip())

    def get_current_commit(self, cwd: Path) -> str:
        """Get the full SHA of HEAD."""
        result = run_subprocess_with_context(
            ["git", "rev-parse", "HEAD"],
            operation_context="get current commit",
            cwd=cwd,
        )
        return result.stdout.strip()

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def fetch(self, cwd: Path, remote: str) -> None:
        """Fetch all branches from a remote."""
        run_subprocess_with_context(
            ["git", "fetch", "--quiet", remote],
            operation_context=f"fetch '{remote}'",
            cwd=cwd,
        )

    def discard_changes(self, cwd: Path) -> None:
        """Discard uncommitted changes to tracked files in the working tree."""
        run_subprocess_with_context(
            ["git", "restore", "."],
            operation_context="discard working tree changes",
            cwd=cwd,
        )

    def switch_branch(self, cwd: Path, branch: str) -> None:
        """Switch to an existing branch."""
        run_subprocess_with_context(
            ["git", "switch", branch],
            operation_context=f"switch to branch '{branch}'",
            cwd=cwd,
        )

    def create_branch_and_switch(self, cwd: Path, branch: str) -> None:
        """Create a new branch at HEAD and switch to it."""
        run_subprocess_with_context(
            ["git", "switch", "-c", branch],
            operation_context=f"create branch '{branch}'",
            cwd=cwd,
        )

    def reset_hard(self, cwd: Path, ref: str) -> None:
        """Hard-reset the current branch and working tree to ref."""
        run_subprocess_with_context(
            ["git", "reset", "--hard", ref],
            operation_context=f"reset to '{ref}'",
            cwd=cwd,
        )

    def merge(self, cwd: Path, ref: str) -> bool:
        """Merge ref into the current branch without prompting for a message."""
        result = subprocess.run(
            ["git", "merge", "--quiet", "--no-edit", ref],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            logger.debug("git merge %s exited %d: %s", ref, result.returncode, result.stdout)
        return result.returncode == 0

    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Check whether a merge is waiting to be concluded or aborted."""
        result = subprocess.run(
            ["git", "rev-parse", "-q", "--verify", "MERGE_HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def abort_merge(self, cwd: Path) -> None:
        """Abort the in-progress merge, restoring the pre-merge state."""
        run_subprocess_with_context(
            ["git", "merge", "--abort"],
            operation_context="abort merge",
            cwd=cwd,
        )

    def run_mergetool(self, cwd: Path, tool: str) -> bool:
        """Run `git mergetool` interactively with the given tool."""
        # Output is not captured: the tool may prompt the operator.
        result = subprocess.run(
            ["git", "mergetool", "--tool", tool],
            cwd=cwd,
            check=False,
        )
        return result.returncode == 0

    def continue_merge(self, cwd: Path) -> bool:
        """Conclude the in-progress merge without opening an editor."""
        result = subprocess.run(
            ["git", "merge", "--continue"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            env={**os.environ, "GIT_EDITOR": "true"},
        )
        if result.returncode != 0:
            logger.debug("git merge --continue exited %d: %s", result.returncode, result.stderr)
        return result.returncode == 0

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch."""
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch],
            operation_context=f"delete branch '{branch}'",
            cwd=cwd,
        )

    def checkout_theirs(self, cwd: Path, path: Path) -> None:
        """Take the incoming side's content for a conflicted path."""
        run_subprocess_with_context(
            ["git", "checkout", "--theirs", "--", str(path)],
            operation_context=f"check out incoming version of '{path}'",
            cwd=cwd,
        )

    def add(self, cwd: Path, path: Path) -> None:
        """Stage a path."""
        run_subprocess_with_context(
            ["git", "add", "--", str(path)],
            operation_context=f"stage '{path}'",
            cwd=cwd,
        )

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Set a repository-local git config value."""
        run_subprocess_with_context(
            ["git", "config", "--local", key, value],
            operation_context=f"set git config '{key}'",
            cwd=cwd,
        )
