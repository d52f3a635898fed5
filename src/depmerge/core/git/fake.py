"""Fake git operations for testing.

FakeGit is an in-memory implementation of the Git interface. It keeps just
enough state (current branch, current commit, whether a merge is in progress)
for the orchestrator's control flow, and records every mutating call so tests
can assert on exactly what would have happened in a real repository.
"""

from pathlib import Path

from depmerge.core.errors import ExternalToolFailure
from depmerge.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    - Configuration is provided via constructor (conflicts, failing tools)
    - Mutating operations update the in-memory branch/commit/merge state
    - Read-only properties expose recorded calls for test assertions

    Examples:
        # A batch where the second candidate conflicts and cannot be resolved
        >>> git = FakeGit(
        ...     current_branch="main",
        ...     conflicting_refs={"origin/b"},
        ...     unresolvable_refs={"origin/b"},
        ... )
        >>> git.merge(Path("/repo"), "origin/a")
        True
        >>> git.merge(Path("/repo"), "origin/b")
        False
    """

    def __init__(
        self,
        *,
        repository_root: Path | None = None,
        current_branch: str | None = "main",
        current_commit: str = "0000000000000000000000000000000000000000",
        existing_branches: set[str] | None = None,
        conflicting_refs: set[str] | None = None,
        unresolvable_refs: set[str] | None = None,
        failing_continue_refs: set[str] | None = None,
        merge_in_progress: bool = False,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repository_root: Value returned by get_repository_root (defaults to cwd)
            current_branch: Branch checked out initially (None for detached HEAD)
            current_commit: SHA returned by get_current_commit
            existing_branches: Local branches known to exist besides current_branch
            conflicting_refs: Refs whose merge stops on conflicts
            unresolvable_refs: Refs whose conflicts the merge tool fails to resolve
            failing_continue_refs: Refs whose `merge --continue` fails
            merge_in_progress: Whether a merge is already in progress
        """
        self._repository_root = repository_root
        self._current_branch = current_branch
        self._current_commit = current_commit
        self._branches = set(existing_branches or set())
        if current_branch is not None:
            self._branches.add(current_branch)
        self._conflicting_refs = conflicting_refs or set()
        self._unresolvable_refs = unresolvable_refs or set()
        self._failing_continue_refs = failing_continue_refs or set()
        self._merge_in_progress = merge_in_progress
        self._pending_ref: str | None = None

        self._fetched_remotes: list[str] = []
        self._discard_count = 0
        self._switched_branches: list[str] = []
        self._created_branches: list[str] = []
        self._deleted_branches: list[str] = []
        self._reset_refs: list[str] = []
        self._merged_refs: list[str] = []
        self._aborted_merges: list[str | None] = []
        self._mergetool_calls: list[tuple[str | None, str]] = []
        self._continued_merges: list[str | None] = []
        self._checked_out_theirs: list[Path] = []
        self._added_paths: list[Path] = []
        self._config: dict[str, str] = {}

    def get_repository_root(self, cwd: Path) -> Path:
        """Return the configured repository root, or cwd."""
        return self._repository_root if self._repository_root is not None else cwd

    def get_current_commit(self, cwd: Path) -> str:
        """Return the configured current commit."""
        return self._current_commit

    def get_current_branch(self, cwd: Path) -> str | None:
        """Return the branch currently checked out in the fake."""
        return self._current_branch

    def fetch(self, cwd: Path, remote: str) -> None:
        """Record fetch call."""
        self._fetched_remotes.append(remote)

    def discard_changes(self, cwd: Path) -> None:
        """Record discard call."""
        self._discard_count += 1

    def switch_branch(self, cwd: Path, branch: str) -> None:
        """Switch to branch, failing like git if it does not exist."""
        if branch not in self._branches:
            raise ExternalToolFailure(f"switch to branch '{branch}'")
        self._current_branch = branch
        self._switched_branches.append(branch)

    def create_branch_and_switch(self, cwd: Path, branch: str) -> None:
        """Create branch and switch to it, failing like git if it exists."""
        if branch in self._branches:
            raise ExternalToolFailure(f"create branch '{branch}'")
        self._branches.add(branch)
        self._current_branch = branch
        self._created_branches.append(branch)

    def reset_hard(self, cwd: Path, ref: str) -> None:
        """Record reset and move the fake HEAD."""
        self._current_commit = ref
        self._merge_in_progress = False
        self._pending_ref = None
        self._reset_refs.append(ref)

    def merge(self, cwd: Path, ref: str) -> bool:
        """Record merge; configured conflicting refs leave a merge in progress."""
        self._merged_refs.append(ref)
        if ref in self._conflicting_refs:
            self._merge_in_progress = True
            self._pending_ref = ref
            return False
        return True

    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Return whether a conflicted merge is pending in the fake."""
        return self._merge_in_progress

    def abort_merge(self, cwd: Path) -> None:
        """Abort the pending merge, failing like git if there is none."""
        if not self._merge_in_progress:
            raise ExternalToolFailure("abort merge")
        self._aborted_merges.append(self._pending_ref)
        self._merge_in_progress = False
        self._pending_ref = None

    def run_mergetool(self, cwd: Path, tool: str) -> bool:
        """Record mergetool call; succeeds unless the pending ref is unresolvable."""
        self._mergetool_calls.append((self._pending_ref, tool))
        return self._pending_ref not in self._unresolvable_refs

    def continue_merge(self, cwd: Path) -> bool:
        """Conclude the pending merge unless configured to fail."""
        if not self._merge_in_progress or self._pending_ref in self._failing_continue_refs:
            return False
        self._continued_merges.append(self._pending_ref)
        self._merge_in_progress = False
        self._pending_ref = None
        return True

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete branch, failing like git for unknown or checked-out branches."""
        if branch not in self._branches or branch == self._current_branch:
            raise ExternalToolFailure(f"delete branch '{branch}'")
        self._branches.discard(branch)
        self._deleted_branches.append(branch)

    def checkout_theirs(self, cwd: Path, path: Path) -> None:
        """Record checkout --theirs call."""
        self._checked_out_theirs.append(path)

    def add(self, cwd: Path, path: Path) -> None:
        """Record staged path."""
        self._added_paths.append(path)

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Record config value."""
        self._config[key] = value

    @property
    def fetched_remotes(self) -> list[str]:
        return list(self._fetched_remotes)

    @property
    def discard_count(self) -> int:
        return self._discard_count

    @property
    def switched_branches(self) -> list[str]:
        return list(self._switched_branches)

    @property
    def created_branches(self) -> list[str]:
        return list(self._created_branches)

    @property
    def deleted_branches(self) -> list[str]:
        return list(self._deleted_branches)

    @property
    def reset_refs(self) -> list[str]:
        return list(self._reset_refs)

    @property
    def merged_refs(self) -> list[str]:
        return list(self._merged_refs)

    @property
    def aborted_merges(self) -> list[str | None]:
        return list(self._aborted_merges)

    @property
    def mergetool_calls(self) -> list[tuple[str | None, str]]:
        return list(self._mergetool_calls)

    @property
    def continued_merges(self) -> list[str | None]:
        return list(self._continued_merges)

    @property
    def checked_out_theirs(self) -> list[Path]:
        return list(self._checked_out_theirs)

    @property
    def added_paths(self) -> list[Path]:
        return list(self._added_paths)

    @property
    def config(self) -> dict[str, str]:
        return dict(self._config)

    @property
    def branches(self) -> set[str]:
        return set(self._branches)
