"""Fake build implementation for testing."""

from collections.abc import Sequence
from pathlib import Path

from depmerge.core.build.abc import Build


class FakeBuild(Build):
    """In-memory fake that returns pre-configured build outcomes.

    Constructor Injection:
    - results: outcomes returned in order, one per run() call
    - success: outcome once results are exhausted (or when none are given)
    """

    def __init__(self, *, success: bool = True, results: list[bool] | None = None) -> None:
        self._success = success
        self._results = list(results or [])
        self._run_calls: list[tuple[Path, tuple[str, ...]]] = []

    @property
    def run_calls(self) -> list[tuple[Path, tuple[str, ...]]]:
        """Read-only access to (repo_root, command) pairs for test assertions."""
        return list(self._run_calls)

    def run(self, repo_root: Path, command: Sequence[str]) -> bool:
        """Record the call and return the next configured outcome."""
        self._run_calls.append((repo_root, tuple(command)))
        if self._results:
            return self._results.pop(0)
        return self._success
