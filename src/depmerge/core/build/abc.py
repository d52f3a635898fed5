"""Build/validation operations abstraction for testing."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path


class Build(ABC):
    """Abstract interface for running the project's build/check step."""

    @abstractmethod
    def run(self, repo_root: Path, command: Sequence[str]) -> bool:
        """Run the build command in the repository.

        Args:
            repo_root: Directory to run the command in
            command: Command and arguments (e.g., ["cargo", "build"])

        Returns:
            True if the command exited with status 0
        """
        ...
