"""Real build implementation using subprocess."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from depmerge.core.build.abc import Build
from depmerge.core.errors import ExternalToolFailure

logger = logging.getLogger(__name__)


class RealBuild(Build):
    """Production implementation that runs the build command in a subprocess.

    Output is streamed to the terminal so the operator sees compiler errors.
    """

    def run(self, repo_root: Path, command: Sequence[str]) -> bool:
        """Run the build command, returning whether it succeeded."""
        logger.debug("Running build: %s", " ".join(command))
        try:
            result = subprocess.run(list(command), cwd=repo_root, check=False)
        except FileNotFoundError as e:
            raise ExternalToolFailure(
                "run build", f"Build command not found: {command[0]}"
            ) from e
        logger.debug("Build exited with %d", result.returncode)
        return result.returncode == 0
