"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from depmerge.cli.config import LoadedConfig, load_config
from depmerge.core.build.abc import Build
from depmerge.core.build.real import RealBuild
from depmerge.core.errors import DepmergeError, ExternalToolFailure
from depmerge.core.git.abc import Git
from depmerge.core.git.real import RealGit
from depmerge.core.github.abc import GitHub
from depmerge.core.github.real import RealGitHub
from depmerge.core.state import StateStore
from depmerge.core.time.abc import Time
from depmerge.core.time.real import RealTime


@dataclass(frozen=True)
class DepmergeContext:
    """Immutable context holding all dependencies for depmerge operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    Note: repo_root is None when the CLI runs outside a git repository. Only
    `resolve` works there; every other command requires a repository.
    """

    git: Git
    github: GitHub
    build: Build
    time: Time
    cwd: Path  # Current working directory at CLI invocation
    repo_root: Path | None
    config: LoadedConfig

    def require_repo_root(self) -> Path:
        """Return the repository root, or fail when not inside a repository.

        Raises:
            DepmergeError: If the CLI was not invoked inside a git repository
        """
        if self.repo_root is None:
            raise DepmergeError(f"Not inside a git repository: {self.cwd}")
        return self.repo_root

    def state_store(self) -> StateStore:
        """The store for the repository's workflow state file."""
        return StateStore(self.require_repo_root() / self.config.state_file)

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        build: Build | None = None,
        time: Time | None = None,
        cwd: Path | None = None,
        repo_root: Path | None = None,
        config: LoadedConfig | None = None,
    ) -> "DepmergeContext":
        """Create test context with optional pre-configured integration classes.

        Any integration not given is replaced by an empty fake. repo_root
        defaults to cwd, and cwd defaults to a sentinel path that does not exist
        on disk, so tests touching the state file must pass a real directory.

        Example:
            >>> git = FakeGit(current_branch="main", conflicting_refs={"origin/b"})
            >>> ctx = DepmergeContext.for_test(git=git, cwd=tmp_path)
        """
        from depmerge.core.build.fake import FakeBuild
        from depmerge.core.git.fake import FakeGit
        from depmerge.core.github.fake import FakeGitHub
        from depmerge.core.time.fake import FakeTime

        resolved_cwd = cwd if cwd is not None else Path("/test/default/cwd")
        return DepmergeContext(
            git=git if git is not None else FakeGit(),
            github=github if github is not None else FakeGitHub(),
            build=build if build is not None else FakeBuild(),
            time=time if time is not None else FakeTime(),
            cwd=resolved_cwd,
            repo_root=repo_root if repo_root is not None else resolved_cwd,
            config=config if config is not None else LoadedConfig(),
        )


def create_context() -> DepmergeContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ConfigError: If the repository's .depmerge/config.toml is malformed
    """
    cwd = Path.cwd()
    git: Git = RealGit()

    # Outside a repository only `resolve` is usable, so a missing repo is not an error here.
    try:
        repo_root: Path | None = git.get_repository_root(cwd)
    except ExternalToolFailure:
        repo_root = None

    config = load_config(repo_root) if repo_root is not None else LoadedConfig()

    return DepmergeContext(
        git=git,
        github=RealGitHub(),
        build=RealBuild(),
        time=RealTime(),
        cwd=cwd,
        repo_root=repo_root,
        config=config,
    )
