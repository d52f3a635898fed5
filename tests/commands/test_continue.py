"""Tests for the continue command using fakes."""

from collections.abc import Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

from depmerge.cli.cli import cli
from depmerge.cli.config import LoadedConfig
from depmerge.core.build.fake import FakeBuild
from depmerge.core.context import DepmergeContext
from depmerge.core.git.fake import FakeGit
from depmerge.core.orchestrator import merge_candidates
from depmerge.core.state import Candidates, StateStore, WorkflowState


def _store_with_run(repo: Path, current: str | None, succeeded: list[str]) -> StateStore:
    store = StateStore(repo / ".depmerge-state.json")
    store.initialize(
        WorkflowState(
            starting_commit="abc123",
            starting_branch="main",
            integration_branch="renovate-2024-01-15",
            candidates=Candidates(mergeable=["a", "b", "c"]),
            current_candidate=current,
            succeeded=succeeded,
        )
    )
    return store


def test_continue_resumes_at_current_candidate(tmp_path: Path) -> None:
    """The interrupted candidate is retried, earlier ones are not merged again."""
    store = _store_with_run(tmp_path, current="b", succeeded=["a"])
    git = FakeGit(current_branch="renovate-2024-01-15")
    ctx = DepmergeContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.merged_refs == ["origin/b", "origin/c"]
    state = store.load()
    assert state.succeeded == ["a", "b", "c"]
    assert state.current_candidate is None
    assert state.is_finished()


def test_continue_discards_unfinished_merge_first(tmp_path: Path) -> None:
    _store_with_run(tmp_path, current="b", succeeded=["a"])
    git = FakeGit(merge_in_progress=True)
    ctx = DepmergeContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Discarding the unfinished merge of b" in result.output
    assert len(git.aborted_merges) == 1
    assert git.merged_refs == ["origin/b", "origin/c"]


def test_continue_without_current_candidate_fails(tmp_path: Path) -> None:
    store = _store_with_run(tmp_path, current=None, succeeded=[])
    git = FakeGit()
    ctx = DepmergeContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 1
    assert "no current candidate to continue from" in result.output
    assert git.merged_refs == []
    assert store.load().succeeded == []


def test_continue_without_run_fails(tmp_path: Path) -> None:
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: No run in progress" in result.output


BASE_COMMIT = "3333333333333333333333333333333333333333"


class _InterruptedBuild(FakeBuild):
    def run(self, repo_root: Path, command: Sequence[str]) -> bool:
        raise KeyboardInterrupt


def test_continue_rebuilds_candidate_interrupted_during_build(tmp_path: Path) -> None:
    """The merge commit of an unvalidated candidate is undone before the retry."""
    store = _store_with_run(tmp_path, current=None, succeeded=[])
    git = FakeGit(
        current_branch="renovate-2024-01-15",
        current_commit=BASE_COMMIT,
        conflicting_refs={"origin/b"},
    )
    interrupted_ctx = DepmergeContext.for_test(git=git, build=_InterruptedBuild(), cwd=tmp_path)
    with pytest.raises(KeyboardInterrupt):
        merge_candidates(interrupted_ctx, tmp_path, store, ["a", "b", "c"], LoadedConfig())
    assert store.load().current_base_commit == BASE_COMMIT
    assert git.is_merge_in_progress(tmp_path) is False

    build = FakeBuild(success=False)
    ctx = DepmergeContext.for_test(git=git, build=build, cwd=tmp_path)
    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.reset_refs == [BASE_COMMIT, BASE_COMMIT]
    assert len(build.run_calls) == 1
    state = store.load()
    assert state.succeeded == ["a", "c"]
    assert state.failed == ["b"]


def test_continue_skips_candidate_with_recorded_outcome(tmp_path: Path) -> None:
    store = StateStore(tmp_path / ".depmerge-state.json")
    store.initialize(
        WorkflowState(
            starting_commit="abc123",
            starting_branch="main",
            integration_branch="renovate-2024-01-15",
            candidates=Candidates(mergeable=["a", "b", "c"]),
            current_candidate="b",
            current_base_commit=BASE_COMMIT,
            succeeded=["a", "b"],
        )
    )
    git = FakeGit(current_branch="renovate-2024-01-15")
    ctx = DepmergeContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["continue"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.reset_refs == []
    assert git.merged_refs == ["origin/c"]
    assert store.load().succeeded == ["a", "b", "c"]
