"""Tests for FakeGit test infrastructure.

These tests verify that FakeGit behaves like git where the merge loop and the
control commands depend on it, so command tests built on it stay meaningful.
"""

from pathlib import Path

import pytest

from depmerge.core.errors import ExternalToolFailure
from depmerge.core.git.fake import FakeGit

REPO = Path("/repo")


def test_fake_git_defaults() -> None:
    git = FakeGit()

    assert git.get_current_branch(REPO) == "main"
    assert git.get_repository_root(REPO) == REPO
    assert git.is_merge_in_progress(REPO) is False
    assert git.branches == {"main"}


def test_conflicting_merge_leaves_merge_in_progress() -> None:
    git = FakeGit(conflicting_refs={"origin/b"})

    assert git.merge(REPO, "origin/a") is True
    assert git.merge(REPO, "origin/b") is False
    assert git.is_merge_in_progress(REPO) is True

    git.abort_merge(REPO)

    assert git.is_merge_in_progress(REPO) is False
    assert git.aborted_merges == ["origin/b"]


def test_abort_without_merge_fails_like_git() -> None:
    with pytest.raises(ExternalToolFailure):
        FakeGit().abort_merge(REPO)


def test_mergetool_and_continue() -> None:
    git = FakeGit(conflicting_refs={"origin/a", "origin/b"}, unresolvable_refs={"origin/b"})

    git.merge(REPO, "origin/a")
    assert git.run_mergetool(REPO, "depmerge") is True
    assert git.continue_merge(REPO) is True

    git.merge(REPO, "origin/b")
    assert git.run_mergetool(REPO, "depmerge") is False

    assert git.mergetool_calls == [("origin/a", "depmerge"), ("origin/b", "depmerge")]
    assert git.continued_merges == ["origin/a"]


def test_continue_without_merge_fails() -> None:
    assert FakeGit().continue_merge(REPO) is False


def test_branch_lifecycle() -> None:
    git = FakeGit(current_branch="main")

    git.create_branch_and_switch(REPO, "renovate-2024-01-15")
    with pytest.raises(ExternalToolFailure):
        git.delete_branch(REPO, "renovate-2024-01-15", force=True)  # checked out

    git.switch_branch(REPO, "main")
    git.delete_branch(REPO, "renovate-2024-01-15", force=True)

    assert git.created_branches == ["renovate-2024-01-15"]
    assert git.switched_branches == ["main"]
    assert git.deleted_branches == ["renovate-2024-01-15"]
    assert git.branches == {"main"}


def test_switch_to_unknown_branch_fails() -> None:
    with pytest.raises(ExternalToolFailure):
        FakeGit().switch_branch(REPO, "nope")


def test_create_existing_branch_fails() -> None:
    git = FakeGit(existing_branches={"renovate-2024-01-15"})

    with pytest.raises(ExternalToolFailure):
        git.create_branch_and_switch(REPO, "renovate-2024-01-15")


def test_reset_hard_clears_merge() -> None:
    git = FakeGit(merge_in_progress=True)

    git.reset_hard(REPO, "abc123")

    assert git.get_current_commit(REPO) == "abc123"
    assert git.is_merge_in_progress(REPO) is False
    assert git.reset_refs == ["abc123"]
