"""Tests for the status command."""

import json
from pathlib import Path

from click.testing import CliRunner

from depmerge.cli.cli import cli
from depmerge.core.context import DepmergeContext
from depmerge.core.state import Candidates, StateStore, WorkflowState


def _write_run(repo: Path, **overrides: object) -> None:
    fields: dict[str, object] = {
        "starting_commit": "0123456789abcdef0123456789abcdef01234567",
        "starting_branch": "main",
        "integration_branch": "renovate-2024-01-15",
        "candidates": Candidates(ci_failing=["renovate/broken"], mergeable=["a", "b", "c"]),
        "current_candidate": "b",
        "succeeded": ["a"],
    }
    fields.update(overrides)
    StateStore(repo / ".depmerge-state.json").initialize(WorkflowState.model_validate(fields))


def test_status_without_run(tmp_path: Path) -> None:
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status"], obj=ctx)

    assert result.exit_code == 0
    assert "No run in progress." in result.output


def test_status_shows_progress(tmp_path: Path) -> None:
    _write_run(tmp_path)
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Integration branch: renovate-2024-01-15" in result.output
    assert "Started from: main (0123456789ab)" in result.output
    assert "Current candidate: b" in result.output
    assert "succeeded" in result.output
    assert "in progress" in result.output
    assert "pending" in result.output
    assert "skipped (CI failing)" in result.output
    assert "Run finished" not in result.output


def test_status_of_finished_run(tmp_path: Path) -> None:
    _write_run(tmp_path, current_candidate=None, succeeded=["a", "c"], failed=["b"])
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Current candidate: NONE" in result.output
    assert "failed" in result.output
    assert "Run finished" in result.output


def test_status_json(tmp_path: Path) -> None:
    _write_run(tmp_path, failed=[])
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["in_progress"] is True
    assert data["run"] == {
        "starting_branch": "main",
        "starting_commit": "0123456789abcdef0123456789abcdef01234567",
        "integration_branch": "renovate-2024-01-15",
        "current_candidate": "b",
        "finished": False,
        "ci_failing": ["renovate/broken"],
        "mergeable": ["a", "b", "c"],
        "succeeded": ["a"],
        "failed": [],
        "pending": ["b", "c"],
    }


def test_status_json_without_run(tmp_path: Path) -> None:
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status", "--json"], obj=ctx)

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"in_progress": False, "run": None}


def test_status_with_corrupt_state_fails(tmp_path: Path) -> None:
    (tmp_path / ".depmerge-state.json").write_text("not json", encoding="utf-8")
    ctx = DepmergeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["status"], obj=ctx)

    assert result.exit_code == 1
    assert "corrupt" in result.output


def test_status_help_describes_missing_run() -> None:
    result = CliRunner().invoke(cli, ["status", "--help"], obj=DepmergeContext.for_test())

    assert result.exit_code == 0
    assert "No run in progress." in result.output
