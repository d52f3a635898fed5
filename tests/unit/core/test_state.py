"""Tests for the workflow state model and its on-disk store."""

import json
from pathlib import Path

import pytest

from depmerge.core.errors import StateError
from depmerge.core.state import Candidates, StateStore, WorkflowState


def _state(**overrides: object) -> WorkflowState:
    fields: dict[str, object] = {
        "starting_commit": "abc123",
        "starting_branch": "main",
        "integration_branch": "renovate-2024-01-15",
        "candidates": Candidates(ci_failing=["renovate/broken"], mergeable=["a", "b", "c"]),
    }
    fields.update(overrides)
    return WorkflowState.model_validate(fields)


def test_transitions_return_new_instances() -> None:
    state = _state()

    updated = state.with_current("a").with_success("a").with_current("b").with_failure("b")

    assert state.current_candidate is None
    assert state.succeeded == []
    assert updated.current_candidate == "b"
    assert updated.succeeded == ["a"]
    assert updated.failed == ["b"]


def test_remaining_candidates_includes_current() -> None:
    state = _state(current_candidate="b")

    assert state.remaining_candidates() == ["b", "c"]


def test_remaining_candidates_without_current_is_empty() -> None:
    assert _state().remaining_candidates() == []
    assert _state(current_candidate="unknown").remaining_candidates() == []


def test_pending_and_finished() -> None:
    running = _state(current_candidate="c", succeeded=["a"], failed=["b"])
    done = _state(succeeded=["a", "c"], failed=["b"])

    assert running.pending_candidates() == ["c"]
    assert not running.is_finished()
    assert done.pending_candidates() == []
    assert done.is_finished()


def test_initialize_writes_snake_case_json(tmp_path: Path) -> None:
    store = StateStore(tmp_path / ".depmerge-state.json")

    store.initialize(_state())

    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data == {
        "starting_commit": "abc123",
        "starting_branch": "main",
        "integration_branch": "renovate-2024-01-15",
        "candidates": {"ci_failing": ["renovate/broken"], "mergeable": ["a", "b", "c"]},
        "current_candidate": None,
        "current_base_commit": None,
        "succeeded": [],
        "failed": [],
    }


def test_initialize_refuses_existing_run(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.initialize(_state())

    with pytest.raises(StateError, match="already in progress"):
        store.initialize(_state())


def test_load_round_trips(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    state = _state(current_candidate="b", succeeded=["a"])
    store.initialize(state)

    assert store.load() == state


def test_load_without_run_raises(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")

    with pytest.raises(StateError, match="No run in progress"):
        store.load()


def test_load_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text('{"starting_commit": "abc"}', encoding="utf-8")

    with pytest.raises(StateError, match="corrupt"):
        StateStore(path).load()


def test_load_rejects_unknown_fields(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    data = json.loads(_state().model_dump_json())
    data["surprise"] = True
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(StateError, match="corrupt"):
        StateStore(path).load()


def test_mutate_persists_transition(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.initialize(_state())

    returned = store.mutate(lambda s: s.with_current("a"))

    assert returned.current_candidate == "a"
    assert store.load().current_candidate == "a"


def test_mutate_leaves_no_temporary_files(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.initialize(_state())

    store.mutate(lambda s: s.with_current("a"))
    store.mutate(lambda s: s.with_success("a"))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["state.json"]


def test_failed_transform_keeps_previous_state(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.initialize(_state(current_candidate="a"))

    def explode(state: WorkflowState) -> WorkflowState:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        store.mutate(explode)

    assert store.load().current_candidate == "a"


def test_destroy_removes_file(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.initialize(_state())

    store.destroy()

    assert not store.exists()
    with pytest.raises(StateError):
        store.destroy()


def test_outcomes_are_recorded_once() -> None:
    state = _state(current_candidate="a").with_success("a").with_success("a")
    state = state.with_failure("b").with_failure("b")

    assert state.succeeded == ["a"]
    assert state.failed == ["b"]


def test_remaining_candidates_skips_settled_current() -> None:
    """A candidate whose outcome was saved before the next one started is not retried."""
    succeeded = _state(current_candidate="b", succeeded=["a", "b"])
    failed = _state(current_candidate="c", failed=["c"])

    assert succeeded.is_current_settled()
    assert succeeded.remaining_candidates() == ["c"]
    assert failed.remaining_candidates() == []


def test_with_current_records_base_commit() -> None:
    state = _state().with_current("a", "def456")

    assert state.current_base_commit == "def456"
    assert state.with_current(None).current_base_commit is None
