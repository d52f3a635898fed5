"""Persisted record of an in-progress batch run.

The state file is the single source of truth for a run. Its presence means a
run is in progress; it is created by `start`, rewritten after every candidate
transition, and deleted only by `abort`. A finished run leaves the file behind
so that `status` can still report the outcome.
"""

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from depmerge.core.errors import StateError

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = ".depmerge-state.json"


class Candidates(BaseModel):
    """Candidate branches partitioned once at start."""

    model_config = ConfigDict(frozen=True)

    ci_failing: list[str] = Field(default_factory=list)
    mergeable: list[str] = Field(default_factory=list)


class WorkflowState(BaseModel):
    """Everything needed to resume, report on, or unwind a run.

    Attributes:
        starting_commit: Commit checked out when the run started (used by abort)
        starting_branch: Branch checked out when the run started (used by abort)
        integration_branch: Dated branch created by start to merge into
        candidates: Partitioned candidate branches
        current_candidate: Candidate being processed; None before the loop
            starts and after it finishes
        current_base_commit: Commit the integration branch was at before
            current_candidate was attempted (used by continue to undo it)
        succeeded: Candidates merged so far, in order
        failed: Candidates abandoned so far, in order
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    starting_commit: str
    starting_branch: str
    integration_branch: str
    candidates: Candidates
    current_candidate: str | None = None
    current_base_commit: str | None = None
    succeeded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    def with_current(
        self, candidate: str | None, base_commit: str | None = None
    ) -> "WorkflowState":
        return self.model_copy(
            update={"current_candidate": candidate, "current_base_commit": base_commit}
        )

    def with_success(self, candidate: str) -> "WorkflowState":
        if candidate in self.succeeded:
            return self
        return self.model_copy(update={"succeeded": [*self.succeeded, candidate]})

    def with_failure(self, candidate: str) -> "WorkflowState":
        if candidate in self.failed:
            return self
        return self.model_copy(update={"failed": [*self.failed, candidate]})

    def is_current_settled(self) -> bool:
        """Whether current_candidate already has a recorded outcome."""
        current = self.current_candidate
        return current is not None and (current in self.succeeded or current in self.failed)

    def remaining_candidates(self) -> list[str]:
        """Mergeable candidates from current_candidate onward.

        The current candidate is included unless its outcome was already
        recorded. Returns an empty list when no candidate has been marked
        current or the current candidate is no longer in the mergeable list.
        """
        if self.current_candidate is None:
            return []
        mergeable = self.candidates.mergeable
        if self.current_candidate not in mergeable:
            return []
        start = mergeable.index(self.current_candidate)
        if self.is_current_settled():
            start += 1
        return mergeable[start:]

    def pending_candidates(self) -> list[str]:
        """Mergeable candidates that are neither succeeded nor failed yet."""
        attempted = set(self.succeeded) | set(self.failed)
        return [c for c in self.candidates.mergeable if c not in attempted]

    def is_finished(self) -> bool:
        """Whether the merge loop ran to completion."""
        return self.current_candidate is None and not self.pending_candidates()


class StateStore:
    """Load/transform/persist access to the workflow state file.

    mutate() is the only write path after initialize(); each call performs
    exactly one complete rewrite of the file, so a transition is durable before
    the caller moves on to the next git side effect.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def initialize(self, state: WorkflowState) -> WorkflowState:
        """Persist the first state of a run.

        Raises:
            StateError: If a state file already exists (a run is in progress)
        """
        if self.exists():
            raise StateError(
                f"A run is already in progress ({self._path}). "
                "Use 'depmerge continue' to resume it or 'depmerge abort' to discard it."
            )
        self._write(state)
        logger.debug("Initialized state at %s", self._path)
        return state

    def load(self) -> WorkflowState:
        """Read the persisted state.

        Raises:
            StateError: If no run is in progress or the file is not a valid state
        """
        if not self.exists():
            raise StateError(
                f"No run in progress (no state file at {self._path}). "
                "Use 'depmerge start' to begin one."
            )
        content = self._path.read_text(encoding="utf-8")
        try:
            return WorkflowState.model_validate_json(content)
        except ValidationError as e:
            raise StateError(f"State file {self._path} is corrupt: {e}") from e

    def mutate(self, transform: Callable[[WorkflowState], WorkflowState]) -> WorkflowState:
        """Load the state, apply transform, persist and return the result."""
        next_state = transform(self.load())
        self._write(next_state)
        return next_state

    def destroy(self) -> None:
        """Delete the state file.

        Raises:
            StateError: If there is no state file
        """
        if not self.exists():
            raise StateError(f"No run in progress (no state file at {self._path})")
        self._path.unlink()
        logger.debug("Deleted state at %s", self._path)

    def _write(self, state: WorkflowState) -> None:
        content = state.model_dump_json(indent=2) + "\n"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
