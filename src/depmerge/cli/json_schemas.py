"""Pydantic models for JSON output schemas.

These models define the structure `depmerge status --json` prints, so scripts
consuming it get a stable, validated shape.
"""

from pydantic import BaseModel, ConfigDict

from depmerge.core.state import WorkflowState


class RunStatus(BaseModel):
    """Snapshot of a run recorded in the state file.

    Attributes:
        starting_branch: Branch checked out when the run started
        starting_commit: Commit checked out when the run started
        integration_branch: Branch the candidates are merged into
        current_candidate: Candidate being processed (None when not mid-loop)
        finished: Whether every mergeable candidate has been attempted
        ci_failing: Candidates skipped because their checks fail
        mergeable: All candidates selected for merging, in order
        succeeded: Candidates merged so far
        failed: Candidates abandoned so far
        pending: Mergeable candidates not yet attempted
    """

    model_config = ConfigDict(strict=True)

    starting_branch: str
    starting_commit: str
    integration_branch: str
    current_candidate: str | None
    finished: bool
    ci_failing: list[str]
    mergeable: list[str]
    succeeded: list[str]
    failed: list[str]
    pending: list[str]

    @staticmethod
    def from_state(state: WorkflowState) -> "RunStatus":
        return RunStatus(
            starting_branch=state.starting_branch,
            starting_commit=state.starting_commit,
            integration_branch=state.integration_branch,
            current_candidate=state.current_candidate,
            finished=state.is_finished(),
            ci_failing=list(state.candidates.ci_failing),
            mergeable=list(state.candidates.mergeable),
            succeeded=list(state.succeeded),
            failed=list(state.failed),
            pending=state.pending_candidates(),
        )


class StatusResponse(BaseModel):
    """JSON response schema for the `depmerge status --json` command.

    Attributes:
        in_progress: Whether a state file exists
        run: Details of the run, None when no run is in progress
    """

    model_config = ConfigDict(strict=True)

    in_progress: bool
    run: RunStatus | None
