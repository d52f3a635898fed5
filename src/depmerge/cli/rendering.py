"""Human-readable rendering of candidates, merge results and run status."""

import click
from rich.console import Console
from rich.table import Table

from depmerge.cli.json_schemas import RunStatus
from depmerge.cli.output import user_output
from depmerge.core.orchestrator import CandidateOutcome, CandidateResult
from depmerge.core.state import Candidates

_OUTCOME_STYLES = {
    CandidateOutcome.MERGED: "green",
    CandidateOutcome.RESOLVED: "cyan",
    CandidateOutcome.ABANDONED: "red",
}


def _stderr_console() -> Console:
    return Console(stderr=True, highlight=False)


def render_candidates(candidates: Candidates) -> None:
    """Print the partitioned candidates."""
    if candidates.ci_failing:
        user_output(click.style("Skipping (CI failing):", fg="yellow"))
        for branch in candidates.ci_failing:
            user_output(f"  {branch}")
    if not candidates.mergeable:
        user_output("No mergeable candidates found.")
        return
    user_output(click.style("Candidates to merge:", bold=True))
    for branch in candidates.mergeable:
        user_output(f"  {branch}")


def render_results(results: list[CandidateResult]) -> None:
    """Print one line per attempted candidate followed by totals."""
    for result in results:
        label = click.style(f"{result.outcome.value:<10}", fg=_OUTCOME_STYLES[result.outcome])
        line = f"  {label} {result.candidate}"
        if result.reason is not None:
            line += f" ({result.reason})"
        user_output(line)

    merged = sum(1 for r in results if r.outcome is not CandidateOutcome.ABANDONED)
    abandoned = len(results) - merged
    user_output(f"Merged {merged}, abandoned {abandoned}.")


def render_status(status: RunStatus) -> None:
    """Print a run's status as a table of candidates."""
    console = _stderr_console()
    console.print(f"Integration branch: [bold]{status.integration_branch}[/bold]")
    console.print(f"Started from: {status.starting_branch} ({status.starting_commit[:12]})")
    console.print(f"Current candidate: {status.current_candidate or 'NONE'}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Candidate")
    table.add_column("State")
    failed = set(status.failed)
    succeeded = set(status.succeeded)
    for branch in status.mergeable:
        if branch in succeeded:
            state = "[green]succeeded[/green]"
        elif branch in failed:
            state = "[red]failed[/red]"
        elif branch == status.current_candidate:
            state = "[yellow]in progress[/yellow]"
        else:
            state = "pending"
        table.add_row(branch, state)
    for branch in status.ci_failing:
        table.add_row(branch, "[dim]skipped (CI failing)[/dim]")
    console.print(table)

    if status.finished:
        console.print("Run finished.")
