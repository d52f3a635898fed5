"""Status command implementation."""

import click

from depmerge.cli.errors import handle_errors
from depmerge.cli.json_output import emit_model
from depmerge.cli.json_schemas import RunStatus, StatusResponse
from depmerge.cli.output import user_output
from depmerge.cli.rendering import render_status
from depmerge.core.context import DepmergeContext


@click.command("status")
@click.option("--json", "as_json", is_flag=True, help="Output the status as JSON.")
@click.pass_obj
@handle_errors
def status_cmd(ctx: DepmergeContext, as_json: bool) -> None:
    """Show the progress of the current run.

    Without a run this reports "No run in progress." and exits 0.

    \b
    JSON Output (--json):
    Output schema is defined and validated by StatusResponse
    in depmerge.cli.json_schemas.
    """
    store = ctx.state_store()
    run = RunStatus.from_state(store.load()) if store.exists() else None

    if as_json:
        emit_model(StatusResponse(in_progress=run is not None, run=run))
        return

    if run is None:
        user_output("No run in progress.")
        return
    render_status(run)
