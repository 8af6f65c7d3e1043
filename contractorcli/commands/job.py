"""``contractorcli job`` commands for Foundation and Structure jobs."""

from __future__ import annotations

import click

from contractorcli.cinp import uri as cinp_uri
from contractorcli.commands.common import CLIState, pass_state
from contractorcli.core.exceptions import NotFoundError
from contractorcli.resources import catalog
from contractorcli.resources.binding import Resource
from contractorcli.resources.kinds import ResourceKind

JOB_STATE_TEMPLATE = """Variables: {{ variables }}
Script State: {{ state.state }}
Script Line No: {{ state.cur_line }}
-- Script --
{{ state.script }}
"""


def _job_detail(target_label: str, target_field: str) -> str:
    return (
        "Id:          {{ id }}\n"
        "Site:        {{ site }}\n"
        f"{(target_label + ':').ljust(13)}{{{{ {target_field} | extract_id }}}}\n"
        "Script:      {{ script_name }}\n"
        "State:       {{ state }}\n"
        "Status:      {{ status }}\n"
        "Progress:    {{ progress }}\n"
        "Message:     {{ message }}\n"
        "CanStart:    {{ can_start }}\n"
        "Created:     {{ created }}\n"
        "Updated:     {{ updated }}\n"
    )


FOUNDATION_JOB_DETAIL = _job_detail("Foundation", "foundation")
STRUCTURE_JOB_DETAIL = _job_detail("Structure", "structure")


def _job_row(target_field: str) -> str:
    return (
        "{{ id }}\t{{ " + target_field + " | extract_id }}\t{{ state }}\t{{ status }}"
        "\t{{ message }}\t{{ script_name }}\t{{ created }}\t{{ updated }}"
    )


def show_job_state(state: CLIState, job: Resource) -> None:
    """Render the job runner's variables and script position."""
    values = {
        "variables": job.call("jobRunnerVariables"),
        "state": job.call("jobRunnerState") or {},
    }
    state.renderer.detail(values, JOB_STATE_TEMPLATE)


def current_job(state: CLIState, owner: Resource, job_kind: ResourceKind) -> Resource:
    """The job currently attached to a Foundation or Structure."""
    job_uri = owner.call("getJob")
    if not job_uri:
        raise NotFoundError(f"No Job for {owner.kind.name} {owner.id}")
    # getJob may answer with the base job model, so look it up by id
    return state.contractor.accessor(job_kind).get(cinp_uri.extract_id(job_uri))


@click.group("job")
def job() -> None:
    """Work with Jobs."""


def _build_job_group(name: str, job_kind: ResourceKind, target_label: str, target_field: str) -> click.Group:
    detail = _job_detail(target_label, target_field)
    header = ["Id", target_label, "State", "Status", "Message", "Script", "Created", "Updated"]
    row = _job_row(target_field)

    @click.group(name, help=f"Work with {target_label} Jobs.")
    def group() -> None:
        pass

    @group.command("list", help=f"List {target_label} Jobs.")
    @pass_state
    def job_list(state: CLIState) -> None:
        state.renderer.list(state.contractor.accessor(job_kind).list(), header, row)

    @group.command("get", help=f"Get {target_label} Job.")
    @click.argument("job_id", type=int)
    @pass_state
    def job_get(state: CLIState, job_id: int) -> None:
        state.renderer.detail(state.contractor.accessor(job_kind).get(job_id), detail)

    @group.command("state", help=f"Show {target_label} Job runner state.")
    @click.argument("job_id", type=int)
    @pass_state
    def job_state(state: CLIState, job_id: int) -> None:
        show_job_state(state, state.contractor.accessor(job_kind).get(job_id))

    for action in ("pause", "resume", "reset", "rollback"):
        _add_action_command(group, job_kind, target_label, action)

    return group


def _add_action_command(group: click.Group, job_kind: ResourceKind, target_label: str, action: str) -> None:
    @group.command(action, help=f"{action.capitalize()} {target_label} Job.")
    @click.argument("job_id", type=int)
    @pass_state
    def job_action(state: CLIState, job_id: int) -> None:
        state.contractor.accessor(job_kind).get(job_id).call(action)
        state.renderer.message(f"Job {job_id}: {action} requested")


job.add_command(_build_job_group("foundation", catalog.FOUNDATION_JOB, "Foundation", "foundation"))
job.add_command(_build_job_group("structure", catalog.STRUCTURE_JOB, "Structure", "structure"))
