"""``contractorcli cartographer`` commands."""

from __future__ import annotations

import click

from contractorcli.commands.common import CLIState, pass_state, resolve_uri
from contractorcli.resources import catalog

CARTOGRAPHER_DETAIL = """Identifier:    {{ identifier }}
Message:       {{ message }}
Foundation:    {{ foundation | extract_id }}
Last Checkin:  {{ last_checkin }}
Info Map:      {{ info_map }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

CARTOGRAPHER_HEADER = ["Identifier", "Message", "Foundation", "Last Checkin", "Created", "Updated"]
CARTOGRAPHER_ROW = (
    "{{ id }}\t{{ message }}\t{{ foundation | extract_id }}\t{{ last_checkin }}\t{{ created }}\t{{ updated }}"
)


@click.group("cartographer")
def cartographer() -> None:
    """Work with Cartographer check-ins."""


@cartographer.command("list")
@pass_state
def cartographer_list(state: CLIState) -> None:
    """List Cartographer entries."""
    items = state.contractor.accessor(catalog.CARTOGRAPHER).list()
    state.renderer.list(items, CARTOGRAPHER_HEADER, CARTOGRAPHER_ROW)


@cartographer.command("get")
@click.argument("identifier")
@pass_state
def cartographer_get(state: CLIState, identifier: str) -> None:
    """Get Cartographer entry."""
    resource = state.contractor.accessor(catalog.CARTOGRAPHER).get(identifier)
    state.renderer.detail(resource, CARTOGRAPHER_DETAIL)


@cartographer.command("assign")
@click.argument("identifier")
@click.option("--foundation", "-f", required=True, help="Foundation to assign.")
@pass_state
def cartographer_assign(state: CLIState, identifier: str, foundation: str) -> None:
    """Assign Foundation to Cartographer."""
    resource = state.contractor.accessor(catalog.CARTOGRAPHER).get(identifier)
    resource.call("assign", foundation=resolve_uri(state, catalog.FOUNDATION, foundation))
    state.renderer.message(f"Assigned {foundation} to {identifier}")
