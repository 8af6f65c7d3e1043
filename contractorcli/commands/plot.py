"""``contractorcli plot`` commands."""

from __future__ import annotations

from typing import Optional

import click

from contractorcli.commands.common import CLIState, apply_changes, pass_state, resolve_uri, set_fields
from contractorcli.resources import catalog

PLOT_DETAIL = """Id:            {{ id }}
Name:          {{ name }}
Corners:       {{ corners }}
Parent:        {{ parent | extract_id }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

PLOT_HEADER = ["Id", "Name", "Created", "Updated"]
PLOT_ROW = "{{ id }}\t{{ name }}\t{{ created }}\t{{ updated }}"


@click.group("plot")
def plot() -> None:
    """Work with Plots."""


@plot.command("list")
@pass_state
def plot_list(state: CLIState) -> None:
    """List Plots."""
    state.renderer.list(state.contractor.accessor(catalog.PLOT).list(), PLOT_HEADER, PLOT_ROW)


@plot.command("get")
@click.argument("plot_id")
@pass_state
def plot_get(state: CLIState, plot_id: str) -> None:
    """Get Plot."""
    state.renderer.detail(state.contractor.accessor(catalog.PLOT).get(plot_id), PLOT_DETAIL)


@plot.command("create")
@click.option("--name", "-n", required=True, help="Name of New Plot.")
@click.option("--corners", "-c", default=None, help="Corners of New Plot.")
@click.option("--parent", "-p", default=None, help="Parent of New Plot.")
@pass_state
def plot_create(state: CLIState, name: str, corners: Optional[str], parent: Optional[str]) -> None:
    """Create New Plot."""
    resource = state.contractor.accessor(catalog.PLOT).new(name=name)
    set_fields(resource, {"corners": corners, "parent": resolve_uri(state, catalog.PLOT, parent)})
    state.renderer.detail(resource.create(), PLOT_DETAIL)


@plot.command("update")
@click.argument("plot_id")
@click.option("--corners", "-c", default=None, help="Update the Corners of the Plot with value.")
@click.option("--parent", "-p", default=None, help="Update the Parent of the Plot with the value.")
@pass_state
def plot_update(state: CLIState, plot_id: str, corners: Optional[str], parent: Optional[str]) -> None:
    """Update Plot."""
    resource = state.contractor.accessor(catalog.PLOT).get(plot_id)
    field_list = apply_changes(
        resource,
        {"corners": corners, "parent": resolve_uri(state, catalog.PLOT, parent)},
    )
    state.renderer.detail(resource.update(field_list), PLOT_DETAIL)


@plot.command("delete")
@click.argument("plot_id")
@pass_state
def plot_delete(state: CLIState, plot_id: str) -> None:
    """Delete Plot."""
    state.contractor.accessor(catalog.PLOT).get(plot_id).delete()
