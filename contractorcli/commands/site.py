"""``contractorcli site`` commands."""

from __future__ import annotations

from typing import Optional

import click

from contractorcli.commands.common import (
    CLIState,
    apply_changes,
    config_options,
    pass_state,
    resolve_uri,
    run_config_command,
    set_fields,
)
from contractorcli.resources import catalog

SITE_DETAIL = """Site:          {{ name }}
Description:   {{ description }}
Parent:        {{ parent | extract_id }}
Zone:          {{ zone | extract_id }}
Config Values: {{ config_values }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

SITE_HEADER = ["Id", "Description", "Parent", "Created", "Updated"]
SITE_ROW = "{{ id }}\t{{ description }}\t{{ parent | extract_id }}\t{{ created }}\t{{ updated }}"


@click.group("site")
def site() -> None:
    """Work with Sites."""


@site.command("list")
@pass_state
def site_list(state: CLIState) -> None:
    """List Sites."""
    state.renderer.list(state.contractor.accessor(catalog.SITE).list(), SITE_HEADER, SITE_ROW)


@site.command("get")
@click.argument("site_id")
@pass_state
def site_get(state: CLIState, site_id: str) -> None:
    """Get Site."""
    state.renderer.detail(state.contractor.accessor(catalog.SITE).get(site_id), SITE_DETAIL)


@site.command("create")
@click.option("--name", "-n", required=True, help="Name of New Site.")
@click.option("--description", "-d", default=None, help="Description of New Site.")
@click.option("--parent", "-p", default=None, help="Parent Site of New Site.")
@pass_state
def site_create(state: CLIState, name: str, description: Optional[str], parent: Optional[str]) -> None:
    """Create New Site."""
    resource = state.contractor.accessor(catalog.SITE).new(name=name)
    set_fields(
        resource,
        {
            "description": description,
            "parent": resolve_uri(state, catalog.SITE, parent),
        },
    )
    state.renderer.detail(resource.create(), SITE_DETAIL)


@site.command("update")
@click.argument("site_id")
@click.option("--description", "-d", default=None, help="Update the Description of the Site.")
@click.option("--parent", "-p", default=None, help="Update the Parent of the Site.")
@pass_state
def site_update(state: CLIState, site_id: str, description: Optional[str], parent: Optional[str]) -> None:
    """Update Site."""
    resource = state.contractor.accessor(catalog.SITE).get(site_id)
    field_list = apply_changes(
        resource,
        {
            "description": description,
            "parent": resolve_uri(state, catalog.SITE, parent),
        },
    )
    state.renderer.detail(resource.update(field_list), SITE_DETAIL)


@site.command("delete")
@click.argument("site_id")
@pass_state
def site_delete(state: CLIState, site_id: str) -> None:
    """Delete Site."""
    state.contractor.accessor(catalog.SITE).get(site_id).delete()


@site.command("config")
@click.argument("site_id")
@config_options
@pass_state
def site_config(
    state: CLIState,
    site_id: str,
    full: bool,
    set_name: Optional[str],
    set_value: str,
    delete_name: Optional[str],
) -> None:
    """Work With Site Config."""
    run_config_command(state, catalog.SITE, site_id, full, set_name, set_value, delete_name)
