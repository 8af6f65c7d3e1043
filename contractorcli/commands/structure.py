"""``contractorcli structure`` commands, including addresses, jobs and interfaces."""

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
from contractorcli.commands.job import STRUCTURE_JOB_DETAIL, current_job, show_job_state
from contractorcli.resources import catalog
from contractorcli.resources.binding import Resource

STRUCTURE_DETAIL = """Hostname:      {{ hostname }}
Site:          {{ site | extract_id }}
Blueprint:     {{ blueprint | extract_id }}
Foundation:    {{ foundation | extract_id }}
Config UUID:   {{ config_uuid }}
Config Values: {{ config_values }}
State:         {{ state }}
Built At:      {{ built_at }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

STRUCTURE_HEADER = ["Id", "Site", "Hostname", "Foundation", "Blueprint", "Created", "Updated"]
STRUCTURE_ROW = (
    "{{ id }}\t{{ site | extract_id }}\t{{ hostname }}\t{{ foundation | extract_id }}"
    "\t{{ blueprint | extract_id }}\t{{ created }}\t{{ updated }}"
)

ADDRESS_DETAIL = """Id:            {{ id }}
Interface:     {{ interface_name }}
Address:       {{ ip_address }}
Address Block: {{ address_block | extract_id }}
Offset:        {{ offset }}
Is Primary:    {{ is_primary }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

ADDRESS_HEADER = ["Id", "Interface", "Address", "Address Block", "Offset", "Is Primary", "Created", "Updated"]
ADDRESS_ROW = (
    "{{ id }}\t{{ interface_name }}\t{{ ip_address }}\t{{ address_block | extract_id }}"
    "\t{{ offset }}\t{{ is_primary }}\t{{ created }}\t{{ updated }}"
)

JOB_LOG_HEADER = [
    "Script Name",
    "Created By",
    "Started At",
    "Finished At",
    "Canceled By",
    "Canceled At",
    "Created",
    "Updated",
]
JOB_LOG_ROW = (
    "{{ script_name }}\t{{ creator }}\t{{ started_at }}\t{{ finished_at }}"
    "\t{{ canceled_by }}\t{{ canceled_at }}\t{{ created }}\t{{ updated }}"
)

INTERFACE_DETAIL = """Name:             {{ name }}
Type:             {{ type }}
Network:          {{ network | extract_id }}
Structure:        {{ structure | extract_id }}
Created:          {{ created }}
Updated:          {{ updated }}
"""

INTERFACE_HEADER = ["Id", "Name", "Type", "Network", "Created", "Updated"]
INTERFACE_ROW = "{{ id }}\t{{ name }}\t{{ type }}\t{{ network | extract_id }}\t{{ created }}\t{{ updated }}"

AGG_INTERFACE_DETAIL = """Name:             {{ name }}
Network:          {{ network | extract_id }}
Structure:        {{ structure | extract_id }}
Primary:          {{ primary_interface }}
Secondaries:      {{ secondary_interfaces }}
Created:          {{ created }}
Updated:          {{ updated }}
"""

AGG_INTERFACE_HEADER = ["Id", "Name", "Network", "Primary Interface", "Created", "Updated"]
AGG_INTERFACE_ROW = (
    "{{ id }}\t{{ name }}\t{{ network | extract_id }}\t{{ primary_interface }}\t{{ created }}\t{{ updated }}"
)


def networked_uri(structure: Resource) -> str:
    """The Networked URI addresses are attached to; same id as the Structure."""
    return structure.uri.replace(catalog.STRUCTURE.uri, "/api/v1/Utilities/Networked", 1)


def _split_names(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def _sorted_by_id(items) -> list[Resource]:
    def _key(item: Resource):
        value = item.id
        return (0, int(value), "") if value.isdigit() else (1, 0, value)

    return sorted(items, key=_key)


@click.group("structure")
def structure() -> None:
    """Work with Structures."""


@structure.command("list")
@pass_state
def structure_list(state: CLIState) -> None:
    """List Structures."""
    state.renderer.list(state.contractor.accessor(catalog.STRUCTURE).list(), STRUCTURE_HEADER, STRUCTURE_ROW)


@structure.command("get")
@click.argument("structure_id", type=int)
@pass_state
def structure_get(state: CLIState, structure_id: int) -> None:
    """Get Structure."""
    state.renderer.detail(state.contractor.accessor(catalog.STRUCTURE).get(structure_id), STRUCTURE_DETAIL)


@structure.command("create")
@click.option("--hostname", "-o", required=True, help="Hostname of New Structure.")
@click.option("--site", "-s", required=True, help="Site of New Structure.")
@click.option("--blueprint", "-b", required=True, help="Blueprint of New Structure.")
@click.option("--foundation", "-f", required=True, help="Foundation of New Structure.")
@pass_state
def structure_create(state: CLIState, hostname: str, site: str, blueprint: str, foundation: str) -> None:
    """Create New Structure."""
    resource = state.contractor.accessor(catalog.STRUCTURE).new(hostname=hostname)
    set_fields(
        resource,
        {
            "site": resolve_uri(state, catalog.SITE, site),
            "blueprint": resolve_uri(state, catalog.STRUCTURE_BLUEPRINT, blueprint),
            "foundation": resolve_uri(state, catalog.FOUNDATION, foundation),
        },
    )
    state.renderer.detail(resource.create(), STRUCTURE_DETAIL)


@structure.command("update")
@click.argument("structure_id", type=int)
@click.option("--hostname", "-o", default=None, help="Update the Hostname of Structure with value.")
@click.option("--site", "-s", default=None, help="Update the Site of Structure with value.")
@click.option("--blueprint", "-b", default=None, help="Update the Blueprint of Structure with value.")
@click.option("--foundation", "-f", default=None, help="Update the Foundation of Structure with value.")
@pass_state
def structure_update(
    state: CLIState,
    structure_id: int,
    hostname: Optional[str],
    site: Optional[str],
    blueprint: Optional[str],
    foundation: Optional[str],
) -> None:
    """Update Structure."""
    resource = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    field_list = apply_changes(
        resource,
        {
            "hostname": hostname,
            "site": resolve_uri(state, catalog.SITE, site),
            "blueprint": resolve_uri(state, catalog.STRUCTURE_BLUEPRINT, blueprint),
            "foundation": resolve_uri(state, catalog.FOUNDATION, foundation),
        },
    )
    state.renderer.detail(resource.update(field_list), STRUCTURE_DETAIL)


@structure.command("delete")
@click.argument("structure_id", type=int)
@pass_state
def structure_delete(state: CLIState, structure_id: int) -> None:
    """Delete Structure."""
    state.contractor.accessor(catalog.STRUCTURE).get(structure_id).delete()


@structure.command("config")
@click.argument("structure_id", type=int)
@config_options
@pass_state
def structure_config(
    state: CLIState,
    structure_id: int,
    full: bool,
    set_name: Optional[str],
    set_value: str,
    delete_name: Optional[str],
) -> None:
    """Work With Structure Config."""
    run_config_command(state, catalog.STRUCTURE, str(structure_id), full, set_name, set_value, delete_name)


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

@structure.group("address")
def address() -> None:
    """Work with Structure Ip Addresses."""


@address.command("list")
@click.argument("structure_id", type=int)
@pass_state
def address_list(state: CLIState, structure_id: int) -> None:
    """List all Ip Addresses attached to a structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    items = state.contractor.accessor(catalog.ADDRESS).list("structure", {"structure": target.uri})
    state.renderer.list(items, ADDRESS_HEADER, ADDRESS_ROW)


@address.command("next")
@click.argument("structure_id", type=int)
@click.option("--addressblock", "-a", "address_block_id", type=int, required=True, help="Address Block to get an IP From.")
@click.option("--interfacename", "-n", "interface_name", required=True, help="Name of the Interface to assign the IP To.")
@click.option("--primary", "-p", "is_primary", is_flag=True, default=False, help="If this is the primary IP Address.")
@pass_state
def address_next(
    state: CLIState, structure_id: int, address_block_id: int, interface_name: str, is_primary: bool
) -> None:
    """Assign Next available IP address in Address Block to structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(address_block_id)
    address_uri = block.call(
        "nextAddress",
        networked=networked_uri(target),
        interface_name=interface_name,
        is_primary=is_primary,
    )
    state.renderer.kv({"id": address_uri})


@address.command("add")
@click.argument("structure_id", type=int)
@click.option("--addressblock", "-a", "address_block_id", type=int, required=True, help="Address Block to get an IP From.")
@click.option("--interfacename", "-n", "interface_name", required=True, help="Name of the Interface to assign the IP To.")
@click.option("--offset", "-o", type=int, required=True, help="Offset inside the Address Block to use.")
@click.option("--primary", "-p", "is_primary", is_flag=True, default=False, help="If this is the primary IP Address.")
@pass_state
def address_add(
    state: CLIState,
    structure_id: int,
    address_block_id: int,
    interface_name: str,
    offset: int,
    is_primary: bool,
) -> None:
    """Add an IP address to structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    resource = state.contractor.accessor(catalog.ADDRESS).new(
        networked=networked_uri(target),
        address_block=resolve_uri(state, catalog.ADDRESS_BLOCK, address_block_id),
        offset=offset,
        interface_name=interface_name,
        is_primary=is_primary,
    )
    state.renderer.detail(resource.create(), ADDRESS_DETAIL)


@address.command("update")
@click.argument("address_id", type=int)
@click.option("--interfacename", "-n", "interface_name", default=None, help="Name of the Interface to assign the IP To.")
@click.option("--offset", "-o", type=int, default=None, help="Offset inside the Address Block to use.")
@pass_state
def address_update(state: CLIState, address_id: int, interface_name: Optional[str], offset: Optional[int]) -> None:
    """Update an IP address of a structure."""
    resource = state.contractor.accessor(catalog.ADDRESS).get(address_id)
    field_list = apply_changes(resource, {"offset": offset, "interface_name": interface_name})
    state.renderer.detail(resource.update(field_list), ADDRESS_DETAIL)


@address.command("delete")
@click.argument("address_id", type=int)
@pass_state
def address_delete(state: CLIState, address_id: int) -> None:
    """Remove an IP address from a structure."""
    state.contractor.accessor(catalog.ADDRESS).get(address_id).delete()


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

@structure.group("job")
def structure_job() -> None:
    """Work with Structure Jobs."""


@structure_job.command("info")
@click.argument("structure_id", type=int)
@pass_state
def structure_job_info(state: CLIState, structure_id: int) -> None:
    """Show Structure Job Info."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    state.renderer.detail(current_job(state, target, catalog.STRUCTURE_JOB), STRUCTURE_JOB_DETAIL)


@structure_job.command("state")
@click.argument("structure_id", type=int)
@pass_state
def structure_job_state(state: CLIState, structure_id: int) -> None:
    """Show Structure Job State."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    show_job_state(state, current_job(state, target, catalog.STRUCTURE_JOB))


@structure_job.command("do-create")
@click.argument("structure_id", type=int)
@pass_state
def structure_job_do_create(state: CLIState, structure_id: int) -> None:
    """Start Create Job for Structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    state.renderer.kv({"job": target.call("doCreate")})


@structure_job.command("do-destroy")
@click.argument("structure_id", type=int)
@pass_state
def structure_job_do_destroy(state: CLIState, structure_id: int) -> None:
    """Start Destroy Job for Structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    state.renderer.kv({"job": target.call("doDestroy")})


@structure_job.command("do-utility")
@click.argument("structure_id", type=int)
@click.argument("script_name")
@pass_state
def structure_job_do_utility(state: CLIState, structure_id: int, script_name: str) -> None:
    """Start Utility Job SCRIPT_NAME for Structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    state.renderer.kv({"job": target.call("doJob", name=script_name)})


@structure_job.command("log")
@click.argument("structure_id", type=int)
@pass_state
def structure_job_log(state: CLIState, structure_id: int) -> None:
    """Job Log List for a Structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    items = state.contractor.accessor(catalog.JOB_LOG).list("structure", {"structure": target.uri})
    state.renderer.list(items, JOB_LOG_HEADER, JOB_LOG_ROW)


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

@structure.group("interface")
def interface() -> None:
    """Work with Structure Interfaces."""


@interface.command("list")
@click.argument("structure_id", type=int)
@pass_state
def interface_list(state: CLIState, structure_id: int) -> None:
    """List all Interfaces attached to a structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    items = state.contractor.accessor(catalog.NETWORK_INTERFACE).list("structure", {"structure": target.uri})
    state.renderer.list(_sorted_by_id(items), INTERFACE_HEADER, INTERFACE_ROW)


@interface.command("get")
@click.argument("interface_id", type=int)
@pass_state
def interface_get(state: CLIState, interface_id: int) -> None:
    """Get Structure Interface."""
    resource = state.contractor.accessor(catalog.NETWORK_INTERFACE).get(interface_id)
    state.renderer.detail(resource, INTERFACE_DETAIL)


@interface.command("create")
@click.argument("structure_id", type=int)
@click.option("--name", "-n", required=True, help="Name of the new Interface.")
@click.option("--network", "-t", type=int, default=None, help="Network id to attach the new Interface to.")
@pass_state
def interface_create(state: CLIState, structure_id: int, name: str, network: Optional[int]) -> None:
    """Create New Structure Interface."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    resource = state.contractor.accessor(catalog.NETWORK_INTERFACE).new(structure=target.uri, name=name)
    set_fields(resource, {"network": resolve_uri(state, catalog.NETWORK, network)})
    state.renderer.detail(resource.create(), INTERFACE_DETAIL)


@interface.command("update")
@click.argument("interface_id", type=int)
@click.option("--name", "-n", default=None, help="Update the Name of the Interface.")
@click.option("--network", "-t", type=int, default=None, help="Update Network id the Interface is attached to.")
@pass_state
def interface_update(state: CLIState, interface_id: int, name: Optional[str], network: Optional[int]) -> None:
    """Update Structure Interface."""
    resource = state.contractor.accessor(catalog.NETWORK_INTERFACE).get(interface_id)
    field_list = apply_changes(
        resource,
        {"name": name, "network": resolve_uri(state, catalog.NETWORK, network)},
    )
    state.renderer.detail(resource.update(field_list), INTERFACE_DETAIL)


@interface.command("delete")
@click.argument("interface_id", type=int)
@pass_state
def interface_delete(state: CLIState, interface_id: int) -> None:
    """Delete Structure Interface."""
    state.contractor.accessor(catalog.NETWORK_INTERFACE).get(interface_id).delete()


# ---------------------------------------------------------------------------
# Aggregated interfaces
# ---------------------------------------------------------------------------

@structure.group("agginterface")
def agginterface() -> None:
    """Work with Structure Aggregated (bonded) Interfaces."""


@agginterface.command("list")
@click.argument("structure_id", type=int)
@pass_state
def agginterface_list(state: CLIState, structure_id: int) -> None:
    """List all Aggregated Interfaces attached to a structure."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    items = state.contractor.accessor(catalog.AGGREGATED_NETWORK_INTERFACE).list(
        "structure", {"structure": target.uri}
    )
    state.renderer.list(_sorted_by_id(items), AGG_INTERFACE_HEADER, AGG_INTERFACE_ROW)


@agginterface.command("get")
@click.argument("interface_id")
@pass_state
def agginterface_get(state: CLIState, interface_id: str) -> None:
    """Get Structure Aggregated Interface."""
    resource = state.contractor.accessor(catalog.AGGREGATED_NETWORK_INTERFACE).get(interface_id)
    state.renderer.detail(resource, AGG_INTERFACE_DETAIL)


@agginterface.command("create")
@click.argument("structure_id", type=int)
@click.option("--name", "-n", required=True, help="Name of the new Interface.")
@click.option("--network", "-t", type=int, default=None, help="Network id to attach the new Interface to.")
@click.option("--primary", "-p", default=None, help="Interface name to use as the primary interface.")
@click.option("--secondary", "-s", default=None, help="Interface names to use as the secondaries, delimited by ','.")
@pass_state
def agginterface_create(
    state: CLIState,
    structure_id: int,
    name: str,
    network: Optional[int],
    primary: Optional[str],
    secondary: Optional[str],
) -> None:
    """Create New Structure Aggregated Interface."""
    target = state.contractor.accessor(catalog.STRUCTURE).get(structure_id)
    resource = state.contractor.accessor(catalog.AGGREGATED_NETWORK_INTERFACE).new(structure=target.uri, name=name)
    set_fields(
        resource,
        {
            "network": resolve_uri(state, catalog.NETWORK, network),
            "primary_interface": primary,
            "secondary_interfaces": _split_names(secondary),
        },
    )
    state.renderer.detail(resource.create(), AGG_INTERFACE_DETAIL)


@agginterface.command("update")
@click.argument("interface_id")
@click.option("--name", "-n", default=None, help="Update the Name of the Interface.")
@click.option("--network", "-t", type=int, default=None, help="Update Network id the Interface is attached to.")
@click.option("--primary", "-p", default=None, help="Interface name to use as the primary interface.")
@click.option("--secondary", "-s", default=None, help="Interface names to use as the secondaries, delimited by ','.")
@pass_state
def agginterface_update(
    state: CLIState,
    interface_id: str,
    name: Optional[str],
    network: Optional[int],
    primary: Optional[str],
    secondary: Optional[str],
) -> None:
    """Update Structure Aggregated Interface."""
    resource = state.contractor.accessor(catalog.AGGREGATED_NETWORK_INTERFACE).get(interface_id)
    field_list = apply_changes(
        resource,
        {
            "name": name,
            "network": resolve_uri(state, catalog.NETWORK, network),
            "primary_interface": primary,
            "secondary_interfaces": _split_names(secondary),
        },
    )
    state.renderer.detail(resource.update(field_list), AGG_INTERFACE_DETAIL)


@agginterface.command("delete")
@click.argument("interface_id")
@pass_state
def agginterface_delete(state: CLIState, interface_id: str) -> None:
    """Delete Structure Aggregated Interface."""
    state.contractor.accessor(catalog.AGGREGATED_NETWORK_INTERFACE).get(interface_id).delete()
