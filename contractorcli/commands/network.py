"""``contractorcli network`` commands, including address block links."""

from __future__ import annotations

from typing import Optional

import click

from contractorcli.commands.common import CLIState, apply_changes, pass_state, resolve_uri, set_fields
from contractorcli.resources import catalog

NETWORK_DETAIL = """Id:            {{ id }}
Name:          {{ name }}
Site:          {{ site | extract_id }}
MTU:           {{ mtu }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

NETWORK_HEADER = ["Id", "Name", "Site", "Created", "Updated"]
NETWORK_ROW = "{{ id }}\t{{ name }}\t{{ site | extract_id }}\t{{ created }}\t{{ updated }}"

LINK_DETAIL = """Id:            {{ id }}
Network:       {{ network | extract_id }}
Address Block: {{ address_block | extract_id }}
Vlan:          {{ vlan }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

LINK_HEADER = ["Link Id", "Address Block", "Vlan Id", "Created", "Updated"]
LINK_ROW = "{{ id }}\t{{ address_block | extract_id }}\t{{ vlan }}\t{{ created }}\t{{ updated }}"


@click.group("network")
def network() -> None:
    """Work with Networks."""


@network.command("list")
@pass_state
def network_list(state: CLIState) -> None:
    """List Networks."""
    state.renderer.list(state.contractor.accessor(catalog.NETWORK).list(), NETWORK_HEADER, NETWORK_ROW)


@network.command("get")
@click.argument("network_id", type=int)
@pass_state
def network_get(state: CLIState, network_id: int) -> None:
    """Get Network and its Address Block links."""
    resource = state.contractor.accessor(catalog.NETWORK).get(network_id)
    links = list(
        state.contractor.accessor(catalog.NETWORK_ADDRESS_BLOCK).list("network", {"network": resource.uri})
    )
    if state.renderer.as_json:
        state.renderer.detail({**resource.to_dict(), "links": [link.to_dict() for link in links]}, NETWORK_DETAIL)
        return
    state.renderer.detail(resource, NETWORK_DETAIL)
    state.renderer.list(links, LINK_HEADER, LINK_ROW)


@network.command("create")
@click.option("--name", "-n", required=True, help="Name of New Network.")
@click.option("--site", "-s", required=True, help="Site of New Network.")
@click.option("--mtu", "-m", type=int, default=None, help="MTU of New Network.")
@pass_state
def network_create(state: CLIState, name: str, site: str, mtu: Optional[int]) -> None:
    """Create New Network."""
    resource = state.contractor.accessor(catalog.NETWORK).new(name=name, site=resolve_uri(state, catalog.SITE, site))
    set_fields(resource, {"mtu": mtu})
    state.renderer.detail(resource.create(), NETWORK_DETAIL)


@network.command("update")
@click.argument("network_id", type=int)
@click.option("--name", "-n", default=None, help="Update the Name of the Network with value.")
@click.option("--site", "-s", default=None, help="Update the Site of the Network with value.")
@click.option("--mtu", "-m", type=int, default=None, help="Update the MTU of the Network with the value.")
@pass_state
def network_update(
    state: CLIState, network_id: int, name: Optional[str], site: Optional[str], mtu: Optional[int]
) -> None:
    """Update Network."""
    resource = state.contractor.accessor(catalog.NETWORK).get(network_id)
    field_list = apply_changes(
        resource,
        {"name": name, "site": resolve_uri(state, catalog.SITE, site), "mtu": mtu},
    )
    state.renderer.detail(resource.update(field_list), NETWORK_DETAIL)


@network.command("delete")
@click.argument("network_id", type=int)
@pass_state
def network_delete(state: CLIState, network_id: int) -> None:
    """Delete Network."""
    state.contractor.accessor(catalog.NETWORK).get(network_id).delete()


@network.group("link")
def link() -> None:
    """Work with Network to Address Block links."""


@link.command("create")
@click.argument("network_id", type=int)
@click.option("--addressblock", "-a", "address_block_id", type=int, required=True, help="AddressBlock to Link to.")
@click.option("--vlan", "-v", type=int, default=None, help="VLan the Addressblock is tagged as.")
@pass_state
def link_create(state: CLIState, network_id: int, address_block_id: int, vlan: Optional[int]) -> None:
    """Link an Address Block to a Network."""
    resource = state.contractor.accessor(catalog.NETWORK_ADDRESS_BLOCK).new(
        network=resolve_uri(state, catalog.NETWORK, network_id),
        address_block=resolve_uri(state, catalog.ADDRESS_BLOCK, address_block_id),
    )
    set_fields(resource, {"vlan": vlan})
    state.renderer.detail(resource.create(), LINK_DETAIL)


@link.command("update")
@click.argument("link_id", type=int)
@click.option("--vlan", "-v", type=int, default=None, help="VLan the Addressblock is tagged as.")
@pass_state
def link_update(state: CLIState, link_id: int, vlan: Optional[int]) -> None:
    """Update a Network to Address Block link."""
    resource = state.contractor.accessor(catalog.NETWORK_ADDRESS_BLOCK).get(link_id)
    field_list = apply_changes(resource, {"vlan": vlan})
    state.renderer.detail(resource.update(field_list), LINK_DETAIL)


@link.command("delete")
@click.argument("link_id", type=int)
@pass_state
def link_delete(state: CLIState, link_id: int) -> None:
    """Remove a Network to Address Block link."""
    state.contractor.accessor(catalog.NETWORK_ADDRESS_BLOCK).get(link_id).delete()
