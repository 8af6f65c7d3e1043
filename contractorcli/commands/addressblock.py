"""``contractorcli addressblock`` commands.

``allocation`` is the one read-only aggregation in the CLI: static,
reserved and dynamic addresses of a block merged and ordered by offset.
"""

from __future__ import annotations

import logging
from typing import Optional

import click

from contractorcli.commands.common import CLIState, apply_changes, pass_state, resolve_uri, set_fields
from contractorcli.core.exceptions import ArgumentError, NotFoundError
from contractorcli.resources import catalog
from contractorcli.resources.binding import Resource
from contractorcli.resources.kinds import ResourceKind

logger = logging.getLogger("contractorcli.cli")

ADDRESS_BLOCK_DETAIL = """Id:             {{ id }}
Name:           {{ name }}
Site:           {{ site | extract_id }}
Subnet:         {{ subnet }}
Prefix:         {{ prefix }} ({{ netmask }})
Gateway Offset: {{ gateway_offset }} ({{ gateway }})
Max Address:    {{ max_address }}
Size:           {{ size }}
Created:        {{ created }}
Updated:        {{ updated }}
"""

ADDRESS_BLOCK_HEADER = ["Id", "Name", "Site", "SubNet", "Prefix", "Created", "Updated"]
ADDRESS_BLOCK_ROW = (
    "{{ id }}\t{{ name }}\t{{ site | extract_id }}\t{{ subnet }}\t{{ prefix }}\t{{ created }}\t{{ updated }}"
)

USAGE_DETAIL = """Total:         {{ total }}
Static:        {{ static }}
Reserved:      {{ reserved }}
Dynamic:       {{ dynamic }}
"""

ALLOCATION_HEADER = ["Id", "Offset", "Ip Address", "Type"]
ALLOCATION_ROW = "{{ id }}\t{{ offset }}\t{{ ip_address }}\t{{ type }}"

RESERVED_DETAIL = """Id:             {{ id }}
AddressBlock:   {{ address_block | extract_id }}
Offset:         {{ offset }}
Reason:         {{ reason }}
Created:        {{ created }}
Updated:        {{ updated }}
"""

DYNAMIC_DETAIL = """Id:           {{ id }}
AddressBlock: {{ address_block | extract_id }}
Offset:       {{ offset }}
PXE:          {{ pxe | extract_id }}
Created:      {{ created }}
Updated:      {{ updated }}
"""

ALLOCATION_KINDS = (catalog.ADDRESS, catalog.RESERVED_ADDRESS, catalog.DYNAMIC_ADDRESS)


def _block_members(state: CLIState, kind: ResourceKind, block: Resource):
    return state.contractor.accessor(kind).list("address_block", {"address_block": block.uri})


def allocation(state: CLIState, block: Resource) -> list[Resource]:
    """Every allocated address in the block, ordered by offset."""
    merged: list[Resource] = []
    for kind in ALLOCATION_KINDS:
        merged.extend(_block_members(state, kind, block))
    logger.debug("Allocation of %s: %d addresses", block.uri, len(merged))
    return sorted(merged, key=lambda item: item["offset"] or 0)


def _remove_at_offset(state: CLIState, kind: ResourceKind, block_id: int, offset: Optional[int]) -> None:
    if offset is None:
        raise ArgumentError("Offset required")
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(block_id)
    for item in _block_members(state, kind, block):
        if item["offset"] == offset:
            item.delete()
            state.renderer.message(f"Removed {kind.name} at offset {offset}")
            return
    raise NotFoundError("Offset not found")


@click.group("addressblock")
def addressblock() -> None:
    """Work with AddressBlocks."""


@addressblock.command("list")
@pass_state
def addressblock_list(state: CLIState) -> None:
    """List AddressBlocks."""
    items = state.contractor.accessor(catalog.ADDRESS_BLOCK).list()
    state.renderer.list(items, ADDRESS_BLOCK_HEADER, ADDRESS_BLOCK_ROW)


@addressblock.command("get")
@click.argument("addressblock_id", type=int)
@pass_state
def addressblock_get(state: CLIState, addressblock_id: int) -> None:
    """Get AddressBlock."""
    resource = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    state.renderer.detail(resource, ADDRESS_BLOCK_DETAIL)


@addressblock.command("create")
@click.option("--name", "-n", required=True, help="Name of the New AddressBlock.")
@click.option("--site", "-s", required=True, help="Site of the New AddressBlock.")
@click.option("--subnet", "-u", required=True, help="Subnet of the New AddressBlock.")
@click.option("--prefix", "-p", type=int, required=True, help="Prefix of the New AddressBlock.")
@click.option("--gateway", "-g", "gateway_offset", type=int, default=None, help="Gateway Offset of the New AddressBlock.")
@pass_state
def addressblock_create(
    state: CLIState, name: str, site: str, subnet: str, prefix: int, gateway_offset: Optional[int]
) -> None:
    """Create New AddressBlock."""
    resource = state.contractor.accessor(catalog.ADDRESS_BLOCK).new(
        name=name,
        site=resolve_uri(state, catalog.SITE, site),
        subnet=subnet,
        prefix=prefix,
    )
    set_fields(resource, {"gateway_offset": gateway_offset})
    state.renderer.detail(resource.create(), ADDRESS_BLOCK_DETAIL)


@addressblock.command("update")
@click.argument("addressblock_id", type=int)
@click.option("--name", "-n", default=None, help="Update the Name of the AddressBlock.")
@click.option("--site", "-s", default=None, help="Update the Site of the AddressBlock.")
@click.option("--subnet", "-u", default=None, help="Update the Subnet of the AddressBlock.")
@click.option("--prefix", "-p", type=int, default=None, help="Update the Prefix of the AddressBlock.")
@click.option("--gateway", "-g", "gateway_offset", type=int, default=None, help="Update the Gateway Offset.")
@pass_state
def addressblock_update(
    state: CLIState,
    addressblock_id: int,
    name: Optional[str],
    site: Optional[str],
    subnet: Optional[str],
    prefix: Optional[int],
    gateway_offset: Optional[int],
) -> None:
    """Update AddressBlock."""
    resource = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    field_list = apply_changes(
        resource,
        {
            "name": name,
            "site": resolve_uri(state, catalog.SITE, site),
            "subnet": subnet,
            "prefix": prefix,
            "gateway_offset": gateway_offset,
        },
    )
    state.renderer.detail(resource.update(field_list), ADDRESS_BLOCK_DETAIL)


@addressblock.command("delete")
@click.argument("addressblock_id", type=int)
@pass_state
def addressblock_delete(state: CLIState, addressblock_id: int) -> None:
    """Delete AddressBlock."""
    state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id).delete()


@addressblock.command("usage")
@click.argument("addressblock_id", type=int)
@pass_state
def addressblock_usage(state: CLIState, addressblock_id: int) -> None:
    """Display the usage for an AddressBlock."""
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    state.renderer.detail(block.call("usage") or {}, USAGE_DETAIL)


@addressblock.command("allocation")
@click.argument("addressblock_id", type=int)
@pass_state
def addressblock_allocation(state: CLIState, addressblock_id: int) -> None:
    """Display the allocated addresses of an AddressBlock by offset."""
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    state.renderer.list(allocation(state, block), ALLOCATION_HEADER, ALLOCATION_ROW)


@addressblock.command("reserve")
@click.argument("addressblock_id", type=int)
@click.option("--offset", "-o", type=int, default=None, help="Offset for the New Reservation.")
@click.option("--reason", "-r", default=None, help="Reason for the New Reservation.")
@pass_state
def addressblock_reserve(state: CLIState, addressblock_id: int, offset: Optional[int], reason: Optional[str]) -> None:
    """Reserve an ip/offset in an Address Block."""
    if offset is None:
        raise ArgumentError("Offset required")
    if not reason:
        raise ArgumentError("Reason required")
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    resource = state.contractor.accessor(catalog.RESERVED_ADDRESS).new(
        address_block=block.uri, offset=offset, reason=reason
    )
    state.renderer.detail(resource.create(), RESERVED_DETAIL)


@addressblock.command("dereserve")
@click.argument("addressblock_id", type=int)
@click.option("--offset", "-o", type=int, default=None, help="Offset of the Reservation to Remove.")
@pass_state
def addressblock_dereserve(state: CLIState, addressblock_id: int, offset: Optional[int]) -> None:
    """Dereserve a Reserved Ip From an Address Block."""
    _remove_at_offset(state, catalog.RESERVED_ADDRESS, addressblock_id, offset)


@addressblock.command("dynamic")
@click.argument("addressblock_id", type=int)
@click.option("--offset", "-o", type=int, default=None, help="Offset for the New Dynamic Ip.")
@click.option("--pxe", "-p", default=None, help="PXE for the New Dynamic Ip.")
@pass_state
def addressblock_dynamic(state: CLIState, addressblock_id: int, offset: Optional[int], pxe: Optional[str]) -> None:
    """Assign an ip/offset in an Address Block as Dynamic."""
    if offset is None:
        raise ArgumentError("Offset required")
    block = state.contractor.accessor(catalog.ADDRESS_BLOCK).get(addressblock_id)
    resource = state.contractor.accessor(catalog.DYNAMIC_ADDRESS).new(address_block=block.uri, offset=offset)
    set_fields(resource, {"pxe": resolve_uri(state, catalog.PXE, pxe)})
    state.renderer.detail(resource.create(), DYNAMIC_DETAIL)


@addressblock.command("dedynamic")
@click.argument("addressblock_id", type=int)
@click.option("--offset", "-o", type=int, default=None, help="Offset of the Dynamic Ip to Remove.")
@pass_state
def addressblock_dedynamic(state: CLIState, addressblock_id: int, offset: Optional[int]) -> None:
    """Remove a Dynamic Ip From an Address Block."""
    _remove_at_offset(state, catalog.DYNAMIC_ADDRESS, addressblock_id, offset)
