"""``contractorcli complex`` commands and the per-provider Complex groups."""

from __future__ import annotations

from typing import Optional

import click

from contractorcli.commands.common import CLIState, pass_state
from contractorcli.commands.providers import FieldOption, ProviderCommands, build_provider_group, detail_template
from contractorcli.resources import catalog

COMPLEX_DETAIL = """Id:            {{ id }}
Name:          {{ name }}
Description:   {{ description }}
Site:          {{ site | extract_id }}
Type:          {{ type }}
State:         {{ state }}
Members:       {{ members | extract_id_list }}
Built %:       {{ built_percentage }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

COMPLEX_HEADER = ["Id", "Site", "Name", "State", "Type", "Created", "Updated"]
COMPLEX_ROW = (
    "{{ id }}\t{{ site | extract_id }}\t{{ name }}\t{{ state }}\t{{ type }}\t{{ created }}\t{{ updated }}"
)


def _common_options(label: str) -> tuple[FieldOption, ...]:
    return (
        FieldOption(
            "name",
            ("--name", "-l"),
            f"Name of New {label} Complex.",
            create_only=True,
            required_on_create=True,
        ),
        FieldOption("site", ("--site", "-s"), "Site of the Complex.", reference=catalog.SITE),
        FieldOption("description", ("--description", "-d"), "Description of the Complex."),
        FieldOption(
            "built_percentage",
            ("--builtperc", "-b"),
            "Percentage of Built Members at which the complex is considered built.",
            type=int,
            create_default=80,
        ),
        FieldOption(
            "members",
            ("--members", "-m"),
            "Member Structure id, specify once for each member.",
            reference=catalog.STRUCTURE,
            type=int,
            multiple=True,
        ),
    )


def _provider(
    name: str,
    label: str,
    extra_lines: Optional[list[tuple[str, str]]] = None,
    options: tuple[FieldOption, ...] = (),
) -> ProviderCommands:
    lines = (
        [
            ("Name", "name"),
            ("Description", "description"),
            ("Type", "type"),
            ("State", "state"),
            ("Site", "site | extract_id"),
            ("Built Percentage", "built_percentage"),
            ("Members", "members | extract_id_list"),
        ]
        + list(extra_lines or [])
        + [("Created", "created"), ("Updated", "updated")]
    )
    return ProviderCommands(
        name=name,
        label=label,
        kind=catalog.COMPLEX_TYPES[name].kind,
        detail=detail_template(lines),
        options=_common_options(label) + options,
    )


def _credential_options(prefix: str, label: str) -> tuple[FieldOption, ...]:
    return (
        FieldOption(f"{prefix}_username", ("--username", "-u"), f"{label} Username."),
        FieldOption(f"{prefix}_password", ("--password", "-p"), f"{label} Password."),
    )


def _credential_lines(prefix: str, label: str) -> list[tuple[str, str]]:
    return [(f"{label} Username", f"{prefix}_username"), (f"{label} Password", f"{prefix}_password")]


PROVIDERS = (
    _provider("manual", "Manual"),
    _provider("docker", "Docker"),
    _provider("libvirt", "LibVirt"),
    _provider(
        "proxmox",
        "Proxmox",
        _credential_lines("proxmox", "Proxmox"),
        _credential_options("proxmox", "Proxmox"),
    ),
    _provider(
        "vcenter",
        "VCenter",
        [("VCenter Host", "vcenter_host | extract_id")]
        + _credential_lines("vcenter", "VCenter")
        + [("VCenter DataCenter", "vcenter_datacenter"), ("VCenter Cluster", "vcenter_cluster")],
        _credential_options("vcenter", "VCenter")
        + (
            FieldOption("vcenter_datacenter", ("--datacenter", "-a"), "VCenter DataCenter."),
            FieldOption("vcenter_cluster", ("--cluster", "-c"), "VCenter Cluster."),
            FieldOption(
                "vcenter_host", ("--host", "-o"), "VCenter Host (structure id).", reference=catalog.STRUCTURE, type=int
            ),
        ),
    ),
    _provider(
        "virtualbox",
        "VirtualBox",
        _credential_lines("virtualbox", "VirtualBox"),
        _credential_options("virtualbox", "VirtualBox"),
    ),
    _provider(
        "azure",
        "Azure",
        [
            ("Azure Subscription Id", "azure_subscription_id"),
            ("Azure Location", "azure_location"),
            ("Azure Resource Group", "azure_resource_group"),
            ("Azure Client Id", "azure_client_id"),
            ("Azure Password", "azure_password"),
            ("Azure Tenant Id", "azure_tenant_id"),
        ],
        (
            FieldOption("azure_subscription_id", ("--subscription-id", "-u"), "Azure Subscription Id."),
            FieldOption("azure_location", ("--location", "-o"), "Azure Location."),
            FieldOption("azure_resource_group", ("--resource-group", "-g"), "Azure Resource Group."),
            FieldOption("azure_client_id", ("--client-id", "-c"), "Azure Client Id."),
            FieldOption("azure_password", ("--password", "-p"), "Azure Client Password."),
            FieldOption("azure_tenant_id", ("--tenant-id", "-t"), "Azure Tenant Id."),
        ),
    ),
    _provider(
        "packet",
        "Packet",
        [
            ("Packet Auth Token", "packet_auth_token"),
            ("Packet Project", "packet_project"),
            ("Packet Facility", "packet_facility"),
        ],
        (
            FieldOption("packet_auth_token", ("--token", "-t"), "Packet Auth Token."),
            FieldOption("packet_project", ("--project", "-p"), "Packet Project."),
            FieldOption("packet_facility", ("--facility", "-f"), "Packet Facility."),
        ),
    ),
)


@click.group("complex")
def complex_group() -> None:
    """Work with Complexes."""


@complex_group.command("list")
@pass_state
def complex_list(state: CLIState) -> None:
    """List Complexes."""
    state.renderer.list(state.contractor.accessor(catalog.COMPLEX).list(), COMPLEX_HEADER, COMPLEX_ROW)


@complex_group.command("get")
@click.argument("complex_id")
@pass_state
def complex_get(state: CLIState, complex_id: str) -> None:
    """Get Complex."""
    state.renderer.detail(state.contractor.accessor(catalog.COMPLEX).get(complex_id), COMPLEX_DETAIL)


@complex_group.command("types")
@pass_state
def complex_types(state: CLIState) -> None:
    """List Supported Types."""
    state.renderer.kv({"type": state.contractor.supported_types(catalog.COMPLEX_TYPES)})


@complex_group.command("delete")
@click.argument("complex_id")
@pass_state
def complex_delete(state: CLIState, complex_id: str) -> None:
    """Delete Complex."""
    state.contractor.accessor(catalog.COMPLEX).get(complex_id).delete()


for _provider_commands in PROVIDERS:
    complex_group.add_command(build_provider_group(_provider_commands, "Complex"))
