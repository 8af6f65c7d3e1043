"""``contractorcli foundation`` commands and the per-provider Foundation groups."""

from __future__ import annotations

from typing import Optional

import click

from contractorcli.commands.common import CLIState, apply_changes, pass_state, resolve_uri
from contractorcli.commands.job import FOUNDATION_JOB_DETAIL, current_job
from contractorcli.commands.providers import FieldOption, ProviderCommands, build_provider_group, detail_template
from contractorcli.core.exceptions import ArgumentError
from contractorcli.resources import catalog

FOUNDATION_DETAIL = """Locator:       {{ locator }}
Type:          {{ type }}
Site:          {{ site | extract_id }}
Blueprint:     {{ blueprint | extract_id }}
Structure:     {{ structure | extract_id }}
Id Map:        {{ id_map }}
Class List:    {{ class_list }}
State:         {{ state }}
Located At:    {{ located_at }}
Built At:      {{ built_at }}
Created:       {{ created }}
Updated:       {{ updated }}
"""

FOUNDATION_HEADER = ["Id", "Site", "Locator", "Structure", "Blueprint", "Created", "Updated"]
FOUNDATION_ROW = (
    "{{ id }}\t{{ site | extract_id }}\t{{ locator }}\t{{ structure | extract_id }}"
    "\t{{ blueprint | extract_id }}\t{{ created }}\t{{ updated }}"
)

_COMMON_DETAIL_LINES = [
    ("Type", "type"),
    ("Site", "site | extract_id"),
    ("Blueprint", "blueprint | extract_id"),
    ("Structure", "structure | extract_id"),
    ("Id Map", "id_map"),
    ("Class List", "class_list"),
    ("State", "state"),
    ("Located At", "located_at"),
    ("Built At", "built_at"),
    ("Created", "created"),
    ("Updated", "updated"),
]


def _common_options(label: str) -> tuple[FieldOption, ...]:
    return (
        FieldOption(
            "locator",
            ("--locator", "-l"),
            f"Locator of New {label} Foundation.",
            create_only=True,
            required_on_create=True,
        ),
        FieldOption("site", ("--site", "-s"), "Site of the Foundation.", reference=catalog.SITE),
        FieldOption(
            "blueprint", ("--blueprint", "-b"), "Blueprint of the Foundation.", reference=catalog.FOUNDATION_BLUEPRINT
        ),
    )


def _provider(
    name: str,
    label: str,
    kind,
    extra_lines: list[tuple[str, str]],
    options: tuple[FieldOption, ...] = (),
) -> ProviderCommands:
    lines = [("Id", "id"), ("Locator", "locator")] + extra_lines + _COMMON_DETAIL_LINES
    return ProviderCommands(
        name=name,
        label=label,
        kind=kind,
        detail=detail_template(lines),
        options=_common_options(label) + options,
    )


def _plot_option() -> FieldOption:
    return FieldOption("plot", ("--plot", "-p"), "Plot of the Foundation.", reference=catalog.PLOT)


def _complex_option(prefix: str, complex_kind) -> FieldOption:
    return FieldOption(
        f"{prefix}_complex", ("--complex", "-x"), "Complex the Foundation belongs to.", reference=complex_kind
    )


def _bmc_options(prefix: str, label: str, sol: bool = False) -> tuple[FieldOption, ...]:
    options = (
        _plot_option(),
        FieldOption(f"{prefix}_username", (f"--{prefix}-username", "-u"), f"{label} Username."),
        FieldOption(f"{prefix}_password", (f"--{prefix}-password", "-a"), f"{label} Password."),
        FieldOption(f"{prefix}_ip_address", (f"--{prefix}-ip", "-i"), f"{label} Host Ip Address."),
    )
    if sol:
        sol_help = f"{label} SOL Port (console/ttyS1/etc)."
        options += (FieldOption(f"{prefix}_sol_port", (f"--{prefix}-sol", "-o"), sol_help),)
    return options


def _bmc_lines(prefix: str, label: str, sol: bool = False) -> list[tuple[str, str]]:
    lines = [
        (f"{label} Username", f"{prefix}_username"),
        (f"{label} Password", f"{prefix}_password"),
        (f"{label} Ip Address", f"{prefix}_ip_address"),
    ]
    if sol:
        lines.append((f"{label} SOL Port", f"{prefix}_sol_port"))
    return lines + [("Plot", "plot | extract_id")]


def _vm_provider(name: str, label: str, id_field: str, id_label: str) -> ProviderCommands:
    complex_kind = catalog.COMPLEX_TYPES[name].kind
    return _provider(
        name,
        label,
        catalog.FOUNDATION_TYPES[name].kind,
        [("Complex", f"{name}_complex | extract_id"), (id_label, id_field)],
        (_complex_option(name, complex_kind),),
    )


PROVIDERS = (
    _provider("amt", "AMT", catalog.AMT_FOUNDATION, _bmc_lines("amt", "AMT"), _bmc_options("amt", "AMT")),
    _provider(
        "ipmi",
        "IPMI",
        catalog.IPMI_FOUNDATION,
        _bmc_lines("ipmi", "IPMI", sol=True),
        _bmc_options("ipmi", "IPMI", sol=True),
    ),
    _provider(
        "redfish",
        "RedFish",
        catalog.REDFISH_FOUNDATION,
        _bmc_lines("redfish", "RedFish", sol=True),
        _bmc_options("redfish", "RedFish", sol=True),
    ),
    _provider("manual", "Manual", catalog.MANUAL_FOUNDATION, []),
    _vm_provider("libvirt", "LibVirt", "libvirt_uuid", "VM UUID"),
    _vm_provider("proxmox", "Proxmox", "proxmox_vmid", "VM Id"),
    _vm_provider("vcenter", "VCenter", "vcenter_uuid", "VM UUID"),
    _vm_provider("virtualbox", "VirtualBox", "virtualbox_uuid", "VM UUID"),
    _vm_provider("azure", "Azure", "azure_resource_name", "Resource Name"),
    _vm_provider("docker", "Docker", "docker_id", "Container Id"),
    _vm_provider("packet", "Packet", "packet_uuid", "Device UUID"),
    _provider(
        "test",
        "Test",
        catalog.TEST_FOUNDATION,
        [("Delay Variance", "test_delay_variance"), ("Fail Likelihood", "test_fail_likelihood")],
        (
            FieldOption(
                "test_delay_variance", ("--delay", "-d"), "The Variance of operations, in seconds.", type=int
            ),
            FieldOption(
                "test_fail_likelihood",
                ("--fail", "-f"),
                "Likelihood of failures per 1000 per 'run' execution, 0 to disable.",
                type=int,
            ),
        ),
    ),
)


@click.group("foundation")
def foundation() -> None:
    """Work with Foundations."""


@foundation.command("list")
@pass_state
def foundation_list(state: CLIState) -> None:
    """List Foundations."""
    items = state.contractor.accessor(catalog.FOUNDATION).list()
    state.renderer.list(items, FOUNDATION_HEADER, FOUNDATION_ROW)


@foundation.command("get")
@click.argument("foundation_id")
@pass_state
def foundation_get(state: CLIState, foundation_id: str) -> None:
    """Get Foundation."""
    state.renderer.detail(state.contractor.accessor(catalog.FOUNDATION).get(foundation_id), FOUNDATION_DETAIL)


@foundation.command("types")
@pass_state
def foundation_types(state: CLIState) -> None:
    """List Supported Types."""
    state.renderer.kv({"type": state.contractor.supported_types(catalog.FOUNDATION_TYPES)})


@foundation.command("update")
@click.argument("foundation_id")
@click.option("--site", "-s", default=None, help="Update the Site of Foundation with value.")
@click.option("--blueprint", "-b", default=None, help="Update the Blueprint of Foundation with value.")
@pass_state
def foundation_update(state: CLIState, foundation_id: str, site: Optional[str], blueprint: Optional[str]) -> None:
    """Update Foundation."""
    resource = state.contractor.accessor(catalog.FOUNDATION).get(foundation_id)
    field_list = apply_changes(
        resource,
        {
            "site": resolve_uri(state, catalog.SITE, site),
            "blueprint": resolve_uri(state, catalog.FOUNDATION_BLUEPRINT, blueprint),
        },
    )
    state.renderer.detail(resource.update(field_list), FOUNDATION_DETAIL)


@foundation.command("delete")
@click.argument("foundation_id")
@pass_state
def foundation_delete(state: CLIState, foundation_id: str) -> None:
    """Delete Foundation."""
    state.contractor.accessor(catalog.FOUNDATION).get(foundation_id).delete()


@foundation.command("job")
@click.argument("foundation_id")
@click.option("--info", "-i", is_flag=True, default=False, help="Show Running Job Info.")
@click.option("--do-create", "-c", is_flag=True, default=False, help="Submit a Create job.")
@click.option("--do-destroy", "-d", is_flag=True, default=False, help="Submit a Destroy job.")
@click.option("--utility", "-u", default=None, help="Submit Utility Job with this script name.")
@pass_state
def foundation_job(
    state: CLIState,
    foundation_id: str,
    info: bool,
    do_create: bool,
    do_destroy: bool,
    utility: Optional[str],
) -> None:
    """Work with Foundation Jobs."""
    if sum((info, do_create, do_destroy, bool(utility))) != 1:
        raise ArgumentError("Specify exactly one of --info, --do-create, --do-destroy or --utility")

    target = state.contractor.accessor(catalog.FOUNDATION).get(foundation_id)
    if info:
        state.renderer.detail(current_job(state, target, catalog.FOUNDATION_JOB), FOUNDATION_JOB_DETAIL)
    elif do_create:
        state.renderer.kv({"job": target.call("doCreate")})
    elif do_destroy:
        state.renderer.kv({"job": target.call("doDestroy")})
    else:
        state.renderer.kv({"job": target.call("doJob", name=utility)})


for _provider_commands in PROVIDERS:
    foundation.add_command(build_provider_group(_provider_commands, "Foundation"))
