"""Resource kinds exposed by the Contractor API.

Each model is declared once: its URI, identity field (None when the server
assigns an integer id), every field it returns, and the fields accepted on
create and on update.
"""

from __future__ import annotations

from dataclasses import dataclass

from contractorcli.resources.kinds import ActionSpec, ResourceKind, kind

_STAMPS = ("created", "updated")

# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------

SITE = kind(
    "Site",
    "/api/v1/Site/Site",
    fields=("name", "zone", "description", "parent", "config_values") + _STAMPS,
    create=("name", "zone", "description", "parent", "config_values"),
    update=("zone", "description", "parent", "config_values"),
    id_field="name",
    actions=(ActionSpec(name="getConfig"), ActionSpec(name="getDependencyMap")),
)

# ---------------------------------------------------------------------------
# BluePrint
# ---------------------------------------------------------------------------

BLUEPRINT = kind(
    "BluePrint",
    "/api/v1/BluePrint/BluePrint",
    fields=("name", "description", "parent_list", "config_values", "script_map") + _STAMPS,
    create=(),
    update=(),
    id_field="name",
    actions=(ActionSpec(name="getConfig"),),
)

_FOUNDATION_BLUEPRINT_EDITABLE = (
    "description",
    "parent_list",
    "config_values",
    "foundation_type_list",
    "template",
    "physical_interface_names",
    "validation_template",
)

FOUNDATION_BLUEPRINT = kind(
    "FoundationBluePrint",
    "/api/v1/BluePrint/FoundationBluePrint",
    fields=("name",) + _FOUNDATION_BLUEPRINT_EDITABLE + ("script_map",) + _STAMPS,
    create=("name",) + _FOUNDATION_BLUEPRINT_EDITABLE,
    update=_FOUNDATION_BLUEPRINT_EDITABLE,
    id_field="name",
    actions=(ActionSpec(name="getConfig"),),
)

_STRUCTURE_BLUEPRINT_EDITABLE = ("description", "parent_list", "config_values", "foundation_blueprint_list")

STRUCTURE_BLUEPRINT = kind(
    "StructureBluePrint",
    "/api/v1/BluePrint/StructureBluePrint",
    fields=("name",) + _STRUCTURE_BLUEPRINT_EDITABLE + ("script_map",) + _STAMPS,
    create=("name",) + _STRUCTURE_BLUEPRINT_EDITABLE,
    update=_STRUCTURE_BLUEPRINT_EDITABLE,
    id_field="name",
    actions=(ActionSpec(name="getConfig"),),
)

SCRIPT = kind(
    "Script",
    "/api/v1/BluePrint/Script",
    fields=("name", "description", "script") + _STAMPS,
    create=("name", "description", "script"),
    update=("description", "script"),
    id_field="name",
)

BLUEPRINT_SCRIPT = kind(
    "BluePrintScript",
    "/api/v1/BluePrint/BluePrintScript",
    fields=("blueprint", "script", "name") + _STAMPS,
    create=("blueprint", "script", "name"),
    update=("script",),
)

PXE = kind(
    "PXE",
    "/api/v1/BluePrint/PXE",
    fields=("name", "boot_script", "template") + _STAMPS,
    create=("name", "boot_script", "template"),
    update=("boot_script", "template"),
    id_field="name",
)

# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------

_FOUNDATION_FIELDS = (
    "locator",
    "site",
    "blueprint",
    "id_map",
    "class_list",
    "state",
    "located_at",
    "built_at",
    "type",
    "structure",
) + _STAMPS

_FOUNDATION_ACTIONS = (
    ActionSpec(name="getConfig"),
    ActionSpec(name="getJob"),
    ActionSpec(name="doCreate"),
    ActionSpec(name="doDestroy"),
    ActionSpec(name="doJob", args=("name",)),
)

FOUNDATION = kind(
    "Foundation",
    "/api/v1/Building/Foundation",
    fields=_FOUNDATION_FIELDS,
    create=("locator", "site", "blueprint"),
    update=("site", "blueprint"),
    id_field="locator",
    actions=_FOUNDATION_ACTIONS,
)


def _foundation_subtype(name: str, namespace: str, extra: tuple[str, ...]) -> ResourceKind:
    return kind(
        f"{name}Foundation",
        f"/api/v1/{namespace}/{name}Foundation",
        fields=_FOUNDATION_FIELDS + extra,
        create=("locator", "site", "blueprint") + extra,
        update=("site", "blueprint") + extra,
        id_field="locator",
        actions=_FOUNDATION_ACTIONS,
    )


AMT_FOUNDATION = _foundation_subtype("AMT", "AMT", ("amt_username", "amt_password", "amt_ip_address", "plot"))
IPMI_FOUNDATION = _foundation_subtype(
    "IPMI", "IPMI", ("ipmi_username", "ipmi_password", "ipmi_ip_address", "ipmi_sol_port", "plot")
)
REDFISH_FOUNDATION = _foundation_subtype(
    "RedFish", "RedFish", ("redfish_username", "redfish_password", "redfish_ip_address", "redfish_sol_port", "plot")
)
MANUAL_FOUNDATION = _foundation_subtype("Manual", "Manual", ())
LIBVIRT_FOUNDATION = _foundation_subtype("LibVirt", "LibVirt", ("libvirt_complex", "libvirt_uuid"))
PROXMOX_FOUNDATION = _foundation_subtype("Proxmox", "Proxmox", ("proxmox_complex", "proxmox_vmid"))
VCENTER_FOUNDATION = _foundation_subtype("VCenter", "VCenter", ("vcenter_complex", "vcenter_uuid"))
VIRTUALBOX_FOUNDATION = _foundation_subtype("VirtualBox", "VirtualBox", ("virtualbox_complex", "virtualbox_uuid"))
AZURE_FOUNDATION = _foundation_subtype("Azure", "Azure", ("azure_complex", "azure_resource_name"))
DOCKER_FOUNDATION = _foundation_subtype("Docker", "Docker", ("docker_complex", "docker_id"))
PACKET_FOUNDATION = _foundation_subtype("Packet", "Packet", ("packet_complex", "packet_uuid"))
TEST_FOUNDATION = _foundation_subtype("Test", "Test", ("test_fail_likelihood", "test_delay_variance"))

STRUCTURE = kind(
    "Structure",
    "/api/v1/Building/Structure",
    fields=(
        "hostname",
        "site",
        "blueprint",
        "foundation",
        "config_uuid",
        "config_values",
        "state",
        "built_at",
    )
    + _STAMPS,
    create=("hostname", "site", "blueprint", "foundation", "config_values"),
    update=("hostname", "site", "blueprint", "foundation", "config_values"),
    actions=_FOUNDATION_ACTIONS,
)

_COMPLEX_FIELDS = ("name", "site", "description", "type", "state", "members", "built_percentage") + _STAMPS

COMPLEX = kind(
    "Complex",
    "/api/v1/Building/Complex",
    fields=_COMPLEX_FIELDS,
    create=("name", "site", "description", "members", "built_percentage"),
    update=("site", "description", "members", "built_percentage"),
    id_field="name",
)


def _complex_subtype(name: str, namespace: str, extra: tuple[str, ...]) -> ResourceKind:
    return kind(
        f"{name}Complex",
        f"/api/v1/{namespace}/{name}Complex",
        fields=_COMPLEX_FIELDS + extra,
        create=("name", "site", "description", "members", "built_percentage") + extra,
        update=("site", "description", "members", "built_percentage") + extra,
        id_field="name",
    )


MANUAL_COMPLEX = _complex_subtype("Manual", "Manual", ())
DOCKER_COMPLEX = _complex_subtype("Docker", "Docker", ())
LIBVIRT_COMPLEX = _complex_subtype("LibVirt", "LibVirt", ())
PROXMOX_COMPLEX = _complex_subtype("Proxmox", "Proxmox", ("proxmox_username", "proxmox_password"))
VCENTER_COMPLEX = _complex_subtype(
    "VCenter",
    "VCenter",
    ("vcenter_host", "vcenter_username", "vcenter_password", "vcenter_datacenter", "vcenter_cluster"),
)
VIRTUALBOX_COMPLEX = _complex_subtype("VirtualBox", "VirtualBox", ("virtualbox_username", "virtualbox_password"))
AZURE_COMPLEX = _complex_subtype(
    "Azure",
    "Azure",
    (
        "azure_subscription_id",
        "azure_location",
        "azure_resource_group",
        "azure_client_id",
        "azure_password",
        "azure_tenant_id",
    ),
)
PACKET_COMPLEX = _complex_subtype("Packet", "Packet", ("packet_auth_token", "packet_project", "packet_facility"))

# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

NETWORK = kind(
    "Network",
    "/api/v1/Utilities/Network",
    fields=("name", "site", "mtu") + _STAMPS,
    create=("name", "site", "mtu"),
    update=("name", "site", "mtu"),
)

NETWORK_ADDRESS_BLOCK = kind(
    "NetworkAddressBlock",
    "/api/v1/Utilities/NetworkAddressBlock",
    fields=("network", "address_block", "vlan") + _STAMPS,
    create=("network", "address_block", "vlan"),
    update=("vlan",),
)

ADDRESS_BLOCK = kind(
    "AddressBlock",
    "/api/v1/Utilities/AddressBlock",
    fields=(
        "site",
        "name",
        "subnet",
        "prefix",
        "gateway_offset",
        "netmask",
        "gateway",
        "max_address",
        "size",
    )
    + _STAMPS,
    create=("site", "name", "subnet", "prefix", "gateway_offset"),
    update=("site", "name", "subnet", "prefix", "gateway_offset"),
    actions=(
        ActionSpec(name="usage"),
        ActionSpec(name="nextAddress", args=("networked", "interface_name", "is_primary")),
    ),
)

ADDRESS = kind(
    "Address",
    "/api/v1/Utilities/Address",
    fields=(
        "networked",
        "address_block",
        "offset",
        "interface_name",
        "alias_index",
        "is_primary",
        "ip_address",
        "type",
    )
    + _STAMPS,
    create=("networked", "address_block", "offset", "interface_name", "alias_index", "is_primary"),
    update=("address_block", "offset", "interface_name", "alias_index", "is_primary"),
)

RESERVED_ADDRESS = kind(
    "ReservedAddress",
    "/api/v1/Utilities/ReservedAddress",
    fields=("address_block", "offset", "reason", "ip_address", "type") + _STAMPS,
    create=("address_block", "offset", "reason"),
    update=("reason",),
)

DYNAMIC_ADDRESS = kind(
    "DynamicAddress",
    "/api/v1/Utilities/DynamicAddress",
    fields=("address_block", "offset", "pxe", "ip_address", "type") + _STAMPS,
    create=("address_block", "offset", "pxe"),
    update=("pxe",),
)

NETWORK_INTERFACE = kind(
    "AbstractNetworkInterface",
    "/api/v1/Utilities/AbstractNetworkInterface",
    fields=("structure", "name", "network", "type") + _STAMPS,
    create=("structure", "name", "network"),
    update=("name", "network"),
)

AGGREGATED_NETWORK_INTERFACE = kind(
    "AggregatedNetworkInterface",
    "/api/v1/Utilities/AggregatedNetworkInterface",
    fields=("structure", "name", "network", "type", "primary_interface", "secondary_interfaces") + _STAMPS,
    create=("structure", "name", "network", "primary_interface", "secondary_interfaces"),
    update=("name", "network", "primary_interface", "secondary_interfaces"),
)

# ---------------------------------------------------------------------------
# Foreman
# ---------------------------------------------------------------------------

_JOB_FIELDS = ("site", "state", "status", "message", "script_name", "can_start", "progress") + _STAMPS

_JOB_ACTIONS = (
    ActionSpec(name="pause"),
    ActionSpec(name="resume"),
    ActionSpec(name="reset"),
    ActionSpec(name="rollback"),
    ActionSpec(name="jobRunnerVariables"),
    ActionSpec(name="jobRunnerState"),
)

FOUNDATION_JOB = kind(
    "FoundationJob",
    "/api/v1/Foreman/FoundationJob",
    fields=("foundation",) + _JOB_FIELDS,
    create=(),
    update=(),
    actions=_JOB_ACTIONS,
)

STRUCTURE_JOB = kind(
    "StructureJob",
    "/api/v1/Foreman/StructureJob",
    fields=("structure",) + _JOB_FIELDS,
    create=(),
    update=(),
    actions=_JOB_ACTIONS,
)

JOB_LOG = kind(
    "JobLog",
    "/api/v1/Foreman/JobLog",
    fields=(
        "site",
        "foundation",
        "structure",
        "script_name",
        "creator",
        "started_at",
        "finished_at",
        "canceled_by",
        "canceled_at",
    )
    + _STAMPS,
    create=(),
    update=(),
)

# ---------------------------------------------------------------------------
# Survey
# ---------------------------------------------------------------------------

PLOT = kind(
    "Plot",
    "/api/v1/Survey/Plot",
    fields=("name", "corners", "parent") + _STAMPS,
    create=("name", "corners", "parent"),
    update=("corners", "parent"),
    id_field="name",
)

CARTOGRAPHER = kind(
    "Cartographer",
    "/api/v1/Survey/Cartographer",
    fields=("identifier", "message", "foundation", "last_checkin", "info_map") + _STAMPS,
    create=(),
    update=(),
    id_field="identifier",
    actions=(ActionSpec(name="assign", args=("foundation",)),),
)

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

RECORDER = kind(
    "Recorder",
    "/api/v1/Records/Recorder",
    fields=(),
    create=(),
    update=(),
    actions=(
        ActionSpec(name="query", args=("group", "query", "fields", "max_results"), static=True),
        ActionSpec(name="query_objects", args=("group", "query", "max_results"), static=True),
    ),
)

# ---------------------------------------------------------------------------
# Provider type tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderType:
    """A pluggable provider: its kind and the API version the CLI speaks."""

    kind: ResourceKind
    api_version: str = "0.1"

    @property
    def namespace_uri(self) -> str:
        return self.kind.namespace_uri


FOUNDATION_TYPES: dict[str, ProviderType] = {
    "amt": ProviderType(AMT_FOUNDATION),
    "ipmi": ProviderType(IPMI_FOUNDATION),
    "redfish": ProviderType(REDFISH_FOUNDATION),
    "manual": ProviderType(MANUAL_FOUNDATION),
    "libvirt": ProviderType(LIBVIRT_FOUNDATION),
    "proxmox": ProviderType(PROXMOX_FOUNDATION),
    "vcenter": ProviderType(VCENTER_FOUNDATION),
    "virtualbox": ProviderType(VIRTUALBOX_FOUNDATION),
    "azure": ProviderType(AZURE_FOUNDATION),
    "docker": ProviderType(DOCKER_FOUNDATION),
    "packet": ProviderType(PACKET_FOUNDATION),
    "test": ProviderType(TEST_FOUNDATION),
}

COMPLEX_TYPES: dict[str, ProviderType] = {
    "manual": ProviderType(MANUAL_COMPLEX),
    "docker": ProviderType(DOCKER_COMPLEX),
    "libvirt": ProviderType(LIBVIRT_COMPLEX),
    "proxmox": ProviderType(PROXMOX_COMPLEX),
    "vcenter": ProviderType(VCENTER_COMPLEX),
    "virtualbox": ProviderType(VIRTUALBOX_COMPLEX),
    "azure": ProviderType(AZURE_COMPLEX),
    "packet": ProviderType(PACKET_COMPLEX),
}

KINDS: dict[str, ResourceKind] = {
    item.name: item
    for item in (
        SITE,
        BLUEPRINT,
        FOUNDATION_BLUEPRINT,
        STRUCTURE_BLUEPRINT,
        SCRIPT,
        BLUEPRINT_SCRIPT,
        PXE,
        FOUNDATION,
        STRUCTURE,
        COMPLEX,
        NETWORK,
        NETWORK_ADDRESS_BLOCK,
        ADDRESS_BLOCK,
        ADDRESS,
        RESERVED_ADDRESS,
        DYNAMIC_ADDRESS,
        NETWORK_INTERFACE,
        AGGREGATED_NETWORK_INTERFACE,
        FOUNDATION_JOB,
        STRUCTURE_JOB,
        JOB_LOG,
        PLOT,
        CARTOGRAPHER,
        RECORDER,
    )
    + tuple(provider.kind for provider in FOUNDATION_TYPES.values())
    + tuple(provider.kind for provider in COMPLEX_TYPES.values())
}
