"""``contractorcli blueprint`` commands: foundation, structure, script and pxe."""

from __future__ import annotations

from typing import Any, Optional

import click

from contractorcli.commands.common import (
    CLIState,
    apply_changes,
    config_options,
    edit_field,
    pass_state,
    read_text_source,
    resolve_uri,
    run_config_command,
    set_fields,
)
from contractorcli.core.exceptions import ArgumentError, NotFoundError
from contractorcli.resources import catalog
from contractorcli.resources.kinds import ResourceKind

BLUEPRINT_HEADER = ["Id", "Name", "Description", "Created", "Updated"]
BLUEPRINT_ROW = "{{ id }}\t{{ name }}\t{{ description }}\t{{ created }}\t{{ updated }}"

FOUNDATION_BLUEPRINT_DETAIL = """Id:                  {{ id }}
Name:                {{ name }}
Description:         {{ description }}
Parents:             {{ parent_list | extract_id_list }}
Config Values:       {{ config_values }}
Foundation Types:    {{ foundation_type_list }}
Validation Template: {{ validation_template }}
Physical Interfaces: {{ physical_interface_names }}
Script Map:          {{ script_map }}
Created:             {{ created }}
Updated:             {{ updated }}
"""

STRUCTURE_BLUEPRINT_DETAIL = """Id:                  {{ id }}
Name:                {{ name }}
Description:         {{ description }}
Parents:             {{ parent_list | extract_id_list }}
Config Values:       {{ config_values }}
Foundation BPs:      {{ foundation_blueprint_list | extract_id_list }}
Script Map:          {{ script_map }}
Created:             {{ created }}
Updated:             {{ updated }}
"""

SCRIPT_DETAIL = """Id:            {{ id }}
Name:          {{ name }}
Description:   {{ description }}
Created:       {{ created }}
Updated:       {{ updated }}
----  Script  ----
{{ script }}
"""

PXE_DETAIL = """Id:                    {{ id }}
Name:                  {{ name }}
Created:               {{ created }}
Updated:               {{ updated }}
----  Script  ----
{{ boot_script }}

----  Template  ----
{{ template }}
"""

PXE_HEADER = ["Id", "Name", "Created", "Updated"]
PXE_ROW = "{{ id }}\t{{ name }}\t{{ created }}\t{{ updated }}"


def _with_item(values: Optional[list[Any]], item: Any) -> list[Any]:
    result = list(values or [])
    if item not in result:
        result.append(item)
    return result


def _without_item(values: Optional[list[Any]], item: Any) -> list[Any]:
    result = list(values or [])
    if item not in result:
        raise ArgumentError(f"'{item}' is not in the list")
    result.remove(item)
    return result


def _edit_list(current: Optional[list[Any]], add: Any = None, remove: Any = None) -> Optional[list[Any]]:
    """New list value after add/remove, or None when neither was requested."""
    if add is None and remove is None:
        return None
    result = list(current or [])
    if add is not None:
        result = _with_item(result, add)
    if remove is not None:
        result = _without_item(result, remove)
    return result


def _generic_blueprint_uri(state: CLIState, blueprint_id: str) -> str:
    return state.contractor.accessor(catalog.BLUEPRINT).object_uri(blueprint_id)


def _link_script(state: CLIState, kind: ResourceKind, blueprint_id: str, script_id: str, link_name: str) -> None:
    blueprint = state.contractor.accessor(kind).get(blueprint_id)
    if link_name in (blueprint["script_map"] or {}):
        raise ArgumentError(f"Blueprint already has a script linked as '{link_name}'")
    script = state.contractor.accessor(catalog.SCRIPT).get(script_id)
    link = state.contractor.accessor(catalog.BLUEPRINT_SCRIPT).new(
        blueprint=_generic_blueprint_uri(state, blueprint.id),
        script=script.uri,
        name=link_name,
    )
    link.create()
    state.renderer.kv({"id": link.id, "name": link_name})


def _unlink_script(state: CLIState, kind: ResourceKind, blueprint_id: str, link_name: str) -> None:
    blueprint = state.contractor.accessor(kind).get(blueprint_id)
    if link_name not in (blueprint["script_map"] or {}):
        raise ArgumentError(f"No script linked to Blueprint as '{link_name}'")
    generic_uri = _generic_blueprint_uri(state, blueprint.id)
    links = state.contractor.accessor(catalog.BLUEPRINT_SCRIPT).list("blueprint", {"blueprint": generic_uri})
    for link in links:
        if link["name"] == link_name:
            link.delete()
            return
    raise NotFoundError(f"No script linked to Blueprint as '{link_name}'")


@click.group("blueprint")
def blueprint() -> None:
    """Work with Blueprints."""


# ---------------------------------------------------------------------------
# Foundation Blueprints
# ---------------------------------------------------------------------------

@blueprint.group("foundation")
def foundation_blueprint() -> None:
    """Work with Foundation Blueprints."""


@foundation_blueprint.command("list")
@pass_state
def foundation_blueprint_list(state: CLIState) -> None:
    """List Foundation Blueprints."""
    items = state.contractor.accessor(catalog.FOUNDATION_BLUEPRINT).list()
    state.renderer.list(items, BLUEPRINT_HEADER, BLUEPRINT_ROW)


@foundation_blueprint.command("get")
@click.argument("blueprint_id")
@pass_state
def foundation_blueprint_get(state: CLIState, blueprint_id: str) -> None:
    """Get Foundation Blueprint."""
    resource = state.contractor.accessor(catalog.FOUNDATION_BLUEPRINT).get(blueprint_id)
    state.renderer.detail(resource, FOUNDATION_BLUEPRINT_DETAIL)


@foundation_blueprint.command("create")
@click.option("--name", "-n", required=True, help="Name of New Foundation Blueprint.")
@click.option("--description", "-d", default=None, help="Description of New Foundation Blueprint.")
@click.option("--type", "-t", "foundation_types", multiple=True, help="Foundation Type, repeat for each type.")
@pass_state
def foundation_blueprint_create(
    state: CLIState, name: str, description: Optional[str], foundation_types: tuple[str, ...]
) -> None:
    """Create New Foundation Blueprint."""
    resource = state.contractor.accessor(catalog.FOUNDATION_BLUEPRINT).new(name=name)
    set_fields(
        resource,
        {
            "description": description,
            "foundation_type_list": list(foundation_types) if foundation_types else None,
        },
    )
    state.renderer.detail(resource.create(), FOUNDATION_BLUEPRINT_DETAIL)


@foundation_blueprint.command("update")
@click.argument("blueprint_id")
@click.option("--description", "-d", default=None, help="Update the Description of the Foundation Blueprint.")
@click.option("--add-parent", "-p", default=None, help="Add Parent to Foundation Blueprint.")
@click.option("--delete-parent", "-q", default=None, help="Remove Parent from Foundation Blueprint.")
@click.option("--add-type", "-t", default=None, help="Add Type to Foundation Blueprint.")
@click.option("--delete-type", "-u", default=None, help="Remove Type from Foundation Blueprint.")
@click.option("--add-iface-name", "-i", default=None, help="Add Physical Interface Name to Foundation Blueprint.")
@click.option(
    "--delete-iface-name", "-k", default=None, help="Remove Physical Interface Name from Foundation Blueprint."
)
@pass_state
def foundation_blueprint_update(
    state: CLIState,
    blueprint_id: str,
    description: Optional[str],
    add_parent: Optional[str],
    delete_parent: Optional[str],
    add_type: Optional[str],
    delete_type: Optional[str],
    add_iface_name: Optional[str],
    delete_iface_name: Optional[str],
) -> None:
    """Update Foundation Blueprint."""
    resource = state.contractor.accessor(catalog.FOUNDATION_BLUEPRINT).get(blueprint_id)
    field_list = apply_changes(
        resource,
        {
            "description": description,
            "parent_list": _edit_list(
                resource["parent_list"],
                resolve_uri(state, catalog.FOUNDATION_BLUEPRINT, add_parent),
                resolve_uri(state, catalog.FOUNDATION_BLUEPRINT, delete_parent),
            ),
            "foundation_type_list": _edit_list(resource["foundation_type_list"], add_type, delete_type),
            "physical_interface_names": _edit_list(
                resource["physical_interface_names"], add_iface_name, delete_iface_name
            ),
        },
    )
    state.renderer.detail(resource.update(field_list), FOUNDATION_BLUEPRINT_DETAIL)


@foundation_blueprint.command("delete")
@click.argument("blueprint_id")
@pass_state
def foundation_blueprint_delete(state: CLIState, blueprint_id: str) -> None:
    """Delete Foundation Blueprint."""
    state.contractor.accessor(catalog.FOUNDATION_BLUEPRINT).get(blueprint_id).delete()


@foundation_blueprint.command("config")
@click.argument("blueprint_id")
@config_options
@pass_state
def foundation_blueprint_config(
    state: CLIState,
    blueprint_id: str,
    full: bool,
    set_name: Optional[str],
    set_value: str,
    delete_name: Optional[str],
) -> None:
    """Work With Foundation Blueprint Config."""
    run_config_command(
        state,
        catalog.FOUNDATION_BLUEPRINT,
        blueprint_id,
        full,
        set_name,
        set_value,
        delete_name,
        full_kind=catalog.BLUEPRINT,
    )


@foundation_blueprint.group("script")
def foundation_blueprint_script() -> None:
    """Work with Foundation Blueprint Scripts."""


@foundation_blueprint_script.command("link")
@click.argument("blueprint_id")
@click.argument("script_id")
@click.argument("link_name")
@pass_state
def foundation_blueprint_script_link(state: CLIState, blueprint_id: str, script_id: str, link_name: str) -> None:
    """Link a Script to a Foundation Blueprint as LINK_NAME (ie: create/destroy)."""
    _link_script(state, catalog.FOUNDATION_BLUEPRINT, blueprint_id, script_id, link_name)


@foundation_blueprint_script.command("unlink")
@click.argument("blueprint_id")
@click.argument("link_name")
@pass_state
def foundation_blueprint_script_unlink(state: CLIState, blueprint_id: str, link_name: str) -> None:
    """UnLink Script from Foundation Blueprint."""
    _unlink_script(state, catalog.FOUNDATION_BLUEPRINT, blueprint_id, link_name)


# ---------------------------------------------------------------------------
# Structure Blueprints
# ---------------------------------------------------------------------------

@blueprint.group("structure")
def structure_blueprint() -> None:
    """Work with Structure Blueprints."""


@structure_blueprint.command("list")
@pass_state
def structure_blueprint_list(state: CLIState) -> None:
    """List Structure Blueprints."""
    items = state.contractor.accessor(catalog.STRUCTURE_BLUEPRINT).list()
    state.renderer.list(items, BLUEPRINT_HEADER, BLUEPRINT_ROW)


@structure_blueprint.command("get")
@click.argument("blueprint_id")
@pass_state
def structure_blueprint_get(state: CLIState, blueprint_id: str) -> None:
    """Get Structure Blueprint."""
    resource = state.contractor.accessor(catalog.STRUCTURE_BLUEPRINT).get(blueprint_id)
    state.renderer.detail(resource, STRUCTURE_BLUEPRINT_DETAIL)


@structure_blueprint.command("create")
@click.option("--name", "-n", required=True, help="Name of New Structure Blueprint.")
@click.option("--description", "-d", default=None, help="Description of New Structure Blueprint.")
@pass_state
def structure_blueprint_create(state: CLIState, name: str, description: Optional[str]) -> None:
    """Create New Structure Blueprint."""
    resource = state.contractor.accessor(catalog.STRUCTURE_BLUEPRINT).new(name=name)
    set_fields(resource, {"description": description})
    state.renderer.detail(resource.create(), STRUCTURE_BLUEPRINT_DETAIL)


@structure_blueprint.command("update")
@click.argument("blueprint_id")
@click.option("--description", "-d", default=None, help="Update the Description of the Structure Blueprint.")
@click.option("--add-parent", "-p", default=None, help="Add Parent to Structure Blueprint.")
@click.option("--delete-parent", "-q", default=None, help="Remove Parent from Structure Blueprint.")
@click.option("--add-foundation-blueprint", "-f", default=None, help="Add Foundation Blueprint to Structure Blueprint.")
@click.option(
    "--delete-foundation-blueprint", "-g", default=None, help="Remove Foundation Blueprint from Structure Blueprint."
)
@pass_state
def structure_blueprint_update(
    state: CLIState,
    blueprint_id: str,
    description: Optional[str],
    add_parent: Optional[str],
    delete_parent: Optional[str],
    add_foundation_blueprint: Optional[str],
    delete_foundation_blueprint: Optional[str],
) -> None:
    """Update Structure Blueprint."""
    resource = state.contractor.accessor(catalog.STRUCTURE_BLUEPRINT).get(blueprint_id)
    field_list = apply_changes(
        resource,
        {
            "description": description,
            "parent_list": _edit_list(
                resource["parent_list"],
                resolve_uri(state, catalog.STRUCTURE_BLUEPRINT, add_parent),
                resolve_uri(state, catalog.STRUCTURE_BLUEPRINT, delete_parent),
            ),
            "foundation_blueprint_list": _edit_list(
                resource["foundation_blueprint_list"],
                resolve_uri(state, catalog.FOUNDATION_BLUEPRINT, add_foundation_blueprint),
                resolve_uri(state, catalog.FOUNDATION_BLUEPRINT, delete_foundation_blueprint),
            ),
        },
    )
    state.renderer.detail(resource.update(field_list), STRUCTURE_BLUEPRINT_DETAIL)


@structure_blueprint.command("delete")
@click.argument("blueprint_id")
@pass_state
def structure_blueprint_delete(state: CLIState, blueprint_id: str) -> None:
    """Delete Structure Blueprint."""
    state.contractor.accessor(catalog.STRUCTURE_BLUEPRINT).get(blueprint_id).delete()


@structure_blueprint.command("config")
@click.argument("blueprint_id")
@config_options
@pass_state
def structure_blueprint_config(
    state: CLIState,
    blueprint_id: str,
    full: bool,
    set_name: Optional[str],
    set_value: str,
    delete_name: Optional[str],
) -> None:
    """Work With Structure Blueprint Config."""
    run_config_command(
        state,
        catalog.STRUCTURE_BLUEPRINT,
        blueprint_id,
        full,
        set_name,
        set_value,
        delete_name,
        full_kind=catalog.BLUEPRINT,
    )


@structure_blueprint.group("script")
def structure_blueprint_script() -> None:
    """Work with Structure Blueprint Scripts."""


@structure_blueprint_script.command("link")
@click.argument("blueprint_id")
@click.argument("script_id")
@click.argument("link_name")
@pass_state
def structure_blueprint_script_link(state: CLIState, blueprint_id: str, script_id: str, link_name: str) -> None:
    """Link a Script to a Structure Blueprint as LINK_NAME (ie: create/destroy)."""
    _link_script(state, catalog.STRUCTURE_BLUEPRINT, blueprint_id, script_id, link_name)


@structure_blueprint_script.command("unlink")
@click.argument("blueprint_id")
@click.argument("link_name")
@pass_state
def structure_blueprint_script_unlink(state: CLIState, blueprint_id: str, link_name: str) -> None:
    """UnLink Script from Structure Blueprint."""
    _unlink_script(state, catalog.STRUCTURE_BLUEPRINT, blueprint_id, link_name)


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------

@blueprint.group("script")
def script() -> None:
    """Work with Blueprint Scripts."""


@script.command("list")
@pass_state
def script_list(state: CLIState) -> None:
    """List Scripts."""
    state.renderer.list(state.contractor.accessor(catalog.SCRIPT).list(), BLUEPRINT_HEADER, BLUEPRINT_ROW)


@script.command("get")
@click.argument("script_id")
@pass_state
def script_get(state: CLIState, script_id: str) -> None:
    """Get Script."""
    state.renderer.detail(state.contractor.accessor(catalog.SCRIPT).get(script_id), SCRIPT_DETAIL)


@script.command("create")
@click.option("--name", "-n", required=True, help="Name of New Script.")
@click.option("--description", "-d", default=None, help="Description of New Script.")
@click.option("--file", "-f", "script_file", default=None, help="File to supply the script, '-' for stdin.")
@pass_state
def script_create(state: CLIState, name: str, description: Optional[str], script_file: Optional[str]) -> None:
    """Create New Script."""
    resource = state.contractor.accessor(catalog.SCRIPT).new(name=name)
    set_fields(
        resource,
        {
            "description": description,
            "script": read_text_source(script_file) if script_file else None,
        },
    )
    state.renderer.detail(resource.create(), SCRIPT_DETAIL)


@script.command("update")
@click.argument("script_id")
@click.option("--description", "-d", default=None, help="Update the Description of the Script.")
@pass_state
def script_update(state: CLIState, script_id: str, description: Optional[str]) -> None:
    """Update Script."""
    resource = state.contractor.accessor(catalog.SCRIPT).get(script_id)
    field_list = apply_changes(resource, {"description": description})
    state.renderer.detail(resource.update(field_list), SCRIPT_DETAIL)


@script.command("delete")
@click.argument("script_id")
@pass_state
def script_delete(state: CLIState, script_id: str) -> None:
    """Delete Script."""
    state.contractor.accessor(catalog.SCRIPT).get(script_id).delete()


@script.command("edit")
@click.argument("script_id")
@click.option(
    "--file", "-f", "script_file", default=None, help="File to supply the script, '-' for stdin, omit for editor."
)
@pass_state
def script_edit(state: CLIState, script_id: str, script_file: Optional[str]) -> None:
    """Edit the Script body."""
    resource = state.contractor.accessor(catalog.SCRIPT).get(script_id)
    edit_field(state, resource, "script", script_file)


# ---------------------------------------------------------------------------
# PXE
# ---------------------------------------------------------------------------

@blueprint.group("pxe")
def pxe() -> None:
    """Work with PXEs."""


@pxe.command("list")
@pass_state
def pxe_list(state: CLIState) -> None:
    """List PXEs."""
    state.renderer.list(state.contractor.accessor(catalog.PXE).list(), PXE_HEADER, PXE_ROW)


@pxe.command("get")
@click.argument("pxe_id")
@pass_state
def pxe_get(state: CLIState, pxe_id: str) -> None:
    """Get PXE."""
    state.renderer.detail(state.contractor.accessor(catalog.PXE).get(pxe_id), PXE_DETAIL)


@pxe.command("create")
@click.option("--name", "-n", required=True, help="Name of New PXE.")
@click.option("--script-file", "-s", default=None, help="File to supply the boot script, '-' for stdin.")
@click.option("--template-file", "-t", default=None, help="File to supply the template, '-' for stdin.")
@pass_state
def pxe_create(state: CLIState, name: str, script_file: Optional[str], template_file: Optional[str]) -> None:
    """Create New PXE."""
    if script_file == "-" and template_file == "-":
        raise ArgumentError("Only one of --script-file and --template-file can read stdin")
    resource = state.contractor.accessor(catalog.PXE).new(name=name)
    set_fields(
        resource,
        {
            "boot_script": read_text_source(script_file) if script_file else None,
            "template": read_text_source(template_file) if template_file else None,
        },
    )
    state.renderer.detail(resource.create(), PXE_DETAIL)


@pxe.command("delete")
@click.argument("pxe_id")
@pass_state
def pxe_delete(state: CLIState, pxe_id: str) -> None:
    """Delete PXE."""
    state.contractor.accessor(catalog.PXE).get(pxe_id).delete()


@pxe.command("editscript")
@click.argument("pxe_id")
@click.option("--file", "-f", "script_file", default=None, help="File to supply the script, '-' for stdin.")
@pass_state
def pxe_edit_script(state: CLIState, pxe_id: str, script_file: Optional[str]) -> None:
    """Edit the PXE boot script."""
    resource = state.contractor.accessor(catalog.PXE).get(pxe_id)
    edit_field(state, resource, "boot_script", script_file)


@pxe.command("edittemplate")
@click.argument("pxe_id")
@click.option("--file", "-f", "template_file", default=None, help="File to supply the template, '-' for stdin.")
@pass_state
def pxe_edit_template(state: CLIState, pxe_id: str, template_file: Optional[str]) -> None:
    """Edit the PXE template."""
    resource = state.contractor.accessor(catalog.PXE).get(pxe_id)
    edit_field(state, resource, "template", template_file)
