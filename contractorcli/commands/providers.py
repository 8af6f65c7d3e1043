"""Builds the per-provider ``get``/``create``/``update`` command groups.

Foundation and Complex providers differ only in their kind, the extra
fields they carry and the options that set those fields, so each provider
is described by a ProviderCommands value and turned into a click group by
build_provider_group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import click

from contractorcli.commands.common import CLIState, apply_changes, pass_state, resolve_uri, set_fields
from contractorcli.resources.kinds import ResourceKind


@dataclass(frozen=True)
class FieldOption:
    """A command line option that sets one resource field."""

    field_name: str
    flags: tuple[str, ...]
    help: str
    reference: Optional[ResourceKind] = None
    type: Any = None
    multiple: bool = False
    create_only: bool = False
    required_on_create: bool = False
    create_default: Any = None

    def decorator(self, creating: bool) -> Callable:
        kwargs: dict[str, Any] = {"help": self.help}
        if self.type is not None:
            kwargs["type"] = self.type
        if self.multiple:
            kwargs["multiple"] = True
        elif creating and self.required_on_create:
            # an explicit default, even None, satisfies click's required check
            kwargs["required"] = True
        elif creating and self.create_default is not None:
            kwargs["default"] = self.create_default
            kwargs["show_default"] = True
        return click.option(*self.flags, self.field_name, **kwargs)

    def resolve(self, state: CLIState, value: Any) -> Any:
        """Convert the option value to the field value; None when not given."""
        if self.multiple:
            if not value:
                return None
            if self.reference is None:
                return list(value)
            return [resolve_uri(state, self.reference, item) for item in value]
        if value is None:
            return None
        if self.reference is not None:
            return resolve_uri(state, self.reference, value)
        return value


@dataclass(frozen=True)
class ProviderCommands:
    name: str
    label: str
    kind: ResourceKind
    detail: str
    options: tuple[FieldOption, ...] = ()


def detail_template(lines: list[tuple[str, str]]) -> str:
    """A detail template from (label, jinja expression) pairs."""
    width = max(len(label) for label, _ in lines) + 2
    return "".join(f"{(label + ':').ljust(width)}{{{{ {expression} }}}}\n" for label, expression in lines)


def _apply_options(func: Callable, options: tuple[FieldOption, ...], creating: bool) -> Callable:
    for option in reversed(options):
        func = option.decorator(creating)(func)
    return func


def build_provider_group(provider: ProviderCommands, group_noun: str) -> click.Group:
    kind = provider.kind
    update_options = tuple(option for option in provider.options if not option.create_only)

    @click.group(provider.name, help=f"Work with {provider.label} {group_noun}s.")
    def group() -> None:
        pass

    @group.command("get", help=f"Get {provider.label} {group_noun}.")
    @click.argument("object_id")
    @pass_state
    def provider_get(state: CLIState, object_id: str) -> None:
        state.renderer.detail(state.contractor.accessor(kind).get(object_id), provider.detail)

    def _resolved(state: CLIState, options: tuple[FieldOption, ...], values: dict[str, Any]) -> dict[str, Any]:
        return {option.field_name: option.resolve(state, values[option.field_name]) for option in options}

    def provider_create(state: CLIState, **values: Any) -> None:
        resource = state.contractor.accessor(kind).new()
        set_fields(resource, _resolved(state, provider.options, values))
        state.renderer.detail(resource.create(), provider.detail)

    def provider_update(state: CLIState, object_id: str, **values: Any) -> None:
        resource = state.contractor.accessor(kind).get(object_id)
        field_list = apply_changes(resource, _resolved(state, update_options, values))
        state.renderer.detail(resource.update(field_list), provider.detail)

    create_callback = _apply_options(pass_state(provider_create), provider.options, creating=True)
    group.command("create", help=f"Create New {provider.label} {group_noun}.")(create_callback)

    update_callback = _apply_options(pass_state(provider_update), update_options, creating=False)
    update_callback = click.argument("object_id")(update_callback)
    group.command("update", help=f"Update {provider.label} {group_noun}.")(update_callback)

    return group
