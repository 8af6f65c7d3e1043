"""Shared plumbing for CLI command modules."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import click
import httpx

from contractorcli.core.config import AppConfig, load_config
from contractorcli.core.exceptions import ArgumentError, ContractorCLIError, ValidationError
from contractorcli.output.render import Renderer
from contractorcli.resources.binding import Resource
from contractorcli.resources.contractor import Contractor
from contractorcli.resources.kinds import ResourceKind

logger = logging.getLogger("contractorcli.cli")

EDITOR_ENV_VARS = ("CONTRACTORCLI_EDITOR", "EDITOR")


@dataclass
class CLIState:
    """Per-invocation state stored on the click context."""

    config_path: Optional[Path] = None
    as_json: bool = False
    verbose: bool = False
    transport: Optional[httpx.BaseTransport] = None
    _config: Optional[AppConfig] = field(default=None, repr=False)
    _contractor: Optional[Contractor] = field(default=None, repr=False)
    _renderer: Optional[Renderer] = field(default=None, repr=False)

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            self._renderer = Renderer(as_json=self.as_json)
        return self._renderer

    @property
    def contractor(self) -> Contractor:
        """Session opened on first use and closed when the command finishes."""
        if self._contractor is None:
            contractor = Contractor(self.config.contractor, transport=self.transport)
            ctx = click.get_current_context(silent=True)
            if ctx is not None:
                ctx.find_root().call_on_close(lambda: _close_session(contractor))
            contractor.open()
            self._contractor = contractor
        return self._contractor


pass_state = click.make_pass_decorator(CLIState, ensure=True)


def _enable_json(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    if value:
        state = ctx.ensure_object(CLIState)
        state.as_json = True
        if state._renderer is not None:
            state._renderer.as_json = True
    return value


def json_option(command: click.Command) -> click.Command:
    """Accept ``--json/-j`` on the command itself, not only on the root group."""
    command.params.append(
        click.Option(
            ["--json", "-j"],
            is_flag=True,
            default=False,
            expose_value=False,
            callback=_enable_json,
            help="Output as JSON.",
        )
    )
    return command


def add_json_options(group: click.Group) -> None:
    """Attach json_option to every leaf command below group."""
    for command in group.commands.values():
        if isinstance(command, click.Group):
            add_json_options(command)
        else:
            json_option(command)


def _close_session(contractor: Contractor) -> None:
    """Close the session; a failed logout is logged, not raised."""
    try:
        contractor.close()
    except ContractorCLIError as exc:
        logger.warning("Logout failed: %s", exc)


def resolve_uri(state: CLIState, kind: ResourceKind, object_id: Any) -> Optional[str]:
    """Look up a cross reference given on the command line; None when not given."""
    if object_id is None or object_id == "":
        return None
    return state.contractor.accessor(kind).get(object_id).uri


def apply_changes(resource: Resource, changes: dict[str, Any]) -> list[str]:
    """Set every change that carries a value and return the touched field names."""
    field_list = []
    for name, value in changes.items():
        if value is None:
            continue
        resource[name] = value
        field_list.append(name)
    return field_list


def set_fields(resource: Resource, values: dict[str, Any]) -> Resource:
    for name, value in values.items():
        if value is not None:
            resource[name] = value
    return resource


# ---------------------------------------------------------------------------
# Config values
# ---------------------------------------------------------------------------

def config_options(func):
    func = click.option(
        "--delete", "-d", "delete_name", default=None, help="Delete Config Value Key Name."
    )(func)
    func = click.option(
        "--set-value", "-v", "set_value", default="", help="Config Value, ignored without --set-name."
    )(func)
    func = click.option(
        "--set-name", "-n", "set_name", default=None, help="Set Config Value Key Name (value defaults to '')."
    )(func)
    func = click.option("--full", "-f", is_flag=True, default=False, help="Display the Full/Compiled config.")(func)
    return func


def run_config_command(
    state: CLIState,
    kind: ResourceKind,
    object_id: str,
    full: bool,
    set_name: Optional[str],
    set_value: str,
    delete_name: Optional[str],
    full_kind: Optional[ResourceKind] = None,
) -> None:
    """Show, set or delete config_values, or show the compiled config."""
    accessor = state.contractor.accessor(kind)
    if set_name:
        resource = accessor.get(object_id)
        config_values = dict(resource["config_values"] or {})
        config_values[set_name] = set_value
        resource["config_values"] = config_values
        resource.update(["config_values"])
        state.renderer.kv(resource["config_values"] or {})
    elif delete_name:
        resource = accessor.get(object_id)
        config_values = dict(resource["config_values"] or {})
        if delete_name not in config_values:
            raise ArgumentError(f"Config value '{delete_name}' is not set")
        del config_values[delete_name]
        resource["config_values"] = config_values
        resource.update(["config_values"])
        state.renderer.kv(resource["config_values"] or {})
    elif full:
        target = state.contractor.accessor(full_kind or kind).new_with_id(object_id)
        state.renderer.kv(target.call("getConfig") or {})
    else:
        resource = accessor.get(object_id)
        state.renderer.kv(resource["config_values"] or {})


# ---------------------------------------------------------------------------
# Text editing
# ---------------------------------------------------------------------------

def read_text_source(source: str) -> str:
    """Read replacement text from a file path, or stdin when source is '-'."""
    if source == "-":
        return click.get_text_stream("stdin").read().strip()
    try:
        return Path(source).read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ArgumentError(f"Unable to read '{source}': {exc}") from exc


def edit_text(initial: str) -> str:
    """Open the user's editor on initial text; returns it unchanged if not saved."""
    editor = next((os.environ[name] for name in EDITOR_ENV_VARS if os.environ.get(name)), None)
    edited = click.edit(initial or "", editor=editor, require_save=False)
    return (edited if edited is not None else initial or "").strip()


def edit_field(state: CLIState, resource: Resource, field_name: str, source: Optional[str]) -> bool:
    """Replace one text field from a file/stdin or the editor and save it.

    When editing interactively a rejected value offers to reopen the editor.
    Returns False when the user gives up.
    """
    current = resource[field_name] or ""
    while True:
        resource[field_name] = read_text_source(source) if source else edit_text(current)
        try:
            resource.update([field_name])
        except ValidationError as exc:
            if source or field_name not in exc.field_errors:
                raise
            click.echo(f"Error parsing the {field_name}: {exc}", err=True)
            if click.confirm("Return to Editor?", default=True):
                current = resource[field_name]
                continue
            state.renderer.message("Aborting")
            return False
        state.renderer.message("Changes Saved")
        return True
