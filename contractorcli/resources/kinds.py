"""Resource kind descriptors.

A ResourceKind describes one server-side model once: where it lives, how it
is identified, which fields may be sent on create and on update, and which
remote actions it exposes. The generic accessor in binding.py does the rest.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ActionSpec(BaseModel):
    """A remote procedure declared on a model (``Model:id:(name)``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    args: tuple[str, ...] = ()
    static: bool = False


class ResourceKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    uri: str
    id_field: Optional[str] = None
    all_fields: tuple[str, ...] = ()
    create_fields: tuple[str, ...] = ()
    update_fields: tuple[str, ...] = ()
    actions: dict[str, ActionSpec] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_field_sets(self) -> "ResourceKind":
        known = set(self.all_fields)
        unknown = (set(self.create_fields) | set(self.update_fields)) - known
        if unknown:
            raise ValueError(f"{self.name}: create/update fields not declared in all_fields: {sorted(unknown)}")
        if self.id_field is not None and self.id_field not in known:
            raise ValueError(f"{self.name}: id field '{self.id_field}' not declared in all_fields")
        return self

    @property
    def namespace_uri(self) -> str:
        return self.uri.rsplit("/", 1)[0] + "/"

    @property
    def create_only_fields(self) -> tuple[str, ...]:
        return tuple(name for name in self.create_fields if name not in self.update_fields)

    def action(self, name: str) -> ActionSpec:
        try:
            return self.actions[name]
        except KeyError:
            raise KeyError(f"{self.name} has no action '{name}'") from None


def kind(
    name: str,
    uri: str,
    fields: tuple[str, ...],
    create: tuple[str, ...],
    update: tuple[str, ...],
    id_field: Optional[str] = None,
    actions: tuple[ActionSpec, ...] = (),
) -> ResourceKind:
    """Shorthand used by the catalog."""
    return ResourceKind(
        name=name,
        uri=uri,
        id_field=id_field,
        all_fields=fields,
        create_fields=create,
        update_fields=update,
        actions={action.name: action for action in actions},
    )
