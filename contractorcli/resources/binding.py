"""Generic resource binding.

One ResourceAccessor per ResourceKind replaces a hand-written class per
server model. A Resource is a thin holder for (uri, values) that knows which
fields it may send on create and update.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from contractorcli.cinp import uri as cinp_uri
from contractorcli.cinp.client import LIST_CHUNK_SIZE, CInPClient
from contractorcli.core.exceptions import ArgumentError, UnboundResourceError
from contractorcli.resources.kinds import ActionSpec, ResourceKind

logger = logging.getLogger("contractorcli.resources")


class Resource:
    """A single server object of one kind."""

    def __init__(
        self,
        accessor: "ResourceAccessor",
        uri: Optional[str] = None,
        values: Optional[dict[str, Any]] = None,
    ):
        self._accessor = accessor
        self.uri = uri
        self.values: dict[str, Any] = dict(values or {})

    def __repr__(self) -> str:
        return f"<{self.kind.name} {self.uri or '(unsaved)'}>"

    @property
    def kind(self) -> ResourceKind:
        return self._accessor.kind

    @property
    def id(self) -> str:
        return cinp_uri.extract_id(self.uri)

    @property
    def is_bound(self) -> bool:
        return self.uri is not None

    def __getitem__(self, name: str) -> Any:
        return self.values.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        if name not in self.kind.all_fields:
            raise ArgumentError(f"{self.kind.name} has no field '{name}'")
        self.values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, **self.values}

    # ------------------------------------------------------------------
    # Server operations
    # ------------------------------------------------------------------

    def create(self) -> "Resource":
        """Send the create-eligible fields that are set and bind the identity."""
        payload = {name: self.values[name] for name in self.kind.create_fields if name in self.values}
        object_uri, values = self._accessor.client.create(self.kind.uri, payload)
        self.uri = object_uri
        self.values.update(values)
        logger.info("Created %s %s", self.kind.name, object_uri)
        return self

    def update(self, field_list: list[str]) -> "Resource":
        """Persist exactly the named fields.

        Names outside the kind's update set raise ArgumentError. An empty
        field_list is a no-op.
        """
        self._require_identity("update")
        ineligible = [name for name in field_list if name not in self.kind.update_fields]
        if ineligible:
            raise ArgumentError(
                f"{self.kind.name} fields not updatable: {', '.join(ineligible)}"
                f" (updatable: {', '.join(self.kind.update_fields) or 'none'})"
            )
        if not field_list:
            logger.debug("Nothing to update on %s", self.uri)
            return self

        payload = {name: self.values.get(name) for name in field_list}
        values = self._accessor.client.update(self.uri, payload)
        self.values.update(values)
        logger.info("Updated %s %s: %s", self.kind.name, self.uri, ", ".join(field_list))
        return self

    def delete(self) -> None:
        self._require_identity("delete")
        self._accessor.client.delete(self.uri)
        logger.info("Deleted %s %s", self.kind.name, self.uri)

    def refresh(self) -> "Resource":
        self._require_identity("refresh")
        self.values = self._accessor.client.get(self.uri)
        return self

    def call(self, action: str, **args: Any) -> Any:
        spec = self._accessor.action_spec(action, args)
        if spec.static:
            return self._accessor.call(action, **args)
        self._require_identity(f"call {action} on")
        return self._accessor.client.call(cinp_uri.build(self.uri, action=action), args)

    def _require_identity(self, operation: str) -> None:
        if self.uri is None:
            raise UnboundResourceError(self.kind.name, operation)


class ResourceAccessor:
    """Typed entry point for one resource kind."""

    def __init__(self, client: CInPClient, kind: ResourceKind):
        self.client = client
        self.kind = kind

    def object_uri(self, object_id: Any) -> str:
        """URI for an id; an already complete URI of this kind passes through."""
        value = str(object_id)
        if value.startswith(self.kind.uri + ":"):
            return value
        if value == "":
            raise ArgumentError(f"{self.kind.name} id must not be empty")
        return cinp_uri.build(self.kind.uri, [value])

    def new(self, **values: Any) -> Resource:
        resource = Resource(self)
        for name, value in values.items():
            resource[name] = value
        return resource

    def new_with_id(self, object_id: Any) -> Resource:
        return Resource(self, uri=self.object_uri(object_id))

    def get(self, object_id: Any) -> Resource:
        object_uri = self.object_uri(object_id)
        return Resource(self, uri=object_uri, values=self.client.get(object_uri))

    def list(
        self,
        filter_name: str = "",
        filter_values: Optional[dict[str, Any]] = None,
        chunk_size: int = LIST_CHUNK_SIZE,
    ) -> Iterator[Resource]:
        """Lazily yield every matching resource; each call starts a new listing."""
        for object_uri, values in self.client.list_objects(
            self.kind.uri, filter_name or None, filter_values, chunk_size
        ):
            yield Resource(self, uri=object_uri, values=values)

    def call(self, action: str, **args: Any) -> Any:
        """Invoke a model level (static) action."""
        spec = self.action_spec(action, args)
        if not spec.static:
            raise ArgumentError(f"{self.kind.name}.{action} must be called on an instance")
        return self.client.call(cinp_uri.build(self.kind.uri, action=action), args)

    def action_spec(self, action: str, args: dict[str, Any]) -> ActionSpec:
        try:
            spec = self.kind.action(action)
        except KeyError as exc:
            raise ArgumentError(str(exc.args[0])) from None
        expected = set(spec.args)
        given = set(args)
        if given != expected:
            missing = sorted(expected - given)
            unexpected = sorted(given - expected)
            parts = []
            if missing:
                parts.append(f"missing {', '.join(missing)}")
            if unexpected:
                parts.append(f"unexpected {', '.join(unexpected)}")
            raise ArgumentError(f"Bad arguments for {self.kind.name}.{action}: {'; '.join(parts)}")
        return spec
