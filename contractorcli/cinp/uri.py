"""CInP URI helpers.

A CInP object URI looks like ``/api/v1/Site/Site:site1:``: a namespace path,
a model name, an optional colon-wrapped id list and an optional
``(action)`` suffix. Several ids (``Model:1:2:3:``) address multiple objects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

_URI_PATTERN = re.compile(
    r"^(?P<root>/api/v\d+/)"
    r"(?P<namespace>(?:[A-Za-z0-9_\-.!~*]+/)*)"
    r"(?P<model>[A-Za-z0-9_\-.!~*]+)?"
    r"(?::(?P<ids>(?:[^:()]*:)*))?"
    r"(?:\((?P<action>[A-Za-z0-9_\-.!~*]+)\))?$"
)


@dataclass
class ParsedURI:
    root: str
    namespace: list[str]
    model: Optional[str]
    ids: list[str] = field(default_factory=list)
    action: Optional[str] = None

    @property
    def model_uri(self) -> str:
        return self.root + "".join(f"{part}/" for part in self.namespace) + (self.model or "")

    @property
    def is_multi(self) -> bool:
        return len(self.ids) > 1


def split(uri: str) -> ParsedURI:
    """Break a CInP URI into its parts. Raises ValueError if it is not one."""
    match = _URI_PATTERN.match(uri)
    if match is None:
        raise ValueError(f"Invalid CInP URI: '{uri}'")

    namespace = [part for part in match.group("namespace").split("/") if part]
    raw_ids = match.group("ids")
    ids = raw_ids.rstrip(":").split(":") if raw_ids else []
    return ParsedURI(
        root=match.group("root"),
        namespace=namespace,
        model=match.group("model"),
        ids=ids,
        action=match.group("action"),
    )


def build(model_uri: str, ids: Iterable[object] = (), action: Optional[str] = None) -> str:
    """Compose an object (or multi-object) URI from a model URI and ids."""
    uri = model_uri
    id_list = [str(value) for value in ids]
    if id_list:
        uri += ":" + ":".join(id_list) + ":"
    if action:
        uri += f"({action})"
    return uri


def extract_id(uri: Optional[str]) -> str:
    """Short id of an object URI (``/api/v1/Site/Site:a:`` -> ``a``)."""
    if not uri:
        return ""
    parts = str(uri).split(":")
    if len(parts) < 2:
        return ""
    return parts[1]


def extract_id_list(uris: Optional[Iterable[str]]) -> str:
    if not uris:
        return ""
    return ",".join(extract_id(uri) for uri in uris)


def extract_ids(uris: Iterable[str]) -> list[str]:
    """All ids referenced by a list of (possibly multi-object) URIs."""
    result: list[str] = []
    for uri in uris:
        result.extend(split(uri).ids)
    return result
