"""Typed access to Contractor resources."""

from contractorcli.resources.binding import Resource, ResourceAccessor
from contractorcli.resources.contractor import Contractor
from contractorcli.resources.kinds import ActionSpec, ResourceKind

__all__ = [
    "ActionSpec",
    "Contractor",
    "Resource",
    "ResourceAccessor",
    "ResourceKind",
]
