"""Contractor session: one transport client plus an accessor per kind."""

from __future__ import annotations

import logging
from typing import Optional, Union

import httpx

from contractorcli.cinp.client import CInPClient
from contractorcli.core.config import ContractorConfig
from contractorcli.core.exceptions import ArgumentError, NotFoundError
from contractorcli.resources import catalog
from contractorcli.resources.binding import ResourceAccessor
from contractorcli.resources.kinds import ResourceKind

logger = logging.getLogger("contractorcli.resources")


class Contractor:
    """Session against one Contractor server.

    Usable as a context manager; the session logs in on enter when a
    username is configured and logs out on exit.
    """

    def __init__(self, config: ContractorConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self.client = CInPClient(
            host=config.base_url,
            proxy=config.proxy,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )
        self._accessors: dict[str, ResourceAccessor] = {}

    def __enter__(self) -> "Contractor":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        if self.config.username and not self.client.is_authenticated:
            self.client.login(self.config.username, self.config.password)

    def close(self) -> None:
        try:
            self.client.logout()
        finally:
            self.client.close()

    def accessor(self, kind: Union[ResourceKind, str]) -> ResourceAccessor:
        if isinstance(kind, str):
            try:
                kind = catalog.KINDS[kind]
            except KeyError:
                raise ArgumentError(f"Unknown resource kind '{kind}'") from None
        accessor = self._accessors.get(kind.name)
        if accessor is None:
            accessor = ResourceAccessor(self.client, kind)
            self._accessors[kind.name] = accessor
        return accessor

    def get_api_version(self, namespace_uri: str) -> str:
        return self.client.get_api_version(namespace_uri)

    def supported_types(self, types: dict[str, catalog.ProviderType]) -> list[str]:
        """Provider names whose namespace is loaded at the expected API version."""
        supported = []
        for name, provider in sorted(types.items()):
            try:
                version = self.get_api_version(provider.namespace_uri)
            except NotFoundError:
                logger.debug("Provider namespace %s not loaded", provider.namespace_uri)
                continue
            if version != provider.api_version:
                logger.warning(
                    "Skipping %s: server API version %s, expected %s", name, version, provider.api_version
                )
                continue
            supported.append(name)
        return supported
