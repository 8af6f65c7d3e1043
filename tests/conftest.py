"""Shared fixtures for contractorcli tests.

The server side is an in-memory Contractor behind httpx.MockTransport, so the
real CInPClient, binding and CLI code paths run unchanged; only the network
layer is replaced.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest
from click.testing import CliRunner

from contractorcli.cinp import uri as cinp_uri
from contractorcli.cinp.client import AUTH_LOGIN_URI, AUTH_LOGOUT_URI
from contractorcli.commands.common import CLIState
from contractorcli.core.config import AppConfig, ContractorConfig
from contractorcli.resources import catalog

SESSION_TOKEN = "session-token-1"
STAMP = "2024-01-01T00:00:00+00:00"

ActionHandler = Callable[[Optional[str], dict], Any]
FilterHandler = Callable[[dict, dict], bool]


def _networked_filter(item: dict, values: dict) -> bool:
    return cinp_uri.extract_id(item.get("networked")) == cinp_uri.extract_id(values.get("structure"))


class FakeContractor:
    """Just enough of a Contractor server to drive the client end to end.

    Objects live in ``store[kind_name][object_id]``. Requests are recorded in
    ``requests`` as ``(verb, path, headers, body)``. Remote actions are
    answered by handlers registered with ``on_action``.
    """

    def __init__(self) -> None:
        self.kinds_by_uri = {item.uri: item for item in catalog.KINDS.values()}
        self.store: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in catalog.KINDS}
        self.requests: list[tuple[str, str, dict[str, str], Any]] = []
        self.actions: dict[tuple[str, str], ActionHandler] = {}
        self.filters: dict[tuple[str, str], FilterHandler] = {
            ("Address", "structure"): _networked_filter,
        }
        self.namespaces: dict[str, str] = {}
        self.logins: list[str] = []
        self.logouts = 0
        self.fail_logout = False
        self._next_id = 1

    # -- setup helpers -------------------------------------------------

    def add(self, kind_name: str, object_id: Any = None, **values: Any) -> str:
        """Seed an object; returns its URI."""
        kind = catalog.KINDS[kind_name]
        if object_id is None:
            object_id = values.get(kind.id_field) if kind.id_field else self._allocate_id()
        object_id = str(object_id)
        record = {name: None for name in kind.all_fields}
        record.update({"created": STAMP, "updated": STAMP})
        record.update(values)
        self.store[kind_name][object_id] = record
        return cinp_uri.build(kind.uri, [object_id])

    def on_action(self, kind_name: str, action: str, handler: ActionHandler) -> None:
        self.actions[(kind_name, action)] = handler

    def verbs(self, verb: str) -> list[tuple[str, str, dict[str, str], Any]]:
        return [request for request in self.requests if request[0] == verb]

    @property
    def data_requests(self) -> list[tuple[str, str, dict[str, str], Any]]:
        """Requests other than login/logout."""
        return [
            request
            for request in self.requests
            if not request[1].startswith(AUTH_LOGIN_URI) and not request[1].startswith(AUTH_LOGOUT_URI)
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # -- request handling ----------------------------------------------

    def _allocate_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        headers = {key.lower(): value for key, value in request.headers.items()}
        self.requests.append((request.method, path, headers, body))

        if path == AUTH_LOGIN_URI:
            if body.get("password") != "secret":
                return httpx.Response(401, json={"message": "Invalid Login"})
            self.logins.append(body["username"])
            return httpx.Response(200, json=SESSION_TOKEN)
        if path == AUTH_LOGOUT_URI:
            self.logouts += 1
            if self.fail_logout:
                return httpx.Response(500, json={"message": "logout exploded"})
            return httpx.Response(200, json=None)

        if request.method == "DESCRIBE":
            return self._describe(path)

        parsed = cinp_uri.split(path)
        kind = self.kinds_by_uri.get(parsed.model_uri)
        if kind is None:
            return httpx.Response(404, json={"message": f"unknown model {parsed.model_uri}"})

        if request.method == "CALL":
            return self._call(kind, parsed, body or {})
        if request.method == "LIST":
            return self._list(kind, headers, body or {})
        if request.method == "GET":
            return self._get(kind, parsed, headers)
        if request.method == "CREATE":
            return self._create(kind, body or {})
        if request.method == "UPDATE":
            return self._update(kind, parsed, body or {})
        if request.method == "DELETE":
            return self._delete(kind, parsed)
        return httpx.Response(405)

    def _describe(self, path: str) -> httpx.Response:
        if path not in self.namespaces:
            return httpx.Response(404)
        return httpx.Response(200, json={"name": path, "api-version": self.namespaces[path]})

    def _matches(self, kind_name: str, filter_name: Optional[str], item: dict, values: dict) -> bool:
        if not filter_name:
            return True
        handler = self.filters.get((kind_name, filter_name))
        if handler is not None:
            return handler(item, values)
        return all(item.get(key) == value for key, value in values.items())

    def _list(self, kind, headers: dict[str, str], values: dict) -> httpx.Response:
        filter_name = headers.get("filter")
        position = int(headers.get("position", "0"))
        count = int(headers.get("count", "50"))
        matching = [
            cinp_uri.build(kind.uri, [object_id])
            for object_id, item in self.store[kind.name].items()
            if self._matches(kind.name, filter_name, item, values)
        ]
        page = matching[position:position + count]
        return httpx.Response(
            200,
            json=page,
            headers={"Position": str(position), "Count": str(len(page)), "Total": str(len(matching))},
        )

    def _get(self, kind, parsed, headers: dict[str, str]) -> httpx.Response:
        objects = self.store[kind.name]
        missing = [object_id for object_id in parsed.ids if object_id not in objects]
        if missing or not parsed.ids:
            return httpx.Response(404)
        if headers.get("multi-object") == "True":
            return httpx.Response(
                200,
                json={cinp_uri.build(kind.uri, [object_id]): objects[object_id] for object_id in parsed.ids},
            )
        return httpx.Response(200, json=objects[parsed.ids[0]])

    def _reject_fields(self, allowed: tuple[str, ...], values: dict) -> Optional[httpx.Response]:
        unknown = sorted(set(values) - set(allowed))
        if unknown:
            return httpx.Response(
                400,
                json={"message": "Invalid Request", "data": {name: "not allowed" for name in unknown}},
            )
        return None

    def _create(self, kind, values: dict) -> httpx.Response:
        rejected = self._reject_fields(kind.create_fields, values)
        if rejected is not None:
            return rejected
        object_uri = self.add(kind.name, **values)
        object_id = cinp_uri.extract_id(object_uri)
        return httpx.Response(201, json=self.store[kind.name][object_id], headers={"Object-Id": object_uri})

    def _update(self, kind, parsed, values: dict) -> httpx.Response:
        rejected = self._reject_fields(kind.update_fields, values)
        if rejected is not None:
            return rejected
        record = self.store[kind.name].get(parsed.ids[0]) if parsed.ids else None
        if record is None:
            return httpx.Response(404)
        record.update(values)
        return httpx.Response(200, json=record)

    def _delete(self, kind, parsed) -> httpx.Response:
        objects = self.store[kind.name]
        if not parsed.ids or parsed.ids[0] not in objects:
            return httpx.Response(404)
        del objects[parsed.ids[0]]
        return httpx.Response(200)

    def _call(self, kind, parsed, args: dict) -> httpx.Response:
        handler = self.actions.get((kind.name, parsed.action))
        if handler is None:
            return httpx.Response(400, json={"message": f"no handler for {kind.name}.{parsed.action}"})
        object_id = parsed.ids[0] if parsed.ids else None
        return httpx.Response(200, json=handler(object_id, args))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake() -> FakeContractor:
    return FakeContractor()


@pytest.fixture
def contractor_config() -> ContractorConfig:
    return ContractorConfig(host="http://contractor.test", username="root", password="secret")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(fake, contractor_config, runner):
    """Run the CLI against the fake server: ``invoke("site", "list")``."""
    from contractorcli.cli import cli

    def _invoke(*args: str, input: Optional[str] = None):
        state = CLIState(
            transport=fake.transport(),
            _config=AppConfig(contractor=contractor_config),
        )
        return runner.invoke(cli, list(args), obj=state, input=input)

    return _invoke
