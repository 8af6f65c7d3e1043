"""Tests for contractorcli/cinp/client.py using httpx.MockTransport.

httpx.MockTransport replaces only the network layer; the real request
building, header handling and error mapping run.
"""

from __future__ import annotations

import json

import httpx
import pytest

from contractorcli.cinp.client import CINP_VERSION, CInPClient
from contractorcli.core.exceptions import (
    ActionError,
    AuthenticationError,
    NotAuthorizedError,
    NotFoundError,
    ResponseParseError,
    ServerError,
    TransportError,
    ValidationError,
)


def _client(handler) -> CInPClient:
    return CInPClient("http://contractor.test/", transport=httpx.MockTransport(handler))


class TestHeaders:
    def test_version_and_auth_headers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "site1"})

        client = _client(handler)
        client.set_auth("root", "tok")
        assert client.get("/api/v1/Site/Site:site1:") == {"name": "site1"}

        request = seen[0]
        assert request.method == "GET"
        assert request.headers["CInP-Version"] == CINP_VERSION
        assert request.headers["Auth-Id"] == "root"
        assert request.headers["Auth-Token"] == "tok"
        client.close()

    def test_no_auth_headers_when_anonymous(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = _client(handler)
        client.get("/api/v1/Site/Site:site1:")
        assert "Auth-Token" not in seen[0].headers
        client.close()


class TestLogin:
    def test_login_and_logout(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.url.path, json.loads(request.content)))
            if request.url.path.endswith("(login)"):
                return httpx.Response(200, json="tok-1")
            return httpx.Response(200)

        client = _client(handler)
        assert client.login("root", "pw") == "tok-1"
        assert client.is_authenticated
        client.logout()
        assert not client.is_authenticated
        assert calls == [
            ("/api/v1/Auth/User(login)", {"username": "root", "password": "pw"}),
            ("/api/v1/Auth/User(logout)", {"token": "tok-1"}),
        ]

    def test_logout_when_anonymous_sends_nothing(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        _client(handler).logout()

    def test_login_without_token(self):
        client = _client(lambda request: httpx.Response(200, json=None))
        with pytest.raises(AuthenticationError, match="session token"):
            client.login("root", "pw")


class TestErrors:
    @pytest.mark.parametrize(
        "status,exc_class",
        [
            (401, AuthenticationError),
            (403, NotAuthorizedError),
            (404, NotFoundError),
            (500, ServerError),
            (418, TransportError),
        ],
    )
    def test_status_mapping(self, status, exc_class):
        client = _client(lambda request: httpx.Response(status, json={"message": "nope"}))
        with pytest.raises(exc_class):
            client.get("/api/v1/Site/Site:x:")

    def test_validation_field_errors(self):
        body = {"message": "Invalid Request", "data": {"prefix": "must be <= 32"}}
        client = _client(lambda request: httpx.Response(400, json=body))
        with pytest.raises(ValidationError) as exc_info:
            client.update("/api/v1/Utilities/AddressBlock:1:", {"prefix": 40})
        assert exc_info.value.field_errors == {"prefix": "must be <= 32"}

    def test_plain_text_error_body(self):
        client = _client(lambda request: httpx.Response(500, text="Traceback ..."))
        with pytest.raises(ServerError, match="Traceback"):
            client.get("/api/v1/Site/Site:x:")

    def test_bad_json_on_success(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ResponseParseError):
            client.get("/api/v1/Site/Site:x:")

    def test_call_failure_becomes_action_error(self):
        body = {"message": "No Available Addresses"}
        client = _client(lambda request: httpx.Response(500, json=body))
        with pytest.raises(ActionError, match="nextAddress"):
            client.call("/api/v1/Utilities/AddressBlock:1:(nextAddress)", {})

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError, match="Error talking to"):
            _client(handler).get("/api/v1/Site/Site:x:")

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TransportError, match="Timeout"):
            _client(handler).get("/api/v1/Site/Site:x:")


class TestListing:
    def test_list_objects_pages(self):
        uris = [f"/api/v1/Site/Site:s{index}:" for index in range(5)]
        pages = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "LIST":
                position = int(request.headers["Position"])
                count = int(request.headers["Count"])
                pages.append((position, count, request.headers.get("Filter")))
                page = uris[position:position + count]
                return httpx.Response(
                    200, json=page, headers={"Position": str(position), "Count": str(len(page)), "Total": "5"}
                )
            assert request.headers["Multi-Object"] == "True"
            ids = request.url.path.split(":")[1:-1]
            return httpx.Response(200, json={f"/api/v1/Site/Site:{i}:": {"name": i} for i in ids})

        client = _client(handler)
        result = list(client.list_objects("/api/v1/Site/Site", "zone", {"zone": "z"}, chunk_size=2))

        assert [values["name"] for _, values in result] == ["s0", "s1", "s2", "s3", "s4"]
        assert pages == [(0, 2, "zone"), (2, 2, "zone"), (4, 2, "zone")]

    def test_listed_object_missing_from_multi_get(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "LIST":
                page = ["/api/v1/Site/Site:a:", "/api/v1/Site/Site:b:"]
                return httpx.Response(200, json=page, headers={"Position": "0", "Count": "2", "Total": "2"})
            return httpx.Response(200, json={"/api/v1/Site/Site:a:": {"name": "a"}})

        with pytest.raises(ResponseParseError, match="Site:b:"):
            list(_client(handler).list_objects("/api/v1/Site/Site"))

    def test_empty_listing(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "LIST"
            return httpx.Response(200, json=[], headers={"Total": "0"})

        assert list(_client(handler).list_objects("/api/v1/Site/Site")) == []

    def test_create_requires_object_id(self):
        client = _client(lambda request: httpx.Response(201, json={"name": "a"}))
        with pytest.raises(ResponseParseError, match="Object-Id"):
            client.create("/api/v1/Site/Site", {"name": "a"})

    def test_create(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "CREATE"
            return httpx.Response(201, json={"name": "a"}, headers={"Object-Id": "/api/v1/Site/Site:a:"})

        assert _client(handler).create("/api/v1/Site/Site", {"name": "a"}) == ("/api/v1/Site/Site:a:", {"name": "a"})

    def test_api_version(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DESCRIBE"
            return httpx.Response(200, json={"name": "AMT", "api-version": "0.1"})

        assert _client(handler).get_api_version("/api/v1/AMT/") == "0.1"
