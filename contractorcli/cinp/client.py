"""CInP client for the Contractor API.

Thin adapter over httpx that speaks the CInP verbs (GET, LIST, CREATE,
UPDATE, DELETE, CALL, DESCRIBE) and maps HTTP failures onto the
contractorcli exception hierarchy. There is no retry logic:
every failure is surfaced to the caller as-is.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Optional

import httpx

from contractorcli.cinp import uri as cinp_uri
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

logger = logging.getLogger("contractorcli.cinp")

CINP_VERSION = "0.9"
LIST_CHUNK_SIZE = 50

AUTH_LOGIN_URI = "/api/v1/Auth/User(login)"
AUTH_LOGOUT_URI = "/api/v1/Auth/User(logout)"


class CInPResponse:
    """Decoded response from the server."""

    def __init__(self, status_code: int, data: Any, headers: httpx.Headers):
        self.status_code = status_code
        self.data = data
        self.headers = headers


class CInPClient:
    """Synchronous CInP client.

    One instance per CLI invocation. The httpx.Client is created lazily so a
    command that fails argument validation never opens a connection.
    """

    def __init__(
        self,
        host: str,
        proxy: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.host = host.rstrip("/")
        self.proxy = proxy or None
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._auth_id: Optional[str] = None
        self._auth_token: Optional[str] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.host,
                proxy=self.proxy,
                transport=self._transport,
                timeout=httpx.Timeout(self.timeout_seconds),
            )
        return self._client

    @property
    def is_authenticated(self) -> bool:
        return self._auth_token is not None

    def set_auth(self, auth_id: Optional[str], auth_token: Optional[str]) -> None:
        self._auth_id = auth_id
        self._auth_token = auth_token

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> str:
        token = self.call(AUTH_LOGIN_URI, {"username": username, "password": password})
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Login did not return a session token")
        self.set_auth(username, token)
        logger.debug("Logged in as '%s'", username)
        return token

    def logout(self) -> None:
        if not self.is_authenticated:
            return
        try:
            self.call(AUTH_LOGOUT_URI, {"token": self._auth_token})
        finally:
            logger.debug("Logged out '%s'", self._auth_id)
            self.set_auth(None, None)

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, uri: str) -> dict[str, Any]:
        resp = self._request("GET", uri)
        return _expect_dict(resp.data, uri)

    def get_multi(self, uri_list: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch several objects of one model in a single request."""
        if not uri_list:
            return {}
        parsed = [cinp_uri.split(uri) for uri in uri_list]
        model_uri = parsed[0].model_uri
        ids = [object_id for item in parsed for object_id in item.ids]
        multi_uri = cinp_uri.build(model_uri, ids)
        resp = self._request("GET", multi_uri, header_map={"Multi-Object": "True"})
        return _expect_dict(resp.data, multi_uri)

    def list(
        self,
        uri: str,
        filter_name: Optional[str] = None,
        filter_values: Optional[dict[str, Any]] = None,
        position: int = 0,
        count: int = LIST_CHUNK_SIZE,
    ) -> tuple[list[str], int, int, int]:
        """One page of object URIs: (uri_list, position, count, total)."""
        header_map = {"Position": str(position), "Count": str(count)}
        if filter_name:
            header_map["Filter"] = filter_name
        resp = self._request("LIST", uri, data=filter_values or {}, header_map=header_map)
        if not isinstance(resp.data, list):
            raise ResponseParseError(f"Expected a list of URIs from LIST {uri}")
        return (
            resp.data,
            _int_header(resp.headers, "Position", position),
            _int_header(resp.headers, "Count", len(resp.data)),
            _int_header(resp.headers, "Total", len(resp.data)),
        )

    def list_objects(
        self,
        uri: str,
        filter_name: Optional[str] = None,
        filter_values: Optional[dict[str, Any]] = None,
        chunk_size: int = LIST_CHUNK_SIZE,
    ) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (uri, values) for every matching object, paging transparently."""
        position = 0
        while True:
            uri_list, position, count, total = self.list(uri, filter_name, filter_values, position, chunk_size)
            if not uri_list:
                return
            values_map = self.get_multi(uri_list)
            missing = [object_uri for object_uri in uri_list if object_uri not in values_map]
            if missing:
                raise ResponseParseError(f"LIST {uri} returned objects the server did not send: {', '.join(missing)}")
            for object_uri in uri_list:
                yield object_uri, values_map[object_uri]
            position += count
            if count == 0 or position >= total:
                return

    def create(self, uri: str, values: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        resp = self._request("CREATE", uri, data=values)
        object_uri = resp.headers.get("Object-Id")
        if not object_uri:
            raise ResponseParseError(f"CREATE {uri} response is missing the Object-Id header")
        return object_uri, _expect_dict(resp.data, uri)

    def update(self, uri: str, values: dict[str, Any]) -> dict[str, Any]:
        resp = self._request("UPDATE", uri, data=values)
        return _expect_dict(resp.data, uri)

    def delete(self, uri: str) -> None:
        self._request("DELETE", uri)

    def call(self, uri: str, args: Optional[dict[str, Any]] = None) -> Any:
        action = cinp_uri.split(uri).action or uri
        try:
            resp = self._request("CALL", uri, data=args or {})
        except (ValidationError, ServerError) as exc:
            raise ActionError(action, str(exc)) from exc
        return resp.data

    def describe(self, uri: str) -> dict[str, Any]:
        resp = self._request("DESCRIBE", uri)
        return _expect_dict(resp.data, uri)

    def get_api_version(self, namespace_uri: str) -> str:
        return str(self.describe(namespace_uri).get("api-version", ""))

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _headers(self, header_map: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "CInP-Version": CINP_VERSION,
            "Accept": "application/json",
            "Accept-Charset": "utf-8",
            "Content-Type": "application/json;charset=utf-8",
        }
        if self._auth_token is not None:
            headers["Auth-Id"] = self._auth_id or ""
            headers["Auth-Token"] = self._auth_token
        if header_map:
            headers.update(header_map)
        return headers

    def _request(
        self,
        verb: str,
        uri: str,
        data: Any = None,
        header_map: Optional[dict[str, str]] = None,
    ) -> CInPResponse:
        content = None
        if data is not None:
            content = json.dumps(data).encode("utf-8")

        try:
            resp = self.client.request(verb, uri, content=content, headers=self._headers(header_map))
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout talking to {self.host}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Error talking to {self.host}: {e}") from e

        logger.debug("%s %s -> %d", verb, uri, resp.status_code)
        payload = _decode(resp)

        if resp.status_code in (200, 201, 202):
            return CInPResponse(resp.status_code, payload, resp.headers)

        message = _error_message(payload, resp)
        if resp.status_code == 400:
            field_errors = payload.get("data") if isinstance(payload, dict) else None
            raise ValidationError(message, field_errors if isinstance(field_errors, dict) else None)
        if resp.status_code == 401:
            raise AuthenticationError(f"Invalid session or credentials: {message}")
        if resp.status_code == 403:
            raise NotAuthorizedError(f"Not authorized to {verb} {uri}: {message}")
        if resp.status_code == 404:
            raise NotFoundError(f"Not found: {uri}")
        if resp.status_code >= 500:
            raise ServerError(f"Server error {resp.status_code}: {message}")
        raise TransportError(f"Unexpected HTTP status {resp.status_code} for {verb} {uri}")


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        if resp.status_code >= 400:
            # error bodies are sometimes plain text
            return resp.text
        raise ResponseParseError(f"Failed to parse JSON response: {e}\nRaw: {resp.text[:500]}") from e


def _error_message(payload: Any, resp: httpx.Response) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    if isinstance(payload, str) and payload:
        return payload
    return resp.reason_phrase or f"HTTP {resp.status_code}"


def _expect_dict(data: Any, uri: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected an object from {uri}, got {type(data).__name__}")
    return data


def _int_header(headers: httpx.Headers, name: str, default: int) -> int:
    value = headers.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ResponseParseError(f"Invalid {name} header: '{value}'") from e
