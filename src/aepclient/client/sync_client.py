"""Synchronous CRUD client for resource-oriented APIs.

This module provides :class:`Client`, which performs the standard methods
(create, list, get, update, delete) against resources described by a
:class:`~aepclient.resource.Resource`.  It wraps an injected
:class:`httpx.Client` and layers on:

- **Path resolution** -- collection URLs are built from the resource pattern
  by :func:`~aepclient.client.paths.base_path`.
- **Static headers** -- :attr:`Client.headers` is applied to every request.
- **Hooks** -- :class:`~aepclient.client.hooks.ClientHooks` sees each request
  before it is sent and each response after it arrives.
- **Uniform errors** -- bodies are decoded by
  :func:`~aepclient.client.response.parse_response`, which raises on
  malformed JSON and on ``error`` payloads whatever the status code.

Each call makes exactly one round trip.  There is no retry; transport errors
from :mod:`httpx` propagate unchanged.

The client never mutates :attr:`Client.headers` and holds no other state, so
one instance may serve several threads as long as nobody edits the header
map while calls are in flight.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

import httpx

from aepclient.client.hooks import ClientHooks
from aepclient.client.paths import base_path, join_path
from aepclient.client.response import extract_list_items, parse_response
from aepclient.exceptions import BodySerializationError
from aepclient.models import ClientConfig
from aepclient.resource import Resource

ID_FIELD = "id"


class Client:
    """CRUD client bound to one HTTP transport.

    Args:
        transport: The :class:`httpx.Client` used to send requests.  The
            caller owns it; :meth:`close` leaves it open.
        headers: Static headers sent with every request.  The mapping is used
            as-is (not copied), so later edits affect later calls.
        hooks: Request/response observer.  Defaults to no-op hooks.

    Example::

        with httpx.Client() as http:
            client = Client(http, headers={"Authorization": "Bearer ..."})
            books = client.list(book, "https://api.example.com", {"publisher": "acme"})
    """

    def __init__(
        self,
        transport: httpx.Client,
        headers: Optional[dict[str, str]] = None,
        hooks: Optional[ClientHooks] = None,
    ) -> None:
        self._client = transport
        self.headers: dict[str, str] = headers if headers is not None else {}
        self.hooks: ClientHooks = hooks or ClientHooks()
        self._owns_transport = False

    @classmethod
    def from_config(cls, config: ClientConfig, hooks: Optional[ClientHooks] = None) -> Client:
        """Build a client with its own transport configured from *config*.

        The transport is closed by :meth:`close` or on leaving a ``with``
        block.  Redirects are not followed: a 3xx reply is decoded like any
        other response.
        """
        transport = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
        )
        client = cls(transport, headers=dict(config.headers), hooks=hooks)
        client._owns_transport = True
        return client

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self._client.close()

    # ------------------------------------------------------------------ #
    # Standard methods
    # ------------------------------------------------------------------ #

    def create(
        self,
        resource: Resource,
        server_url: str,
        body: dict[str, Any],
        parameters: Mapping[str, str],
    ) -> dict[str, Any]:
        """POST *body* to the resource's collection.

        When the resource supports user-settable ids and *body* has a string
        ``id``, ``?id=<value>`` is appended to the URL.  The ``id`` field is
        sent in the body either way.

        Raises:
            MissingParameterError: If a parent placeholder has no value.
            BodySerializationError: If *body* is not JSON-serialisable.
            DecodeError: If the response is not a JSON object.
            APIError: If the response carries an ``error``.
        """
        suffix = ""
        create_method = resource.create_method
        if create_method is not None and create_method.supports_user_settable_create:
            resource_id = body.get(ID_FIELD)
            if isinstance(resource_id, str):
                suffix = f"?{ID_FIELD}={resource_id}"

        url = base_path(resource.pattern_elems, server_url, parameters, suffix)
        return self._request("POST", url, body)

    def list(
        self,
        resource: Resource,
        server_url: str,
        parameters: Mapping[str, str],
    ) -> list[dict[str, Any]]:
        """GET the resource's collection and return its items.

        Raises:
            NoListKeyFoundError: If the response holds no recognised item list.
        """
        url = base_path(resource.pattern_elems, server_url, parameters)
        data = self._request("GET", url)
        return extract_list_items(data, resource.plural)

    def get(self, server_url: str, path: str) -> dict[str, Any]:
        """GET a single resource by its full path (``publishers/acme/books/1``)."""
        return self._request("GET", join_path(server_url, path))

    def get_with_full_url(self, url: str) -> dict[str, Any]:
        """GET an absolute URL."""
        return self._request("GET", url)

    def update(self, server_url: str, path: str, body: dict[str, Any]) -> None:
        """PATCH a single resource with *body*."""
        self._request("PATCH", join_path(server_url, path), body)

    def delete(self, server_url: str, path: str) -> None:
        """DELETE a single resource.  Any response payload is discarded."""
        self._request("DELETE", join_path(server_url, path))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _request(
        self,
        method: str,
        url: str,
        body: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send one request through the hooks and decode the reply."""
        headers: dict[str, str] = {}
        content: Optional[bytes] = None
        if body is not None:
            content = _serialize_body(body)
            headers["Content-Type"] = "application/json"
        headers.update(self.headers)

        request = self._client.build_request(method, url, headers=headers, content=content)
        self.hooks.on_request(request)

        response = self._client.send(request)
        try:
            response.read()
            self.hooks.on_response(response)
            return parse_response(response)
        finally:
            response.close()


def _serialize_body(body: dict[str, Any]) -> bytes:
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise BodySerializationError(f"Error marshalling JSON request body: {exc}") from exc
