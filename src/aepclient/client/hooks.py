"""Observability hooks called around every request the client sends.

:class:`ClientHooks` is both the interface and the default implementation:
its methods do nothing.  Subclasses override the hooks they care about::

    class Recorder(ClientHooks):
        def __init__(self):
            self.urls = []

        def on_request(self, request, *args):
            self.urls.append(str(request.url))

    client = Client(httpx.Client(), hooks=Recorder())

Hooks observe; they cannot change the request, the response, or the outcome
of a call.  The client ignores their return values.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ClientHooks:
    """No-op request/response hooks.

    The lifecycle for one call is:

    1. :meth:`on_request` -- after headers and body are set, before sending.
    2. :meth:`on_response` -- after the response is received and its body
       read, before it is decoded.

    Transport errors skip :meth:`on_response`.
    """

    def on_request(self, request: httpx.Request, *args: Any) -> None:
        """Called with the outgoing request."""

    def on_response(self, response: httpx.Response, *args: Any) -> None:
        """Called with the incoming response."""


class LoggingHooks(ClientHooks):
    """Log each request and response at DEBUG level.

    Args:
        log: Logger to write to.  Defaults to this module's logger.
        log_bodies: Also log request and response bodies.
    """

    def __init__(self, log: logging.Logger | None = None, log_bodies: bool = False) -> None:
        self._log = log or logger
        self._log_bodies = log_bodies

    def on_request(self, request: httpx.Request, *args: Any) -> None:
        self._log.debug("%s %s", request.method, request.url)
        if self._log_bodies and request.content:
            self._log.debug("Request body: %s", request.content.decode("utf-8", "replace"))

    def on_response(self, response: httpx.Response, *args: Any) -> None:
        self._log.debug(
            "HTTP %s %s for %s %s",
            response.status_code,
            response.reason_phrase,
            response.request.method,
            response.request.url,
        )
        if self._log_bodies and response.content:
            self._log.debug("Response body: %s", response.text)
