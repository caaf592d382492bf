"""HTTP client module for aepclient.

Provides :class:`Client`, the synchronous CRUD client, together with the
pieces it is built from:

* :func:`base_path` -- collection URL from a resource pattern.
* :func:`parse_response` / :func:`extract_list_items` -- body decoding and
  list unwrapping.
* :class:`ClientHooks` / :class:`LoggingHooks` -- request/response observers.

Example::

    from aepclient.client import Client

    with Client.from_config(config) as client:
        book = client.get("https://bookstore.example.com", "publishers/acme/books/1")
"""

from aepclient.client.hooks import ClientHooks, LoggingHooks
from aepclient.client.paths import base_path
from aepclient.client.response import extract_list_items, parse_response
from aepclient.client.sync_client import Client

__all__ = [
    "Client",
    "ClientHooks",
    "LoggingHooks",
    "base_path",
    "extract_list_items",
    "parse_response",
]
