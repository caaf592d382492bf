"""aepclient -- a client for resource-oriented APIs described by OpenAPI.

Resource-oriented APIs lay out their endpoints as alternating collection
names and identifiers (``/publishers/{publisher}/books/{book}``).  This
package reads such an API's OpenAPI 2.0 or 3.x document, discovers its
resources, and performs the standard methods against them.

Typical workflow::

    import httpx
    from aepclient import API, Client, load_openapi

    api = API.from_openapi(load_openapi("openapi.json"))
    book = api.get_resource("book")
    with httpx.Client() as http:
        client = Client(http)
        client.create(book, api.server_url, {"price": 1}, {"publisher": "acme"})

Modules:
    api: Resource discovery from OpenAPI documents.
    client: The CRUD client, path resolution, and response decoding.
    openapi: Document loading and dialect-aware ``$ref`` resolution.
    models: Pydantic models for documents and configuration.
    resource: Resource definitions used by the client.
    config: Configuration file and environment overrides.
    exceptions: Exception hierarchy.
    log: Optional Rich logging setup.
"""

from aepclient.api import API
from aepclient.client import Client, ClientHooks, LoggingHooks
from aepclient.openapi import Dialect, OpenAPIDocument, load_openapi
from aepclient.resource import Resource

__version__ = "0.1.0"

__all__ = [
    "API",
    "Client",
    "ClientHooks",
    "Dialect",
    "LoggingHooks",
    "OpenAPIDocument",
    "Resource",
    "load_openapi",
]
