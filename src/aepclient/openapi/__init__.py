"""OpenAPI document loading and dialect-aware schema resolution.

Typical usage::

    from aepclient.openapi import load_openapi

    doc = load_openapi("https://bookstore.example.com/openapi.json")
    book = doc.dereference_schema(Schema(ref="#/components/schemas/Book"))

Sub-modules:

* :mod:`~aepclient.openapi.loader` -- I/O layer (URL or file) and JSON/YAML
  decoding.
* :mod:`~aepclient.openapi.document` -- :class:`OpenAPIDocument`, which fixes
  the document's :class:`Dialect` and resolves ``$ref`` pointers against the
  matching schema table.
"""

from aepclient.openapi.document import CONTENT_TYPE, Dialect, OpenAPIDocument
from aepclient.openapi.loader import load_openapi, load_raw

__all__ = ["CONTENT_TYPE", "Dialect", "OpenAPIDocument", "load_openapi", "load_raw"]
