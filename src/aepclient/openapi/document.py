"""Dialect-aware view over a parsed OpenAPI 2.0 or 3.x document.

Swagger 2.0 and OpenAPI 3.x keep their schema tables in different places
(``definitions`` at the root versus ``components.schemas``) and attach
request/response schemas differently (directly as ``schema`` versus under
``content["application/json"]``).  :class:`OpenAPIDocument` decides the
:class:`Dialect` once, when it is constructed, binds the matching schema
table, and answers every later question by switching on that tag.

Resolving a ``$ref`` only uses the final segment of the pointer as a key into
the bound table, so ``#/definitions/Book`` and ``#/components/schemas/Book``
both name ``Book``.  Chains of references are followed until a concrete node
is reached; a chain that revisits a pointer raises
:class:`~aepclient.exceptions.CircularReferenceError` instead of recursing
forever.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from pydantic import ValidationError

from aepclient.exceptions import CircularReferenceError, SchemaNotFoundError, SpecParseError
from aepclient.models import OpenAPI, RequestBody, Response, Schema

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"
"""The only media type whose schema is read from OpenAPI 3 ``content`` maps."""


class Dialect(str, enum.Enum):
    """The two OpenAPI document families this package understands."""

    OAS2 = "2.0"
    OAS3 = "3.0"


def detect_dialect(api: OpenAPI) -> Optional[Dialect]:
    """Return the dialect declared by *api*, or ``None`` if it declares neither."""
    if api.swagger == "2.0":
        return Dialect.OAS2
    if api.openapi:
        return Dialect.OAS3
    return None


class OpenAPIDocument:
    """A parsed OpenAPI document with its dialect fixed at construction.

    The document is read-only after construction and can be shared between
    threads.

    Args:
        api: The validated document model.

    Raises:
        SpecParseError: If the document declares neither ``swagger: "2.0"``
            nor an ``openapi`` version.

    Example::

        doc = OpenAPIDocument.from_dict(json.loads(text))
        op = doc.api.paths["/publishers"].get
        schema = doc.dereference_schema(doc.schema_from_response(op.responses["200"]))
    """

    def __init__(self, api: OpenAPI) -> None:
        dialect = detect_dialect(api)
        if dialect is None:
            raise SpecParseError(
                "Unable to detect the OpenAPI version. "
                "Add a 'swagger: \"2.0\"' or an 'openapi' field."
            )
        self.api = api
        self.dialect = dialect
        if dialect is Dialect.OAS2:
            self.schemas: dict[str, Schema] = api.definitions
        else:
            self.schemas = api.components.schemas
        logger.debug("Detected OpenAPI dialect %s", dialect.value)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> OpenAPIDocument:
        """Validate a raw decoded document and wrap it.

        Raises:
            SpecParseError: If *raw* does not match the document models or
                has no recognisable dialect.
        """
        try:
            api = OpenAPI.model_validate(raw)
        except ValidationError as exc:
            raise SpecParseError(f"Invalid OpenAPI document: {exc}") from exc
        return cls(api)

    def dereference_schema(self, schema: Schema) -> Schema:
        """Resolve *schema* until it no longer carries a ``$ref``.

        A node without a ``$ref`` is returned unchanged (the same object).

        Raises:
            SchemaNotFoundError: If a pointer names no entry in the schema
                table of this document's dialect.
            CircularReferenceError: If the chain of pointers loops.
        """
        seen: list[str] = []
        while schema.ref:
            ref = schema.ref
            if ref in seen:
                raise CircularReferenceError(seen + [ref])
            seen.append(ref)
            key = ref.rsplit("/", 1)[-1]
            target = self.schemas.get(key)
            if target is None:
                raise SchemaNotFoundError(ref)
            schema = target
        return schema

    def schema_from_response(self, response: Response) -> Optional[Schema]:
        """Return the (unresolved) schema describing a response body, if any."""
        if self.dialect is Dialect.OAS2:
            return response.schema_
        media = response.content.get(CONTENT_TYPE)
        return media.schema_ if media is not None else None

    def schema_from_request_body(self, request_body: RequestBody) -> Optional[Schema]:
        """Return the (unresolved) schema describing a request body, if any."""
        if self.dialect is Dialect.OAS2:
            return request_body.schema_
        media = request_body.content.get(CONTENT_TYPE)
        return media.schema_ if media is not None else None
