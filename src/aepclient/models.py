"""Canonical Pydantic models shared across all aepclient modules.

The models fall into two groups:

**Document models** -- the subset of an OpenAPI 2.0 / 3.x document that the
dereferencer and the resource builder read:
    :class:`Schema`, :class:`XAEPResource`, :class:`MediaType`,
    :class:`Response`, :class:`RequestBody`, :class:`Parameter`,
    :class:`Operation`, :class:`PathItem`, :class:`Components`,
    :class:`Contact`, :class:`Info`, :class:`Server`, and :class:`OpenAPI`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ClientConfig`.

Document models use ``extra="allow"`` so that keys this package does not
interpret are preserved in ``model_extra`` and survive a dump.  JSON keys
that are not valid Python identifiers (``$ref``, ``x-aep-resource``, ``in``)
are mapped through aliases; models accept either spelling on input.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_DOCUMENT_CONFIG = ConfigDict(extra="allow", populate_by_name=True)


# --- Schema ---


class XAEPResource(BaseModel):
    """The ``x-aep-resource`` annotation attached to a resource schema.

    Example::

        {
            "singular": "book",
            "plural": "books",
            "patterns": ["/publishers/{publisher}/books/{book}"],
            "parents": ["publisher"]
        }
    """

    model_config = _DOCUMENT_CONFIG

    singular: str = ""
    plural: str = ""
    patterns: list[str] = Field(default_factory=list)
    parents: list[str] = Field(default_factory=list)


class Schema(BaseModel):
    """A (possibly unresolved) JSON Schema node.

    A node whose :attr:`ref` is set is a pure indirection: its other fields
    carry no meaning until it is resolved with
    :meth:`~aepclient.openapi.document.OpenAPIDocument.dereference_schema`.
    """

    model_config = _DOCUMENT_CONFIG

    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Schema] = None
    properties: dict[str, Schema] = Field(default_factory=dict)
    ref: Optional[str] = Field(default=None, alias="$ref")
    x_aep_resource: Optional[XAEPResource] = Field(default=None, alias="x-aep-resource")
    x_aep_field_numbers: dict[int, str] = Field(
        default_factory=dict,
        alias="x-aep-field-numbers",
        description="Wire field number to property name",
    )
    read_only: bool = Field(default=False, alias="readOnly")
    required: list[str] = Field(default_factory=list)
    description: Optional[str] = None


# --- Operations ---


class MediaType(BaseModel):
    """An OpenAPI 3 *Media Type Object* (only the schema is read)."""

    model_config = _DOCUMENT_CONFIG

    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Response(BaseModel):
    """A response descriptor.

    OpenAPI 3 nests the schema under ``content``; Swagger 2.0 keeps it
    directly on the response as ``schema``.
    """

    model_config = _DOCUMENT_CONFIG

    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    """A request body descriptor, shaped like :class:`Response`."""

    model_config = _DOCUMENT_CONFIG

    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    required: bool = False
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Parameter(BaseModel):
    """An operation parameter (path, query, header, or a Swagger 2.0 body)."""

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    in_: Optional[str] = Field(default=None, alias="in")
    description: Optional[str] = None
    required: bool = False
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    type: Optional[str] = None


class Operation(BaseModel):
    """A single HTTP operation on a path item."""

    model_config = _DOCUMENT_CONFIG

    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML documents decode unquoted status codes as integers.
        if isinstance(value, dict):
            return {str(key): item for key, item in value.items()}
        return value


class PathItem(BaseModel):
    """The operations available on one path template."""

    model_config = _DOCUMENT_CONFIG

    get: Optional[Operation] = None
    patch: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None


# --- Document ---


class Components(BaseModel):
    """The OpenAPI 3 ``components`` container (only schemas are read)."""

    model_config = _DOCUMENT_CONFIG

    schemas: dict[str, Schema] = Field(default_factory=dict)


class Contact(BaseModel):
    """Contact information from the *Info Object*."""

    model_config = _DOCUMENT_CONFIG

    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class Info(BaseModel):
    """API metadata from the document's *Info Object*."""

    model_config = _DOCUMENT_CONFIG

    title: str = ""
    description: Optional[str] = None
    version: str = ""
    contact: Optional[Contact] = None


class Server(BaseModel):
    """A ``servers`` entry (OpenAPI 3 only)."""

    model_config = _DOCUMENT_CONFIG

    url: str
    description: Optional[str] = None
    variables: dict[str, Any] = Field(default_factory=dict)


class OpenAPI(BaseModel):
    """Raw OpenAPI 2.0 or 3.x document.

    Both dialects share this model; exactly one of :attr:`swagger` and
    :attr:`openapi` is expected to be set.  Use
    :class:`~aepclient.openapi.document.OpenAPIDocument` rather than this
    model directly, since it fixes the dialect once and binds the right
    schema table.
    """

    model_config = _DOCUMENT_CONFIG

    # oas 2.0 carries "swagger" at the root, 3.x carries "openapi".
    swagger: Optional[str] = None
    openapi: Optional[str] = None
    info: Info = Field(default_factory=Info)
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)
    # oas 2.0 only.
    definitions: dict[str, Schema] = Field(default_factory=dict)
    host: Optional[str] = None
    base_path: Optional[str] = Field(default=None, alias="basePath")
    schemes: list[str] = Field(default_factory=list)

    @field_validator("swagger", "openapi", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        # ``swagger: 2.0`` without quotes is a float in YAML.
        if value is None or isinstance(value, str):
            return value
        return str(value)


# --- Configuration ---


class ClientConfig(BaseModel):
    """Settings used by :meth:`~aepclient.client.Client.from_config`.

    Loaded and saved by :func:`~aepclient.config.load_config` and
    :func:`~aepclient.config.save_config`.

    Example::

        ClientConfig(
            headers={"Authorization": "Bearer ..."},
            timeout=10,
        )
    """

    headers: dict[str, str] = Field(
        default_factory=dict, description="Static headers sent with every request"
    )
    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
