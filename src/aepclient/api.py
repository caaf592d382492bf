"""Discover resources in an OpenAPI document.

:meth:`API.from_openapi` walks the document's paths and groups the operations
it finds into :class:`~aepclient.resource.Resource` definitions, which the
CRUD :class:`~aepclient.client.Client` then uses to build URLs.

A path takes part in discovery only if its segments alternate literal and
``{placeholder}`` segments, starting with a literal:

* an even number of segments (``/publishers/{publisher}``) is a *resource*
  path carrying get, update, and delete;
* an odd number (``/publishers/{publisher}/books``) is a *collection* path
  carrying create and list;
* a ``:name`` suffix (``/publishers/{publisher}:archive``) marks a custom
  method of the resource at that pattern.

Every other path is ignored.  A resource is named after the schema its
operations return: ``#/components/schemas/BookEdition`` becomes
``book-edition``.  An ``x-aep-resource`` annotation on that schema, when
present, overrides the names and pattern found from the paths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from aepclient.cases import kebab_to_pascal_case, pascal_case_to_kebab_case
from aepclient.exceptions import ResourceNotFoundError, SpecParseError
from aepclient.models import Contact, Operation, PathItem, Schema
from aepclient.openapi.document import Dialect, OpenAPIDocument
from aepclient.resource import (
    CreateMethod,
    CustomMethod,
    DeleteMethod,
    GetMethod,
    ListMethod,
    Resource,
    UpdateMethod,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "200"


@dataclass
class PatternInfo:
    """Classification of a path by :func:`get_pattern_info`."""

    is_resource_pattern: bool
    custom_method_name: str = ""


@dataclass
class API:
    """The resources and remaining schemas of one API."""

    server_url: str
    name: str
    contact: Optional[Contact] = None
    resources: dict[str, Resource] = field(default_factory=dict)
    schemas: dict[str, Schema] = field(default_factory=dict)

    def get_resource(self, singular: str) -> Resource:
        """Return the resource named *singular*.

        Raises:
            ResourceNotFoundError: If the API has no such resource.
        """
        try:
            return self.resources[singular]
        except KeyError:
            raise ResourceNotFoundError(singular) from None

    @classmethod
    def from_openapi(
        cls,
        document: OpenAPIDocument,
        server_url: str = "",
        path_prefix: str = "",
    ) -> API:
        """Build an :class:`API` from a parsed document.

        Args:
            document: The parsed OpenAPI document (either dialect).
            server_url: Server address.  Defaults to the document's first
                server (or Swagger ``schemes``/``host``/``basePath``) plus
                *path_prefix*.
            path_prefix: Leading path portion stripped from every path before
                it is matched against the resource conventions.

        Raises:
            SpecParseError: If no server address can be determined, a custom
                POST method has no request body, or an ``x-aep-resource``
                parent is missing from the schema table.
            SchemaNotFoundError: If a response, request, or parent schema
                ``$ref`` names no entry in the schema table.
            CircularReferenceError: If such a ``$ref`` chain loops.
        """
        builder = _ResourceBuilder(document)
        for path, path_item in document.api.paths.items():
            builder.add_path(path.removeprefix(path_prefix), path_item)
        builder.attach_custom_methods()

        if not server_url:
            server_url = _default_server_url(document, path_prefix)
        if not server_url:
            raise SpecParseError("No server URL found in openapi, and none was provided")

        schemas = {
            key: schema
            for key, schema in document.schemas.items()
            if pascal_case_to_kebab_case(key) not in builder.resources
        }

        info = document.api.info
        return cls(
            server_url=server_url,
            name=info.title,
            contact=_get_contact(info.contact),
            resources=builder.resources,
            schemas=schemas,
        )


def get_pattern_info(path: str) -> Optional[PatternInfo]:
    """Classify *path*, or return ``None`` if it does not follow the conventions."""
    custom_method_name = ""
    if ":" in path:
        path, custom_method_name = path.split(":", 1)

    pattern = path.split("/")[1:]
    for i, segment in enumerate(pattern):
        wrapped = segment.startswith("{") and segment.endswith("}")
        if wrapped != (i % 2 == 1):
            return None

    return PatternInfo(
        is_resource_pattern=len(pattern) % 2 == 0,
        custom_method_name=custom_method_name,
    )


class _ResourceBuilder:
    """Accumulates resources across the paths of one document."""

    def __init__(self, document: OpenAPIDocument) -> None:
        self.document = document
        self.resources: dict[str, Resource] = {}
        self.custom_methods: dict[str, list[CustomMethod]] = {}

    def add_path(self, path: str, path_item: PathItem) -> None:
        info = get_pattern_info(path)
        if info is None:
            logger.debug("Skipping %s: not a resource path", path)
            return

        if info.custom_method_name:
            if info.is_resource_pattern:
                self._add_custom_methods(path, info.custom_method_name, path_item)
            else:
                logger.debug("Skipping %s: custom method on a collection", path)
            return

        found: dict[str, object] = {}
        if info.is_resource_pattern:
            schema_ref = self._resource_methods(path_item, found)
        else:
            schema_ref = self._collection_methods(path, path_item, found)

        if schema_ref is None:
            return
        if not schema_ref.ref:
            logger.warning("Skipping %s: response schema is not a $ref", path)
            return

        singular = pascal_case_to_kebab_case(schema_ref.ref.rsplit("/", 1)[-1])
        pattern = path.split("/")[1:]
        if not info.is_resource_pattern:
            self_name = singular
            if len(pattern) >= 3:
                parent = pattern[-2][1:-1]
                if singular.startswith(parent + "-"):
                    self_name = singular[len(parent) + 1:]
            pattern.append(f"{{{self_name}}}")

        schema = self.document.dereference_schema(schema_ref)
        resource = self._get_or_populate(singular, pattern, schema)
        for attr, method in found.items():
            setattr(resource, attr, method)

    def attach_custom_methods(self) -> None:
        for pattern, methods in self.custom_methods.items():
            for resource in self.resources.values():
                if resource.pattern == pattern:
                    resource.custom_methods = methods
                    break

    # ------------------------------------------------------------------ #
    # Per path kind
    # ------------------------------------------------------------------ #

    def _resource_methods(self, path_item: PathItem, found: dict[str, object]) -> Optional[Schema]:
        schema_ref: Optional[Schema] = None
        if path_item.delete is not None:
            found["delete_method"] = DeleteMethod()
        if path_item.get is not None and SUCCESS_STATUS in path_item.get.responses:
            schema_ref = self._response_schema(path_item.get)
            found["get_method"] = GetMethod()
        if path_item.patch is not None and SUCCESS_STATUS in path_item.patch.responses:
            schema_ref = self._response_schema(path_item.patch)
            found["update_method"] = UpdateMethod()
        return schema_ref

    def _collection_methods(self, path: str, path_item: PathItem, found: dict[str, object]) -> Optional[Schema]:
        schema_ref: Optional[Schema] = None
        post = path_item.post
        if post is not None and SUCCESS_STATUS in post.responses:
            schema_ref = self._response_schema(post)
            found["create_method"] = CreateMethod(
                supports_user_settable_create=any(p.name == "id" for p in post.parameters),
            )

        get = path_item.get
        if get is not None and SUCCESS_STATUS in get.responses:
            response_schema = self._response_schema(get)
            if response_schema is None:
                logger.warning(
                    "Resource %s has a LIST method with a response schema, "
                    "but the response schema is null.",
                    path,
                )
                return schema_ref

            resolved = self.document.dereference_schema(response_schema)
            array_property = next(
                (prop for prop in resolved.properties.values() if prop.type == "array"),
                None,
            )
            if array_property is None:
                logger.warning(
                    "Resource %s has a LIST method with a response schema, "
                    "but the items field is not present or is not an array.",
                    path,
                )
                return schema_ref

            schema_ref = array_property.items
            list_method = ListMethod()
            for param in get.parameters:
                if param.name == "skip":
                    list_method.supports_skip = True
                elif param.name == "unreachable":
                    list_method.has_unreachable_resources = True
                elif param.name == "filter":
                    list_method.supports_filter = True
            found["list_method"] = list_method
        return schema_ref

    def _add_custom_methods(self, path: str, name: str, path_item: PathItem) -> None:
        pattern = path.split(":", 1)[0][1:]
        methods = self.custom_methods.setdefault(pattern, [])

        post = path_item.post
        if post is not None and SUCCESS_STATUS in post.responses:
            request = self._request_schema(post)
            if request is None:
                raise SpecParseError(
                    f"Custom method {name} has a POST response but no request body"
                )
            methods.append(
                CustomMethod(
                    name=name,
                    method="POST",
                    request=self.document.dereference_schema(request),
                    response=self._resolved_response_schema(post),
                )
            )

        get = path_item.get
        if get is not None and SUCCESS_STATUS in get.responses:
            methods.append(
                CustomMethod(
                    name=name,
                    method="GET",
                    request=None,
                    response=self._resolved_response_schema(get),
                )
            )

    # ------------------------------------------------------------------ #
    # Schemas and resources
    # ------------------------------------------------------------------ #

    def _response_schema(self, operation: Operation) -> Optional[Schema]:
        return self.document.schema_from_response(operation.responses[SUCCESS_STATUS])

    def _resolved_response_schema(self, operation: Operation) -> Optional[Schema]:
        schema = self._response_schema(operation)
        return self.document.dereference_schema(schema) if schema is not None else None

    def _request_schema(self, operation: Operation) -> Optional[Schema]:
        if operation.request_body is not None:
            return self.document.schema_from_request_body(operation.request_body)
        if self.document.dialect is Dialect.OAS2:
            # Swagger 2.0 sends bodies as an "in: body" parameter.
            for param in operation.parameters:
                if param.in_ == "body":
                    return param.schema_
        return None

    def _get_or_populate(self, singular: str, pattern: list[str], schema: Schema) -> Resource:
        if singular in self.resources:
            return self.resources[singular]

        annotation = schema.x_aep_resource
        if annotation is not None:
            resource = Resource(
                singular=annotation.singular or singular,
                plural=annotation.plural,
                pattern_elems=(
                    annotation.patterns[0].removeprefix("/").split("/")
                    if annotation.patterns
                    else pattern
                ),
                schema=schema,
            )
        else:
            resource = Resource(singular=singular, pattern_elems=pattern, schema=schema)

        # Register before resolving parents so a parent chain that leads back
        # here reuses this resource.
        self.resources[singular] = resource

        if annotation is not None:
            for parent_singular in annotation.parents:
                parent_schema = self._parent_schema(parent_singular)
                if parent_schema is None:
                    raise SpecParseError(
                        f'Resource "{singular}" parent "{parent_singular}" not found'
                    )
                parent = self._get_or_populate(
                    parent_singular, [], self.document.dereference_schema(parent_schema)
                )
                resource.parents.append(parent)
                parent.children.append(resource)

        return resource

    def _parent_schema(self, parent_singular: str) -> Optional[Schema]:
        schemas = self.document.schemas
        return schemas.get(parent_singular) or schemas.get(kebab_to_pascal_case(parent_singular))


def _default_server_url(document: OpenAPIDocument, path_prefix: str) -> str:
    api = document.api
    if api.servers:
        return api.servers[0].url + path_prefix
    if document.dialect is Dialect.OAS2 and api.host:
        scheme = api.schemes[0] if api.schemes else "https"
        return f"{scheme}://{api.host}{api.base_path or ''}{path_prefix}"
    return ""


def _get_contact(contact: Optional[Contact]) -> Optional[Contact]:
    if contact is None or not (contact.name or contact.email or contact.url):
        return None
    return contact
