"""Tests for resource discovery in aepclient.api."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from aepclient.api import API, PatternInfo, get_pattern_info
from aepclient.exceptions import (
    CircularReferenceError,
    ResourceNotFoundError,
    SchemaNotFoundError,
    SpecParseError,
)
from aepclient.openapi.document import OpenAPIDocument


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ok(schema: dict[str, Any]) -> dict[str, Any]:
    """An OpenAPI 3 ``responses`` map with one JSON 200 response."""
    return {"200": {"content": {"application/json": {"schema": schema}}}}


def _doc(paths: dict[str, Any], schemas: dict[str, Any], **extra: Any) -> OpenAPIDocument:
    raw = {
        "openapi": "3.0.0",
        "servers": [{"url": "http://localhost:8081"}],
        "paths": paths,
        "components": {"schemas": schemas},
    }
    raw.update(extra)
    return OpenAPIDocument.from_dict(raw)


SHELF = {"type": "object", "properties": {"name": {"type": "string"}}}
SHELF_REF = {"$ref": "#/components/schemas/Shelf"}


# ---------------------------------------------------------------------------
# get_pattern_info
# ---------------------------------------------------------------------------


class TestGetPatternInfo:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/publishers", PatternInfo(is_resource_pattern=False)),
            ("/publishers/{publisher}", PatternInfo(is_resource_pattern=True)),
            ("/publishers/{publisher}/books", PatternInfo(is_resource_pattern=False)),
            (
                "/publishers/{publisher}:archive",
                PatternInfo(is_resource_pattern=True, custom_method_name="archive"),
            ),
            (
                "/publishers:batchGet",
                PatternInfo(is_resource_pattern=False, custom_method_name="batchGet"),
            ),
        ],
    )
    def test_matching_paths(self, path: str, expected: PatternInfo) -> None:
        assert get_pattern_info(path) == expected

    @pytest.mark.parametrize(
        "path",
        ["/{version}/status", "/publishers/books", "/publishers/{publisher}/{book}"],
    )
    def test_non_matching_paths(self, path: str) -> None:
        assert get_pattern_info(path) is None


# ---------------------------------------------------------------------------
# OpenAPI 3 bookstore
# ---------------------------------------------------------------------------


class TestFromOpenAPIOAS3:
    @pytest.fixture
    def api(self, oas3_document: OpenAPIDocument) -> API:
        return API.from_openapi(oas3_document)

    def test_metadata(self, api: API) -> None:
        assert api.name == "Bookstore API"
        assert api.server_url == "https://bookstore.example.com"
        assert api.contact is not None
        assert api.contact.name == "Jane Doe"
        assert api.contact.email == "jane@example.com"

    def test_resources_found(self, api: API) -> None:
        assert set(api.resources) == {"publisher", "book", "publisher-edition"}

    def test_publisher(self, api: API) -> None:
        publisher = api.get_resource("publisher")
        assert publisher.plural == "publishers"
        assert publisher.pattern_elems == ["publishers", "{publisher}"]
        assert publisher.get_method is not None
        assert publisher.delete_method is not None
        assert publisher.update_method is None
        assert publisher.list_method is not None
        assert publisher.create_method is not None
        assert publisher.create_method.supports_user_settable_create is False

    def test_book(self, api: API) -> None:
        book = api.get_resource("book")
        assert book.plural == "books"
        assert book.pattern == "publishers/{publisher}/books/{book}"
        assert book.update_method is not None
        assert book.create_method.supports_user_settable_create is True
        assert book.list_method.supports_skip is True
        assert book.list_method.supports_filter is True
        assert book.list_method.has_unreachable_resources is False

    def test_book_schema_is_resolved(self, api: API) -> None:
        book = api.get_resource("book")
        assert book.schema.ref is None
        assert book.schema.required == ["price"]
        assert book.schema.x_aep_field_numbers == {1: "path", 2: "price", 3: "published"}
        assert book.schema.properties["path"].read_only is True

    def test_parents_and_children_linked(self, api: API) -> None:
        book = api.get_resource("book")
        publisher = api.get_resource("publisher")
        assert book.parents == [publisher]
        assert publisher.children == [book]
        assert book.generate_pattern_strings() == [book.pattern]

    def test_custom_methods(self, api: API) -> None:
        book = api.get_resource("book")
        assert [(m.name, m.method) for m in book.custom_methods] == [
            ("archive", "POST"),
            ("archive", "GET"),
        ]
        post, get = book.custom_methods
        assert "reason" in post.request.properties
        assert "archived" in post.response.properties
        assert get.request is None
        assert "archived" in get.response.properties

    def test_parent_prefix_stripped_from_placeholder(self, api: API) -> None:
        edition = api.get_resource("publisher-edition")
        assert edition.pattern_elems == ["publishers", "{publisher}", "editions", "{edition}"]
        assert edition.create_method is not None
        assert edition.list_method is None

    def test_schemas_exclude_resources(self, api: API) -> None:
        assert set(api.schemas) == {
            "BookAlias",
            "ListPublishersResponse",
            "ListBooksResponse",
            "ArchiveBookRequest",
            "ArchiveBookResponse",
            "Error",
        }

    def test_get_resource_unknown(self, api: API) -> None:
        with pytest.raises(ResourceNotFoundError, match='"author"'):
            api.get_resource("author")


# ---------------------------------------------------------------------------
# Swagger 2.0 bookstore
# ---------------------------------------------------------------------------


class TestFromOpenAPIOAS2:
    @pytest.fixture
    def api(self, oas2_document: OpenAPIDocument) -> API:
        return API.from_openapi(oas2_document)

    def test_server_from_host_and_base_path(self, api: API) -> None:
        assert api.server_url == "https://bookstore.example.com/v1"
        assert api.contact is None

    def test_book(self, api: API) -> None:
        assert set(api.resources) == {"book"}
        book = api.get_resource("book")
        assert book.plural == ""
        assert book.pattern_elems == ["publishers", "{publisher}", "books", "{book}"]
        assert book.get_method is not None
        assert book.delete_method is not None
        assert book.create_method.supports_user_settable_create is True
        assert book.list_method.has_unreachable_resources is True
        assert book.list_method.supports_skip is False

    def test_custom_method_body_parameter(self, api: API) -> None:
        (archive,) = api.get_resource("book").custom_methods
        assert archive.method == "POST"
        assert "reason" in archive.request.properties
        assert "price" in archive.response.properties

    def test_schemas(self, api: API) -> None:
        assert set(api.schemas) == {"ListBooksResponse", "ArchiveBookRequest"}


# ---------------------------------------------------------------------------
# Options and failure modes
# ---------------------------------------------------------------------------


class TestFromOpenAPIOptions:
    def test_explicit_server_url(self, oas3_document: OpenAPIDocument) -> None:
        api = API.from_openapi(oas3_document, server_url="http://localhost:9000")
        assert api.server_url == "http://localhost:9000"

    def test_path_prefix(self) -> None:
        doc = _doc(
            {"/api/v1/shelves/{shelf}": {"get": {"responses": _ok(SHELF_REF)}}},
            {"Shelf": SHELF},
        )
        api = API.from_openapi(doc, path_prefix="/api/v1")
        assert api.get_resource("shelf").pattern_elems == ["shelves", "{shelf}"]
        assert api.server_url == "http://localhost:8081/api/v1"

    def test_no_server_url(self) -> None:
        doc = _doc({}, {}, servers=[])
        with pytest.raises(SpecParseError, match="No server URL"):
            API.from_openapi(doc)

    def test_custom_post_without_body(self) -> None:
        doc = _doc(
            {
                "/shelves/{shelf}": {"get": {"responses": _ok(SHELF_REF)}},
                "/shelves/{shelf}:sort": {"post": {"responses": _ok(SHELF_REF)}},
            },
            {"Shelf": SHELF},
        )
        with pytest.raises(SpecParseError, match="Custom method sort"):
            API.from_openapi(doc)

    def test_custom_method_on_collection_ignored(self) -> None:
        doc = _doc(
            {
                "/shelves/{shelf}": {"get": {"responses": _ok(SHELF_REF)}},
                "/shelves:sort": {"get": {"responses": _ok(SHELF_REF)}},
            },
            {"Shelf": SHELF},
        )
        assert API.from_openapi(doc).get_resource("shelf").custom_methods == []

    def test_missing_parent(self) -> None:
        book = {
            "type": "object",
            "x-aep-resource": {
                "singular": "book",
                "plural": "books",
                "patterns": ["/shelves/{shelf}/books/{book}"],
                "parents": ["shelf"],
            },
        }
        doc = _doc(
            {"/shelves/{shelf}/books/{book}": {"get": {"responses": _ok({"$ref": "#/components/schemas/Book"})}}},
            {"Book": book},
        )
        with pytest.raises(SpecParseError, match='parent "shelf" not found'):
            API.from_openapi(doc)

    def test_inline_response_schema_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = _doc({"/shelves/{shelf}": {"get": {"responses": _ok(SHELF)}}}, {})
        with caplog.at_level(logging.WARNING, logger="aepclient"):
            api = API.from_openapi(doc)
        assert api.resources == {}
        assert "not a $ref" in caplog.text

    def test_list_without_array_property(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = _doc(
            {
                "/shelves": {
                    "get": {"responses": _ok({"$ref": "#/components/schemas/ListShelvesResponse"})},
                },
            },
            {"ListShelvesResponse": {"type": "object", "properties": {"total": {"type": "integer"}}}},
        )
        with caplog.at_level(logging.WARNING, logger="aepclient"):
            api = API.from_openapi(doc)
        assert api.resources == {}
        assert "items field is not present" in caplog.text

    def test_acronym_schema_name(self) -> None:
        doc = _doc(
            {"/http-servers/{http-server}": {"get": {"responses": _ok({"$ref": "#/components/schemas/HTTPServer"})}}},
            {"HTTPServer": {"type": "object"}},
        )
        assert set(API.from_openapi(doc).resources) == {"http-server"}

    def test_dangling_response_ref(self) -> None:
        doc = _doc({"/shelves/{shelf}": {"get": {"responses": _ok(SHELF_REF)}}}, {})
        with pytest.raises(SchemaNotFoundError) as exc_info:
            API.from_openapi(doc)
        assert exc_info.value.ref == "#/components/schemas/Shelf"

    def test_circular_response_ref(self) -> None:
        doc = _doc(
            {"/shelves/{shelf}": {"get": {"responses": _ok(SHELF_REF)}}},
            {"Shelf": {"$ref": "#/components/schemas/Shelf"}},
        )
        with pytest.raises(CircularReferenceError):
            API.from_openapi(doc)
