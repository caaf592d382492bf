"""In-memory resource definitions consumed by the CRUD client.

A :class:`Resource` describes one resource type of an API: its names, its
URL pattern, its schema, and which standard methods it supports.  Resources
are normally produced by :meth:`aepclient.api.API.from_openapi`, but they are
plain dataclasses and can be built by hand::

    book = Resource(
        singular="book",
        plural="books",
        pattern_elems=["publishers", "{publisher}", "books", "{book}"],
        create_method=CreateMethod(supports_user_settable_create=True),
    )

Parents and children reference each other, so they are excluded from
``repr`` and equality compares identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from aepclient.models import Schema


@dataclass
class GetMethod:
    pass


@dataclass
class UpdateMethod:
    pass


@dataclass
class DeleteMethod:
    pass


@dataclass
class CreateMethod:
    """Create support for a resource.

    Attributes:
        supports_user_settable_create: The caller may choose the new
            resource's id; it is read from the ``id`` field of the body.
    """

    supports_user_settable_create: bool = False


@dataclass
class ListMethod:
    """List support and the optional list parameters the endpoint accepts."""

    has_unreachable_resources: bool = False
    supports_filter: bool = False
    supports_skip: bool = False


@dataclass
class CustomMethod:
    """A non-standard method exposed as ``POST|GET /pattern:name``."""

    name: str
    method: str
    request: Optional[Schema] = None
    response: Optional[Schema] = None


@dataclass(eq=False)
class Resource:
    """One resource type and the methods it supports."""

    singular: str
    plural: str = ""
    pattern_elems: list[str] = field(default_factory=list)
    schema: Schema = field(default_factory=Schema)
    parents: list[Resource] = field(default_factory=list, repr=False)
    children: list[Resource] = field(default_factory=list, repr=False)
    get_method: Optional[GetMethod] = None
    list_method: Optional[ListMethod] = None
    create_method: Optional[CreateMethod] = None
    update_method: Optional[UpdateMethod] = None
    delete_method: Optional[DeleteMethod] = None
    custom_methods: list[CustomMethod] = field(default_factory=list)

    @property
    def pattern(self) -> str:
        """The pattern joined back into a path (``publishers/{publisher}/books/{book}``)."""
        return "/".join(self.pattern_elems)

    @property
    def collection_name(self) -> str:
        """The plural with the first parent's singular prefix removed.

        ``publisher-editions`` under a ``publisher`` parent is ``editions``.
        """
        name = self.plural
        if self.parents:
            parent = self.parents[0].singular
            if name.startswith(parent):
                name = name[len(parent) + 1:]
        return name

    def generate_pattern_strings(self) -> list[str]:
        """Build the resource's pattern from its collection name and parents."""
        pattern = f"{self.collection_name}/{{{self.singular}}}"
        if self.parents:
            parent_patterns = self.parents[0].generate_pattern_strings()
            pattern = f"{parent_patterns[0]}/{pattern}"
        return [pattern]
