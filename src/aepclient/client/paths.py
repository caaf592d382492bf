"""Turn a resource pattern and a parameter set into a collection URL.

A pattern alternates literal segments (even indices) and ``{placeholder}``
segments (odd indices).  Its last element names the resource itself and is
never part of a collection URL::

    >>> base_path(["publishers", "{publisher}", "books", "{book}"],
    ...           "http://host/", {"publisher": "my-pub"})
    'http://host/publishers/my-pub/books'

A parameter value may be a full resource path (``publishers/my-pub``); only
its last segment is used.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from aepclient.exceptions import MissingParameterError


def base_path(
    pattern_elems: Sequence[str],
    server_url: str,
    parameters: Mapping[str, str],
    suffix: str = "",
) -> str:
    """Build the URL of the collection a pattern's resource lives in.

    Args:
        pattern_elems: The resource pattern, e.g.
            ``["publishers", "{publisher}", "books", "{book}"]``.
        server_url: Base server address; one trailing ``/`` is dropped.
        parameters: Placeholder name to value.  Every placeholder except the
            last must be present.
        suffix: Appended verbatim (used for ``?id=...``).

    Returns:
        The collection URL.

    Raises:
        MissingParameterError: If a placeholder has no value in *parameters*.
    """
    url_elems = [server_url.removesuffix("/")]
    for i, elem in enumerate(pattern_elems[:-1]):
        if i % 2 == 0:
            url_elems.append(elem)
            continue
        name = elem[1:-1]
        if name not in parameters:
            raise MissingParameterError(name, dict(parameters))
        url_elems.append(parameters[name].rsplit("/", 1)[-1])

    result = "/".join(url_elems)
    if suffix:
        result += suffix
    return result


def join_path(server_url: str, path: str) -> str:
    """Join a server address and a resource path with exactly one ``/``."""
    return f"{server_url.removesuffix('/')}/{path.removeprefix('/')}"
