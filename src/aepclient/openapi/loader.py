"""Load OpenAPI documents from a URL or a local file.

This module handles all I/O for fetching raw OpenAPI documents and turning
them into an :class:`~aepclient.openapi.document.OpenAPIDocument`.  Content
is decoded as JSON, falling back to YAML, and must decode to a mapping.

The public functions are:

* :func:`load_openapi` -- fetch, decode, and wrap a document in one step.
* :func:`load_raw` -- fetch and decode only, returning the plain dict.

Every failure (missing file, HTTP error, undecodable content) is raised as
:class:`~aepclient.exceptions.SpecParseError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from aepclient.exceptions import SpecParseError
from aepclient.openapi.document import OpenAPIDocument


def load_openapi(source: str) -> OpenAPIDocument:
    """Load an OpenAPI document from an ``http(s)://`` URL or a file path.

    Args:
        source: A URL or a local file path.

    Returns:
        The parsed document with its dialect detected.

    Raises:
        SpecParseError: If the source cannot be read, decoded, or validated.
    """
    return OpenAPIDocument.from_dict(load_raw(source))


def load_raw(source: str) -> dict[str, Any]:
    """Fetch and decode a document without validating it.

    Args:
        source: A URL (http/https) or a local file path.

    Returns:
        The decoded document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if is_url(source):
        return _load_from_url(source)
    return _load_from_file(source)


def is_url(source: str) -> bool:
    """Return True if *source* uses the http or https scheme."""
    return source.lower().startswith(("http://", "https://"))


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP(S).

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching OpenAPI document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch OpenAPI document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a document from a local file.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"OpenAPI document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read OpenAPI document {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"OpenAPI document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; a ``"json"`` hint
    disables the YAML fallback.

    Raises:
        SpecParseError: If the content cannot be parsed as either format, or
            does not decode to a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse OpenAPI document as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc

    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"OpenAPI document must be a JSON/YAML object (got {kind})")
    return result
