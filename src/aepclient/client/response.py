"""Decode response bodies and pull item lists out of list responses.

Responses are judged by their body alone; the HTTP status code is never
inspected:

* an empty body is a successful, empty result (``{}``);
* a non-empty body must be a JSON object, otherwise
  :class:`~aepclient.exceptions.DecodeError`;
* an object with an ``error`` key raises
  :class:`~aepclient.exceptions.APIError`.

List endpoints do not agree on where the items live.  :func:`extract_list_items`
tries ``results`` first, then the resource's plural in the spellings backends
commonly use for it.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from aepclient.cases import kebab_to_camel_case, lower_first
from aepclient.exceptions import APIError, DecodeError, NoListKeyFoundError

RESULTS_KEY = "results"
ERROR_KEY = "error"


def parse_response(response: httpx.Response) -> dict[str, Any]:
    """Read and decode a response body.

    Args:
        response: A response whose body has not necessarily been read yet.

    Returns:
        The decoded JSON object, or an empty dict for an empty body.

    Raises:
        DecodeError: If the body is not valid JSON or not a JSON object.
        APIError: If the decoded object has an ``error`` key.
    """
    content = response.read()
    if not content:
        return {}

    try:
        data = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON in response body: {exc}") from exc

    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object in response body, got {type(data).__name__}"
        )

    check_errors(data)
    return data


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are accepted by json.loads but are not JSON.
    raise ValueError(f"Invalid JSON constant {token!r}")


def check_errors(data: dict[str, Any]) -> None:
    """Raise :class:`APIError` if *data* reports an error."""
    if ERROR_KEY in data:
        raise APIError(data[ERROR_KEY])


def list_key_candidates(plural: str) -> list[str]:
    """Keys that may hold a list response's items, in priority order."""
    camel = kebab_to_camel_case(plural)
    return [RESULTS_KEY, plural, camel, lower_first(camel)]


def extract_list_items(data: dict[str, Any], plural: str) -> list[dict[str, Any]]:
    """Return the items of a decoded list response.

    The first candidate key (see :func:`list_key_candidates`) whose value is
    an array wins.  Elements that are not objects are dropped.

    Raises:
        NoListKeyFoundError: If no candidate key holds an array.
    """
    candidates = list_key_candidates(plural)
    for key in candidates:
        value = data.get(key)
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
    raise NoListKeyFoundError(candidates)
