"""Exception hierarchy for aepclient.

All exceptions inherit from :class:`AepClientError`, so callers can catch a
single type for every failure the library raises itself.  Transport-level
failures raised by :mod:`httpx` (connection refused, timeouts, ...) are *not*
wrapped and propagate unchanged.

Subclass hierarchy::

    AepClientError
    +-- MissingParameterError
    +-- BodySerializationError
    +-- DecodeError
    +-- APIError
    +-- NoListKeyFoundError
    +-- SchemaNotFoundError
    +-- CircularReferenceError
    +-- SpecParseError
    +-- ResourceNotFoundError
    +-- ConfigError
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class AepClientError(Exception):
    """Base exception for all aepclient errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameterError(AepClientError):
    """Raised when a pattern placeholder has no value in the parameter set."""

    def __init__(self, parameter: str, parameters: Optional[dict[str, str]] = None):
        available = ", ".join(sorted(parameters or {})) or "none"
        super().__init__(
            f"Parameter '{parameter}' not found in parameters (available: {available})"
        )
        self.parameter = parameter


class BodySerializationError(AepClientError):
    """Raised when a request body cannot be serialised to JSON."""


class DecodeError(AepClientError):
    """Raised when a non-empty response body is not a JSON object."""


class APIError(AepClientError):
    """Raised when a decoded response carries an ``error`` key.

    The HTTP status code plays no part in this decision: a 200 response with
    an ``error`` key is still a failure.

    Attributes:
        error: The raw value found under the ``error`` key.
    """

    def __init__(self, error: Any):
        super().__init__(f"Returned errors: {error!r}")
        self.error = error


class NoListKeyFoundError(AepClientError):
    """Raised when a list response has none of the recognised item keys."""

    def __init__(self, candidates: Sequence[str]):
        super().__init__(
            "No valid list key was found (tried: "
            + ", ".join(repr(c) for c in candidates)
            + ")"
        )
        self.candidates = list(candidates)


class SchemaNotFoundError(AepClientError):
    """Raised when a ``$ref`` pointer names no entry in the schema table."""

    def __init__(self, ref: str):
        super().__init__(f"Schema '{ref}' not found")
        self.ref = ref


class CircularReferenceError(AepClientError):
    """Raised when a chain of ``$ref`` pointers loops back on itself."""

    def __init__(self, chain: Sequence[str]):
        super().__init__("Circular schema reference: " + " -> ".join(chain))
        self.chain = list(chain)


class SpecParseError(AepClientError):
    """Raised when an OpenAPI document cannot be loaded, parsed, or interpreted."""


class ResourceNotFoundError(AepClientError):
    """Raised when an :class:`~aepclient.api.API` has no resource by that name."""

    def __init__(self, name: str):
        super().__init__(f'Resource "{name}" not found')
        self.name = name


class ConfigError(AepClientError):
    """Raised for configuration problems (unreadable file, invalid JSON, bad values)."""
