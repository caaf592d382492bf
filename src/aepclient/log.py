"""Logging setup for applications embedding aepclient.

The library itself only creates loggers under the ``aepclient`` namespace and
never configures handlers.  Applications that want readable diagnostics call
:func:`configure_logging` once at startup; records then go to stderr through
a Rich handler, keeping stdout free for data.

Colour follows `clig.dev <https://clig.dev/>`_ conventions: it is disabled
when ``NO_COLOR`` is set (any value), when ``TERM=dumb``, or when the caller
passes ``no_color=True``.
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "aepclient"


def configure_logging(verbose: bool = False, no_color: bool = False) -> logging.Logger:
    """Attach a stderr Rich handler to the ``aepclient`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: Log at DEBUG instead of WARNING.  DEBUG includes every
            request and response when :class:`~aepclient.client.LoggingHooks`
            is in use.
        no_color: Disable colour regardless of the environment.

    Returns:
        The configured ``aepclient`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    console = Console(
        file=sys.stderr,
        stderr=True,
        no_color=no_color or _should_disable_color(),
    )
    handler = RichHandler(console=console, show_path=verbose, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False
