"""Opt-in diagnostic logging.

Every module logs through ``logging.getLogger(__name__)`` under the
``github_strategy`` namespace. The package installs a
:class:`logging.NullHandler`, so nothing is emitted until the host
configures logging. :func:`configure_logging` is a shortcut for local
debugging that attaches a Rich handler writing to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "github_strategy"


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> RichHandler:
    """Attach a :class:`~rich.logging.RichHandler` to the package logger.

    Calling it again replaces the previously installed handler.

    Args:
        verbose: Log at ``DEBUG`` instead of ``INFO``.
        console: Console to write to. Defaults to a stderr console.

    Returns:
        The installed handler.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(file=sys.stderr, stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler
