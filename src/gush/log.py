"""Logging setup for the gush command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route the ``gush`` logger hierarchy through a rich handler on stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        console: Console to render into. Defaults to a stderr console.
    """
    logger = logging.getLogger("gush")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
